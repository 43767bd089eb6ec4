"""Statistical feature reduction for the document-feature matrix.

Two optional stages run between vectorisation and comparison:

- ``trim_features`` drops low-information columns: those whose sample
  standard deviation is below ``min_std`` and those whose mean is small
  relative to their spread (``mean / std < min_mean_std_ratio``);
- ``project`` maps the rows onto their leading principal components.
"""

from __future__ import annotations

import numpy as np
import structlog
from scipy import sparse
from sklearn.decomposition import PCA
from sklearn.utils.sparsefuncs import mean_variance_axis

logger = structlog.get_logger()


def trim_features(
    X: sparse.csr_matrix,
    min_std: float | None = None,
    min_mean_std_ratio: float | None = None,
) -> tuple[sparse.csr_matrix, np.ndarray]:
    """Keep the columns of ``X`` that pass both spread thresholds.

    Standard deviations use one delta degree of freedom, so trimming
    needs at least two documents; smaller corpora are returned as is.

    Returns:
        The trimmed matrix and the indices of the kept columns.
    """
    n_docs, n_features = X.shape
    keep = np.arange(n_features)
    if (min_std is None and min_mean_std_ratio is None) or n_features == 0:
        return X, keep
    if n_docs < 2:
        logger.info("feature_trim_skipped", documents=n_docs)
        return X, keep

    means, variances = mean_variance_axis(sparse.csr_matrix(X, dtype=np.float64), axis=0)
    stds = np.sqrt(variances * n_docs / (n_docs - 1))

    mask = np.ones(n_features, dtype=bool)
    if min_std is not None:
        mask &= stds >= min_std
    if min_mean_std_ratio is not None:
        mask &= means >= min_mean_std_ratio * stds
    keep = np.flatnonzero(mask)
    return sparse.csr_matrix(X[:, keep]), keep


def project(X, n_components: int, random_state: int = 0) -> np.ndarray:
    """Project the rows of ``X`` onto their leading principal components.

    ``n_components`` is capped at ``min(documents, features)``.  A corpus
    of fewer than two documents has no principal components.
    """
    dense = X.toarray() if sparse.issparse(X) else np.asarray(X, dtype=np.float64)
    n_docs, n_features = dense.shape
    limit = min(n_docs, n_features)
    if limit == 0 or n_docs < 2:
        return np.zeros((n_docs, 0))
    if n_components > limit:
        logger.info("pca_components_capped", requested=n_components, used=limit)
        n_components = limit
    pca = PCA(n_components=n_components, svd_solver="full", random_state=random_state)
    return pca.fit_transform(dense)
