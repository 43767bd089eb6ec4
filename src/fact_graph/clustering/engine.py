"""Clustering engine: corpus + distance matrix in, one label per document out.

Validates the configured cluster count before any work starts, runs the
configured policy, and checks every resulting cluster for cohesion.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from fact_graph.clustering.agglomerative import agglomerative_labels
from fact_graph.clustering.coherence import is_cluster_cohesive
from fact_graph.clustering.kmeans import kmeans_labels
from fact_graph.clustering.threshold import threshold_labels
from fact_graph.corpus import Corpus
from fact_graph.distance.matrix import CorpusFeatures, DistanceMatrix
from fact_graph.errors import ConfigurationError, EmptyCorpusError
from fact_graph.pipeline.config import ClusterConfig

logger = structlog.get_logger()


@dataclass
class ClusterResult:
    """Result of clustering a corpus.

    Attributes:
        labels: Predicted cluster id per document, in corpus order.
        clusters: Member document indices per cluster id.
        flagged_clusters: Ids of clusters that failed the cohesion checks.
        singleton_count: Number of single-document clusters.
        total_cluster_count: Number of clusters.
        k: Requested cluster count (``None`` for the threshold policy).
    """

    labels: list[int]
    clusters: list[list[int]] = field(default_factory=list)
    flagged_clusters: list[int] = field(default_factory=list)
    singleton_count: int = 0
    total_cluster_count: int = 0
    k: int | None = None


def validate_cluster_config(config: ClusterConfig) -> None:
    """Reject configurations that cannot work on any corpus.

    Runs before any stage touches the filesystem.

    Raises:
        ConfigurationError: If a policy that needs ``k`` has none and
            ``diagnostic_true_k`` is off.
    """
    if config.policy != "threshold" and config.k is None and not config.diagnostic_true_k:
        raise ConfigurationError(
            f"The {config.policy} policy needs a cluster count: set clustering.k"
        )


def resolve_k(config: ClusterConfig, corpus: Corpus) -> int | None:
    """Determine and validate the cluster count for a run.

    Call this before computing distances so that configuration problems
    surface before any work is done.

    Returns:
        The cluster count, or ``None`` for the threshold policy.

    Raises:
        EmptyCorpusError: If the corpus is empty.
        ConfigurationError: If ``k`` is missing or larger than the corpus.
    """
    validate_cluster_config(config)
    if len(corpus) == 0:
        raise EmptyCorpusError("Cannot cluster an empty corpus")

    if config.policy == "threshold":
        return None

    k = config.k
    if k is None:
        k = len(set(corpus.true_labels))
        logger.warning("k_from_ground_truth", k=k)

    if k > len(corpus):
        raise ConfigurationError(
            f"Cluster count {k} exceeds corpus size {len(corpus)}"
        )
    return k


def cluster(
    corpus: Corpus,
    matrix: DistanceMatrix,
    config: ClusterConfig,
    features: CorpusFeatures | None = None,
) -> ClusterResult:
    """Partition the corpus and label every document.

    Args:
        corpus: Documents in canonical order.
        matrix: Pairwise distances, rows in the same order as ``corpus``.
        config: Clustering policy and constraints.
        features: Feature vectors of the corpus; required by the kmeans
            policy.

    Returns:
        A ``ClusterResult`` whose ``labels`` align one-to-one with the
        corpus.
    """
    k = resolve_k(config, corpus)
    if len(matrix) != len(corpus):
        raise ValueError(
            f"Distance matrix covers {len(matrix)} documents, corpus has {len(corpus)}"
        )

    if config.policy == "threshold":
        labels = threshold_labels(matrix, config.max_distance)
    elif config.policy == "kmeans":
        if features is None or len(features) != len(corpus):
            raise ValueError("The kmeans policy needs the feature vectors of the corpus")
        labels = kmeans_labels(features.dense(), k, config.random_state, config.n_init)
    else:
        labels = agglomerative_labels(matrix, k, config.linkage)

    clusters: list[list[int]] = [[] for _ in range(max(labels) + 1)]
    for doc, label in enumerate(labels):
        clusters[label].append(doc)

    flagged: list[int] = []
    singleton_count = 0
    for cluster_id, members in enumerate(clusters):
        if len(members) == 1:
            singleton_count += 1
        elif not is_cluster_cohesive(members, matrix, config):
            flagged.append(cluster_id)
            logger.warning(
                "cluster_not_cohesive",
                cluster=cluster_id,
                size=len(members),
                documents=[corpus[d].name for d in members[:5]],
            )

    logger.info(
        "clustering_complete",
        policy=config.policy,
        linkage=config.linkage if config.policy == "agglomerative" else None,
        k=k,
        clusters=len(clusters),
        singletons=singleton_count,
        flagged=len(flagged),
    )
    return ClusterResult(
        labels=labels,
        clusters=clusters,
        flagged_clusters=flagged,
        singleton_count=singleton_count,
        total_cluster_count=len(clusters),
        k=k,
    )
