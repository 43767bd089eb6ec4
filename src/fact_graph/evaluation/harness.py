"""Evaluation harness for clustering runs.

Evaluates predicted labels against the true labels of a corpus and
supports sweeping the cluster count over one precomputed distance
matrix for parameter tuning.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import ValidationError

from fact_graph.clustering import ClusterResult, cluster
from fact_graph.corpus import Corpus
from fact_graph.distance.matrix import CorpusFeatures, DistanceMatrix
from fact_graph.errors import ConfigurationError
from fact_graph.evaluation.metrics import MetricsResult, compute_metrics
from fact_graph.pipeline.config import ClusterConfig


@dataclass
class EvaluationResult:
    """Result of a single evaluation run."""

    k: int | None
    metrics: MetricsResult
    cluster_result: ClusterResult


def evaluate(corpus: Corpus, cluster_result: ClusterResult) -> EvaluationResult:
    """Score one clustering of ``corpus`` against its true labels."""
    metrics = compute_metrics(cluster_result.labels, corpus.true_labels)
    return EvaluationResult(k=cluster_result.k, metrics=metrics, cluster_result=cluster_result)


def sweep_configs(config: ClusterConfig, ks: list[int]) -> list[ClusterConfig]:
    """One clustering config per cluster count of a sweep.

    The k-means policy is kept; every other policy is swept with
    agglomerative clustering.

    Raises:
        ConfigurationError: If ``ks`` is empty or holds a non-positive count.
    """
    if not ks:
        raise ConfigurationError("A sweep needs at least one cluster count")
    policy = "kmeans" if config.policy == "kmeans" else "agglomerative"
    configs = []
    for k in ks:
        data = {**config.model_dump(), "k": k, "policy": policy}
        try:
            configs.append(ClusterConfig.model_validate(data))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid cluster count {k!r}: {e}") from e
    return configs


def run_k_sweep(
    corpus: Corpus,
    matrix: DistanceMatrix,
    config: ClusterConfig,
    ks: list[int],
    features: CorpusFeatures | None = None,
) -> list[EvaluationResult]:
    """Cluster the same matrix once per cluster count and evaluate each.

    Args:
        corpus: Documents in canonical order.
        matrix: Precomputed distances, reused for every run.
        config: Base clustering config; ``k`` is replaced per run.
        ks: Cluster counts to try.
        features: Feature vectors of the corpus, for the kmeans policy.

    Returns:
        List of EvaluationResult, one per cluster count.
    """
    return [
        evaluate(corpus, cluster(corpus, matrix, run_config, features))
        for run_config in sweep_configs(config, ks)
    ]


def format_sweep(results: list[EvaluationResult]) -> str:
    """Render sweep results as a comparison table."""
    lines = [
        "",
        "=" * 72,
        "  Cluster Count Sweep",
        "=" * 72,
        f"  {'k':>5s}  {'Precision':>10s}  {'Recall':>8s}  {'F1':>8s}  {'ARI':>8s}  {'Purity':>8s}",
        "-" * 72,
    ]
    for r in results:
        m = r.metrics
        lines.append(
            f"  {r.k:>5d}  {m.precision:>10.4f}  {m.recall:>8.4f}  {m.f1:>8.4f}  "
            f"{m.adjusted_rand_index:>8.4f}  {m.purity:>8.4f}"
        )
    lines.append("=" * 72)
    lines.append("")
    return "\n".join(lines)
