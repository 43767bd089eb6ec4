"""Evaluation metrics for predicted document clusters.

Predicted cluster ids live in their own id space, so agreement with the
true labels is measured on document pairs (same cluster or not), with
the adjusted Rand index and purity, and with accuracy after a greedy
one-to-one alignment of predicted clusters to true labels.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from math import comb

from sklearn.metrics import adjusted_rand_score


@dataclass
class MetricsResult:
    """Container for evaluation metrics."""

    precision: float
    recall: float
    f1: float
    adjusted_rand_index: float
    purity: float
    aligned_accuracy: float
    true_positives: int
    false_positives: int
    false_negatives: int
    true_negatives: int
    document_count: int
    predicted_cluster_count: int
    true_cluster_count: int


def align_labels(
    predicted: Sequence[Hashable], truth: Sequence[Hashable]
) -> dict[Hashable, Hashable]:
    """Greedily map predicted clusters one-to-one onto true labels.

    Repeatedly picks the (predicted cluster, true label) pair sharing the
    most documents among those not yet mapped.  Ties go to the earliest
    predicted cluster, then the earliest true label, in order of first
    appearance.  Predicted clusters left over once every true label is
    used stay unmapped.
    """
    pred_order = list(dict.fromkeys(predicted))
    true_order = list(dict.fromkeys(truth))
    pred_rank = {p: i for i, p in enumerate(pred_order)}
    true_rank = {t: i for i, t in enumerate(true_order)}
    overlap = Counter(zip(predicted, truth))

    candidates = sorted(
        overlap.items(),
        key=lambda item: (-item[1], pred_rank[item[0][0]], true_rank[item[0][1]]),
    )
    mapping: dict[Hashable, Hashable] = {}
    used: set[Hashable] = set()
    for (p, t), _count in candidates:
        if p in mapping or t in used:
            continue
        mapping[p] = t
        used.add(t)
    return mapping


def compute_metrics(
    predicted: Sequence[Hashable], truth: Sequence[Hashable]
) -> MetricsResult:
    """Compare a predicted partition against the true labels.

    Args:
        predicted: Predicted cluster id per document.
        truth: True label per document, aligned with ``predicted``.

    Returns:
        MetricsResult with pairwise precision/recall/F1, ARI, purity,
        aligned accuracy, and the pair confusion matrix.

    Raises:
        ValueError: If the two sequences differ in length.
    """
    if len(predicted) != len(truth):
        raise ValueError(
            f"Label sequences differ in length: {len(predicted)} != {len(truth)}"
        )
    n = len(predicted)

    contingency = Counter(zip(predicted, truth))
    pred_sizes = Counter(predicted)
    true_sizes = Counter(truth)

    # Pair confusion matrix
    total_pairs = comb(n, 2)
    tp = sum(comb(c, 2) for c in contingency.values())
    pred_pairs = sum(comb(c, 2) for c in pred_sizes.values())
    true_pairs = sum(comb(c, 2) for c in true_sizes.values())
    fp = pred_pairs - tp
    fn = true_pairs - tp
    tn = total_pairs - tp - fp - fn

    precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
    recall = tp / (tp + fn) if (tp + fn) > 0 else 0.0
    f1 = 2 * precision * recall / (precision + recall) if (precision + recall) > 0 else 0.0

    ari = float(adjusted_rand_score(list(truth), list(predicted))) if total_pairs else 1.0

    best_overlap: dict[Hashable, int] = {}
    for (p, _t), count in contingency.items():
        best_overlap[p] = max(best_overlap.get(p, 0), count)
    purity = sum(best_overlap.values()) / n if n else 0.0

    mapping = align_labels(predicted, truth)
    correct = sum(1 for p, t in zip(predicted, truth) if mapping.get(p) == t)
    aligned_accuracy = correct / n if n else 0.0

    return MetricsResult(
        precision=precision,
        recall=recall,
        f1=f1,
        adjusted_rand_index=ari,
        purity=purity,
        aligned_accuracy=aligned_accuracy,
        true_positives=tp,
        false_positives=fp,
        false_negatives=fn,
        true_negatives=tn,
        document_count=n,
        predicted_cluster_count=len(pred_sizes),
        true_cluster_count=len(true_sizes),
    )


def format_metrics(result: MetricsResult) -> str:
    """Format metrics for terminal display.

    Args:
        result: MetricsResult to format.

    Returns:
        Human-readable string representation of the metrics.
    """
    lines = [
        "",
        "=" * 50,
        "  Clustering Agreement",
        "=" * 50,
        "",
        f"  Documents:  {result.document_count}",
        f"  Clusters:   {result.predicted_cluster_count} predicted, "
        f"{result.true_cluster_count} true",
        "",
        f"  Pair Precision:  {result.precision:.4f}",
        f"  Pair Recall:     {result.recall:.4f}",
        f"  Pair F1:         {result.f1:.4f}",
        f"  Adjusted Rand:   {result.adjusted_rand_index:.4f}",
        f"  Purity:          {result.purity:.4f}",
        f"  Accuracy:        {result.aligned_accuracy:.4f}",
        "",
        "  Pair Confusion Matrix:",
        f"    True Positives:   {result.true_positives}",
        f"    False Positives:  {result.false_positives}",
        f"    False Negatives:  {result.false_negatives}",
        f"    True Negatives:   {result.true_negatives}",
        "=" * 50,
        "",
    ]
    return "\n".join(lines)
