"""Pipeline configuration with sensible defaults.

All parameters can be overridden via ``config/pipeline.yaml``.  If the
file does not exist, defaults are used.  Every model is frozen: a run
receives one immutable ``PipelineConfig`` value and threads it through
the graph builder, distance engine, and clustering engine.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from fact_graph.errors import ConfigurationError

ExtractionStrategy = Literal["sentence_cooccurrence", "hierarchical", "sentence_link"]
DistanceMetricName = Literal["weighted_jaccard", "cosine", "euclidean"]
Linkage = Literal["single", "complete", "average"]
ClusterPolicy = Literal["agglomerative", "threshold", "kmeans"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TierWeights(_Frozen):
    """Weights for term pairs sharing a tier of the document hierarchy."""

    self_pair: float = Field(0.0, ge=0.0)
    sentence: float = Field(1.0, ge=0.0)
    paragraph: float = Field(0.5, ge=0.0)
    document: float = Field(0.0, ge=0.0)

    @model_validator(mode="after")
    def warn_if_all_zero(self) -> "TierWeights":
        """Log a warning if no tier produces any facts."""
        if not any((self.self_pair, self.sentence, self.paragraph, self.document)):
            structlog.get_logger().warning("tier_weights_all_zero")
        return self


class ExtractionConfig(_Frozen):
    """How facts are extracted from a cleaned document."""

    strategy: ExtractionStrategy = "sentence_cooccurrence"
    tier_weights: TierWeights = TierWeights()
    strict: bool = False


class DistanceConfig(_Frozen):
    """How two fact graphs are compared.

    ``min_feature_std`` and ``min_feature_mean_std_ratio`` drop
    low-information feature columns before comparison;
    ``pca_components`` projects the remaining columns onto that many
    principal components.  All three are off by default.
    """

    metric: DistanceMetricName = "weighted_jaccard"
    min_document_frequency: int = Field(1, ge=1)
    min_feature_std: float | None = Field(None, ge=0.0)
    min_feature_mean_std_ratio: float | None = Field(None, ge=0.0)
    pca_components: int | None = Field(None, ge=1)

    @model_validator(mode="after")
    def check_projection(self) -> "DistanceConfig":
        if self.pca_components is not None and self.metric == "weighted_jaccard":
            # principal components can be negative
            raise ValueError("pca_components needs the cosine or euclidean metric")
        return self


class ClusterConfig(_Frozen):
    """Clustering policy and cohesion constraints."""

    policy: ClusterPolicy = "agglomerative"
    k: int | None = Field(None, gt=0)
    linkage: Linkage = "average"
    max_distance: float = Field(0.5, ge=0.0)
    diagnostic_true_k: bool = False
    max_cluster_size: int | None = Field(None, ge=1)
    max_internal_distance: float = 0.9
    random_state: int = 0
    n_init: int = Field(10, ge=1)


class PipelineConfig(_Frozen):
    """Top-level pipeline configuration combining all sub-configs."""

    extraction: ExtractionConfig = ExtractionConfig()
    distance: DistanceConfig = DistanceConfig()
    clustering: ClusterConfig = ClusterConfig()

    def with_k(self, k: int | None) -> PipelineConfig:
        """Return a copy with ``clustering.k`` replaced (``None`` keeps it).

        Raises:
            ConfigurationError: If ``k`` is not a positive integer.
        """
        if k is None:
            return self
        data = self.model_dump()
        data["clustering"]["k"] = k
        try:
            return PipelineConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid cluster count {k!r}: {e}") from e


def load_pipeline_config(path: Path) -> PipelineConfig:
    """Load pipeline configuration from a YAML file.

    If the file does not exist, returns a ``PipelineConfig`` with all
    default values.  Partial overrides are supported -- only the keys
    present in the YAML file will override defaults.

    Raises:
        ConfigurationError: If the file is not valid YAML or names an
            unknown strategy, metric, linkage, or option.
    """
    if not path.exists():
        return PipelineConfig()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")

    try:
        return PipelineConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid pipeline config in {path}: {e}") from e
