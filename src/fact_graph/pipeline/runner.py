"""Pipeline stages: preprocess -> generate -> cluster.

The pure functions (``build_graphs``, ``cluster_corpus``) take values and
return values; the ``*_directory`` / ``run_*`` functions wrap them with
workspace I/O.  Per-document extraction failures are isolated and
reported together at the end of a stage; structural and configuration
errors abort a stage before any output is written.
"""

from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from fact_graph.clustering import ClusterResult, cluster, resolve_k, validate_cluster_config
from fact_graph.corpus import Corpus
from fact_graph.distance.matrix import DistanceMatrix, compute_distance_matrix, corpus_features
from fact_graph.errors import ExtractionError, FactGraphError
from fact_graph.evaluation.harness import EvaluationResult, run_k_sweep, sweep_configs
from fact_graph.evaluation.metrics import MetricsResult, compute_metrics
from fact_graph.graph.builder import GraphBuilder
from fact_graph.graph.model import FactGraph
from fact_graph.graph.store import load_graphs, save_graph
from fact_graph.output.writer import remove_outputs, write_outputs
from fact_graph.pipeline.config import ExtractionConfig, PipelineConfig
from fact_graph.preprocessing.document import Document, format_ndd, load_document
from fact_graph.preprocessing.normalizer import preprocess_text

logger = structlog.get_logger()


@dataclass(frozen=True)
class Workspace:
    """Directory layout of one pipeline workspace."""

    root: Path

    @property
    def raw_input(self) -> Path:
        return self.root / "raw_input"

    @property
    def input(self) -> Path:
        return self.root / "input"

    @property
    def graphs(self) -> Path:
        return self.root / "graphs"

    @property
    def output(self) -> Path:
        return self.root


@dataclass
class StageReport:
    """Outcome of a per-document stage.

    Attributes:
        processed: Names of documents handled successfully, in order.
        failures: Extraction errors of skipped documents.
        empty_count: Documents that produced no terms or no facts.
    """

    processed: list[str] = field(default_factory=list)
    failures: list[ExtractionError] = field(default_factory=list)
    empty_count: int = 0


@dataclass
class ClusterRunResult:
    """Everything produced by one clustering run."""

    corpus: Corpus
    matrix: DistanceMatrix
    cluster_result: ClusterResult
    metrics: MetricsResult
    output_files: dict[str, Path]


def _list_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and not p.name.startswith(".")),
        key=lambda p: p.name,
    )


def _report_failures(stage: str, report: StageReport, strict: bool) -> None:
    if not report.failures:
        return
    if strict:
        raise report.failures[0]
    logger.warning(
        "documents_skipped",
        stage=stage,
        count=len(report.failures),
        documents=[e.document_name for e in report.failures],
    )


# ---------------------------------------------------------------------------
# Preprocess: raw text -> cleaned documents
# ---------------------------------------------------------------------------


def preprocess_directory(
    raw_dir: Path,
    input_dir: Path,
    stopwords: frozenset[str] = frozenset(),
    strict: bool = False,
) -> StageReport:
    """Clean every raw file of ``raw_dir`` into ``input_dir``."""
    report = StageReport()
    cleaned: list[tuple[str, Document]] = []
    for path in _list_files(raw_dir):
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            report.failures.append(ExtractionError(path.name, f"not valid UTF-8 ({e.reason})"))
            continue
        except OSError as e:
            report.failures.append(ExtractionError(path.name, str(e)))
            continue
        document = preprocess_text(text, stopwords)
        if document.is_empty:
            report.empty_count += 1
        cleaned.append((path.name, document))

    _report_failures("preprocess", report, strict)

    input_dir.mkdir(parents=True, exist_ok=True)
    for name, document in cleaned:
        (input_dir / name).write_text(format_ndd(document), encoding="utf-8")
        report.processed.append(name)

    logger.info(
        "preprocess_complete",
        documents=len(report.processed),
        skipped=len(report.failures),
        empty=report.empty_count,
    )
    return report


# ---------------------------------------------------------------------------
# Generate: cleaned documents -> fact graphs
# ---------------------------------------------------------------------------


def _build_one(args: tuple[str, Document, ExtractionConfig]) -> FactGraph:
    name, document, config = args
    return GraphBuilder(config).build(document, name=name)


def build_graphs(
    named_documents: list[tuple[str, Document]],
    config: ExtractionConfig | None = None,
    workers: int = 1,
) -> list[tuple[str, FactGraph]]:
    """Build one fact graph per document, preserving input order.

    PURE FUNCTION -- graphs for distinct documents are independent, so
    with ``workers > 1`` they are built in a process pool.
    """
    if config is None:
        config = ExtractionConfig()

    if workers > 1 and len(named_documents) > 1:
        tasks = [(name, doc, config) for name, doc in named_documents]
        with ProcessPoolExecutor(max_workers=workers) as pool:
            graphs = list(pool.map(_build_one, tasks))
    else:
        builder = GraphBuilder(config)
        graphs = [builder.build(doc, name=name) for name, doc in named_documents]

    return [(name, graph) for (name, _), graph in zip(named_documents, graphs)]


def generate_directory(
    input_dir: Path,
    graphs_dir: Path,
    config: ExtractionConfig | None = None,
    workers: int = 1,
) -> StageReport:
    """Build and persist a graph for every cleaned document of ``input_dir``.

    Graph files in ``graphs_dir`` that do not belong to a current input
    document are removed so the store always mirrors the input.

    Raises:
        ExtractionError: On the first unreadable document when
            ``config.strict`` is set.  No graphs are written then.
    """
    if config is None:
        config = ExtractionConfig()

    report = StageReport()
    documents: list[tuple[str, Document]] = []
    for path in _list_files(input_dir):
        try:
            documents.append((path.name, load_document(path)))
        except ExtractionError as e:
            report.failures.append(e)

    _report_failures("generate", report, config.strict)

    named_graphs = build_graphs(documents, config, workers)

    current = {name for name, _ in named_graphs}
    for stale in _list_files(graphs_dir):
        if stale.name not in current:
            stale.unlink()
            logger.info("stale_graph_removed", document=stale.name)

    for name, graph in named_graphs:
        save_graph(graph, graphs_dir, name)
        report.processed.append(name)
        if graph.is_empty:
            report.empty_count += 1

    logger.info(
        "graphs_generated",
        documents=len(report.processed),
        skipped=len(report.failures),
        empty_graphs=report.empty_count,
        strategy=config.strategy,
    )
    return report


# ---------------------------------------------------------------------------
# Cluster: fact graphs -> names / pred / true
# ---------------------------------------------------------------------------


def cluster_corpus(
    corpus: Corpus,
    config: PipelineConfig,
    workers: int = 1,
) -> tuple[DistanceMatrix, ClusterResult]:
    """Distance matrix + clustering for a corpus.  PURE FUNCTION.

    The cluster count is validated before distances are computed.
    """
    resolve_k(config.clustering, corpus)
    features = corpus_features(corpus.graphs, config.distance)
    matrix = compute_distance_matrix(corpus.graphs, config.distance, workers, features)
    return matrix, cluster(corpus, matrix, config.clustering, features)


def sweep_corpus(
    corpus: Corpus,
    config: PipelineConfig,
    ks: list[int],
    workers: int = 1,
) -> list[EvaluationResult]:
    """Evaluate one clustering per cluster count over a shared matrix.

    Every cluster count is validated against the corpus before distances
    are computed.
    """
    for run_config in sweep_configs(config.clustering, ks):
        resolve_k(run_config, corpus)
    features = corpus_features(corpus.graphs, config.distance)
    matrix = compute_distance_matrix(corpus.graphs, config.distance, workers, features)
    return run_k_sweep(corpus, matrix, config.clustering, ks, features)


def run_clustering(
    graphs_dir: Path,
    output_dir: Path,
    config: PipelineConfig,
    workers: int = 1,
) -> ClusterRunResult:
    """Cluster the persisted graphs and write ``names``/``pred``/``true``.

    On any pipeline error, existing output files are removed so that no
    stale or mismatched set is left behind.
    """
    try:
        corpus = Corpus.from_named_graphs(load_graphs(graphs_dir))
        matrix, cluster_result = cluster_corpus(corpus, config, workers)
        output_files = write_outputs(
            output_dir, corpus.names, cluster_result.labels, corpus.true_labels
        )
    except (FactGraphError, ValueError):
        remove_outputs(output_dir)
        raise

    metrics = compute_metrics(cluster_result.labels, corpus.true_labels)
    logger.info(
        "cluster_run_complete",
        documents=len(corpus),
        clusters=cluster_result.total_cluster_count,
        f1=round(metrics.f1, 4),
        ari=round(metrics.adjusted_rand_index, 4),
    )
    return ClusterRunResult(
        corpus=corpus,
        matrix=matrix,
        cluster_result=cluster_result,
        metrics=metrics,
        output_files=output_files,
    )


def run_pipeline(
    workspace: Workspace,
    config: PipelineConfig,
    stopwords: frozenset[str] = frozenset(),
    workers: int = 1,
) -> ClusterRunResult:
    """Full pipeline: preprocess -> generate -> cluster.

    Clustering settings that cannot work on any corpus are rejected
    before the first stage writes anything.
    """
    validate_cluster_config(config.clustering)
    preprocess_directory(
        workspace.raw_input, workspace.input, stopwords, strict=config.extraction.strict
    )
    generate_directory(workspace.input, workspace.graphs, config.extraction, workers)
    return run_clustering(workspace.graphs, workspace.output, config, workers)
