"""CLI entry point: python -m fact_graph.cli {preprocess,generate,cluster,sweep,run}"""

import argparse
import sys
from pathlib import Path

import structlog

from fact_graph.config.settings import get_settings
from fact_graph.corpus import Corpus
from fact_graph.errors import FactGraphError
from fact_graph.evaluation.harness import format_sweep
from fact_graph.evaluation.metrics import format_metrics
from fact_graph.graph.store import load_graphs
from fact_graph.logging_config import configure_logging
from fact_graph.pipeline.config import PipelineConfig, load_pipeline_config
from fact_graph.pipeline.runner import (
    Workspace,
    generate_directory,
    preprocess_directory,
    run_clustering,
    run_pipeline,
    sweep_corpus,
)
from fact_graph.preprocessing.normalizer import load_stopwords


def _parse_ks(value: str) -> list[int]:
    """Parse ``"2,4,8"`` or a range ``"2:10"`` (inclusive) into cluster counts."""
    if ":" in value:
        start, stop = value.split(":", 1)
        return list(range(int(start), int(stop) + 1))
    return [int(v) for v in value.split(",") if v.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fact_graph.cli",
        description="Cluster documents by their fact graphs",
    )
    parser.add_argument("--workdir", type=Path, default=None, help="Workspace directory")
    parser.add_argument("--config", type=Path, default=None, help="Pipeline YAML config")
    parser.add_argument("--workers", type=int, default=None, help="Worker processes")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("preprocess", help="Clean raw_input/ into input/")
    subparsers.add_parser("generate", help="Build fact graphs from input/ into graphs/")

    cluster_parser = subparsers.add_parser("cluster", help="Cluster graphs/ and write names/pred/true")
    cluster_parser.add_argument("-k", "--clusters", type=int, default=None, help="Cluster count")

    run_parser = subparsers.add_parser("run", help="preprocess + generate + cluster")
    run_parser.add_argument("-k", "--clusters", type=int, default=None, help="Cluster count")

    sweep_parser = subparsers.add_parser("sweep", help="Evaluate several cluster counts")
    sweep_parser.add_argument(
        "--ks",
        type=_parse_ks,
        required=True,
        help="Cluster counts, e.g. 2,4,8 or 2:10",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    settings = get_settings()
    configure_logging(json_output=settings.log_json, log_level=settings.log_level)
    log = structlog.get_logger()

    workspace = Workspace(args.workdir or settings.workdir)
    workers = args.workers or settings.workers

    try:
        config: PipelineConfig = load_pipeline_config(args.config or settings.pipeline_config_path)

        if args.command == "preprocess":
            preprocess_directory(
                workspace.raw_input,
                workspace.input,
                load_stopwords(settings.stopwords_path),
                strict=config.extraction.strict,
            )

        elif args.command == "generate":
            generate_directory(workspace.input, workspace.graphs, config.extraction, workers)

        elif args.command == "cluster":
            result = run_clustering(
                workspace.graphs, workspace.output, config.with_k(args.clusters), workers
            )
            print(format_metrics(result.metrics))

        elif args.command == "run":
            result = run_pipeline(
                workspace,
                config.with_k(args.clusters),
                load_stopwords(settings.stopwords_path),
                workers,
            )
            print(format_metrics(result.metrics))

        elif args.command == "sweep":
            corpus = Corpus.from_named_graphs(load_graphs(workspace.graphs))
            results = sweep_corpus(corpus, config, args.ks, workers)
            print(format_sweep(results))

    except (FactGraphError, ValueError) as e:
        log.error("run_aborted", command=args.command, error=str(e), error_type=type(e).__name__)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
