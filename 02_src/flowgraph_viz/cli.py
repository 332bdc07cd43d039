"""CLI entrypoint for batch conversion of flow graph files."""

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .config import FlowGraphConfig
from .labels import LabelResolver
from .lookup_tables import LookupTables, load_lookup_tables
from .phases import DotExportPhase, FlowGraphIngestionPhase, RenderPhase, ValidationAndQAPhase
from .pipeline import PipelinePhase, PipelineRunner

logger = logging.getLogger(__name__)


def build_default_phases(render: bool = True) -> List[PipelinePhase]:
    return [
        FlowGraphIngestionPhase(),
        DotExportPhase(),
        RenderPhase(enabled=render),
        ValidationAndQAPhase(),
    ]


def run_pipeline(
    source_path: Path,
    config: FlowGraphConfig,
    resolver: LabelResolver,
    render: bool = True,
) -> Dict[str, Any]:
    initial_context: Dict[str, Any] = {
        "source_path": source_path,
        "config": config,
        "resolver": resolver,
    }
    runner = PipelineRunner(phases=build_default_phases(render=render))
    final_context = runner.run(initial_context)
    return {
        "source_path": str(source_path),
        "outputs": [str(item["dot_path"]) for item in final_context.get("export_output", [])],
        "validation_report": final_context.get("validation_report", {}),
    }


def collect_inputs(paths: Iterable[Path]) -> List[Path]:
    """Expand directories to the `*.xml` files directly inside them."""
    inputs: List[Path] = []
    for path in paths:
        if path.is_dir():
            inputs.extend(sorted(candidate for candidate in path.glob("*.xml") if candidate.is_file()))
        else:
            inputs.append(path)
    return inputs


def run_batch(
    config: FlowGraphConfig,
    inputs: List[Path],
    tables: LookupTables,
    render: bool = True,
) -> Dict[str, Any]:
    resolver = LabelResolver(tables, max_length=config.max_label_length)
    results: List[Dict[str, Any]] = []
    failures: List[Dict[str, str]] = []
    # Outputs share one flat directory and are named after the source stem.
    claimed_stems: Dict[str, Path] = {}
    for source_path in inputs:
        owner = claimed_stems.setdefault(source_path.stem, source_path)
        if owner != source_path:
            error = f"output name '{source_path.stem}' already used by {owner}"
            logger.error("Skipping %s: %s", source_path, error)
            failures.append({"source_path": str(source_path), "error": error})
            continue
        try:
            results.append(run_pipeline(source_path, config, resolver, render=render))
        except OSError as error:
            logger.error("Failed to process %s: %s", source_path, error)
            failures.append({"source_path": str(source_path), "error": str(error)})
    return {
        "results": results,
        "failures": failures,
        "unhandled_classes": resolver.unhandled_classes,
    }


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert flow graph XML files into annotated Graphviz graphs.")
    parser.add_argument(
        "inputs",
        nargs="*",
        type=Path,
        help="Flow graph files or directories; defaults to the global actions directory.",
    )
    parser.add_argument("--source-root", type=Path, help="Root of the extracted game data.")
    parser.add_argument("--output-dir", type=Path, help="Where to write .dot files and images.")
    parser.add_argument("--dot", dest="dot_executable", help="Graphviz executable used for rendering.")
    parser.add_argument("--timeout", type=float, help="Seconds to wait for each Graphviz run.")
    parser.add_argument("--no-render", action="store_true", help="Only write .dot files.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> FlowGraphConfig:
    config = FlowGraphConfig.from_env()
    overrides: Dict[str, Any] = {}
    if args.source_root is not None:
        overrides["source_root"] = args.source_root
    if args.output_dir is not None:
        overrides["output_dir"] = args.output_dir
    if args.dot_executable:
        overrides["dot_executable"] = args.dot_executable
    if args.timeout is not None:
        overrides["render_timeout"] = args.timeout
    return replace(config, **overrides)


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    config = config_from_args(args)
    if not config.source_root.is_dir():
        raise FileNotFoundError(f"Source root not found: {config.source_root}")

    inputs = collect_inputs(args.inputs or [config.resolved_actions_dir])
    tables = load_lookup_tables(config)
    summary = run_batch(config, inputs, tables, render=not args.no_render)

    print(f"Flow graph outputs saved to: {config.resolved_output_dir.resolve()}")
    print(
        "Counts:",
        f"files={len(summary['results'])}",
        f"failed={len(summary['failures'])}",
        f"scopes={sum(r['validation_report'].get('scope_count', 0) for r in summary['results'])}",
        f"dangling_edges={sum(r['validation_report'].get('dangling_edge_count', 0) for r in summary['results'])}",
    )
    print("Classes that didn't have special parsers:")
    for node_class in summary["unhandled_classes"]:
        print(node_class)
    return 1 if summary["failures"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
