"""Command-line interface for MEPGraph."""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from time import perf_counter
from typing import List, Optional

from mepgraph.config import EXPORT_CONFIG
from mepgraph.logging import configure_from_flags, get_logger
from mepgraph.model.connectivity import ConnectivityModel
from mepgraph.model.elements import ElementModel
from mepgraph.model.selection import is_desirable_system
from mepgraph.results.store import AttributeStore, InMemoryAttributeStore, JsonFileAttributeStore
from mepgraph.workflow.export import export_systems

logger = get_logger(__name__)


def _format_table(headers: List[str], rows: List[List[str]], min_width: int = 6) -> str:
    """Format rows as a simple ASCII table."""
    if not rows:
        return ""
    widths = [
        max(min_width, len(h), *(len(row[i]) for row in rows))
        for i, h in enumerate(headers)
    ]

    def format_row(row: List[str]) -> str:
        return "   " + " | ".join(f"{cell:<{widths[i]}}" for i, cell in enumerate(row))

    lines = [format_row(headers), "   " + "-+-".join("-" * w for w in widths)]
    lines.extend(format_row(row) for row in rows)
    return "\n".join(lines)


def _format_duration(seconds: float) -> str:
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f} ms"
    return f"{seconds:.2f} s"


def _load_model(path: Path) -> ElementModel:
    logger.info(f"Loading model from: {path}")
    return ElementModel.from_yaml(path.read_text(encoding="utf-8"))


def _run_export(
    path: Path,
    output_dir: Optional[Path],
    bottom_up: bool,
    workers: int,
    store_path: Optional[Path],
    stdout: bool,
) -> None:
    """Export all qualifying systems of a model file and print the report."""
    start = perf_counter()
    try:
        model = _load_model(path)
        config = replace(
            EXPORT_CONFIG, store_json_graph_bottom_up=bottom_up, workers=workers
        )
        store: AttributeStore = (
            JsonFileAttributeStore(store_path) if store_path else InMemoryAttributeStore()
        )
        summary = export_systems(model, config=config, output_dir=output_dir, store=store)
    except FileNotFoundError:
        logger.error(f"Model file not found: {path}")
        print(f"ERROR: Model file not found: {path}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to export model: {type(e).__name__}: {e}")
        print(f"ERROR: Failed to export model: {type(e).__name__}: {e}")
        sys.exit(1)

    print(summary.report())
    if stdout:
        print(summary.artifacts["json_data"].read_text(encoding="utf-8"))
    logger.info(f"Export completed in {_format_duration(perf_counter() - start)}")


def _inspect_model(path: Path) -> None:
    """Print the systems of a model file and whether they qualify."""
    try:
        model = _load_model(path)
        connectivity = ConnectivityModel(model)
    except FileNotFoundError:
        logger.error(f"Model file not found: {path}")
        print(f"ERROR: Model file not found: {path}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to inspect model: {type(e).__name__}: {e}")
        print(f"ERROR: Failed to inspect model: {type(e).__name__}: {e}")
        sys.exit(1)

    print(f"Model: {model.title or path.stem}")
    print(f"   Elements: {len(model.elements):,}")
    print(f"   Connections: {len(model.connections):,}")
    print(f"   Systems: {len(model.systems):,}")

    rows = []
    for system in model.systems.values():
        rows.append(
            [
                str(system.id),
                system.name,
                system.category.value,
                str(system.size),
                str(system.base_equipment) if system.base_equipment is not None else "-",
                "yes" if is_desirable_system(system, connectivity, EXPORT_CONFIG) else "no",
            ]
        )
    table = _format_table(["Id", "Name", "Category", "Size", "Base", "Export"], rows)
    if table:
        print(table)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``mepgraph`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="mepgraph",
        description="Traverse MEP systems and export their connectivity graphs.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{run,inspect}",
        help="Available commands",
    )

    run_parser = subparsers.add_parser("run", help="Export system graphs of a model")
    run_parser.add_argument("model", type=Path, help="Path to model YAML")
    run_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output directory (default: a new temporary directory)",
    )
    run_parser.add_argument(
        "--bottom-up",
        action="store_true",
        help="Store per-system JSON graphs leaf-first instead of root-first",
    )
    run_parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=EXPORT_CONFIG.workers,
        help="Number of systems processed in parallel",
    )
    run_parser.add_argument(
        "--store",
        type=Path,
        default=None,
        help="Also persist per-system JSON graphs to this JSON file",
    )
    run_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the aggregated JSON document to stdout",
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="List systems of a model and whether they qualify"
    )
    inspect_parser.add_argument("model", type=Path, help="Path to model YAML")

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)
    configure_from_flags(verbose=args.verbose, quiet=args.quiet)

    if args.command == "run":
        _run_export(
            path=args.model,
            output_dir=args.output,
            bottom_up=args.bottom_up,
            workers=args.workers,
            store_path=args.store,
            stdout=args.stdout,
        )
    elif args.command == "inspect":
        _inspect_model(args.model)


if __name__ == "__main__":
    main()
