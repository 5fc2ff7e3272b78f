"""Run the SustainGraph analysis on a CSV and write the result as JSON."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence


def _ensure_project_root() -> Path:
    """Ensure the repository root is available on ``sys.path`` when run as a script."""

    module_path = Path(__file__).resolve()
    root = module_path.parents[1]
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)
    return root


_ensure_project_root()

from sustaingraph.modules.config import load_config
from sustaingraph.modules.errors import AnalysisError, MissingDatasetError
from sustaingraph.modules.exporters import recommendations_to_csv, state_to_json
from sustaingraph.modules.io import load_records
from sustaingraph.modules.paths import DEFAULT_DATASET, EXPORTS_DIR
from sustaingraph.modules.pipeline import run_analysis
from sustaingraph.modules.schema import BRAND_NAME, MATERIAL, PRICE, SIS

LOGGER = logging.getLogger("sustaingraph.scripts.run_analysis")

DEFAULT_OUTPUT = EXPORTS_DIR / "analysis.json"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="SustainGraph: SIS, clusters, Pareto and recommendations")
    parser.add_argument("input", type=Path, nargs="?", default=DEFAULT_DATASET, help="CSV with brand records")
    parser.add_argument("--config", type=Path, help="YAML file with analysis settings")
    parser.add_argument("--output", type=Path, default=DEFAULT_OUTPUT, help="JSON output path")
    parser.add_argument("--recommendations-csv", type=Path, help="Also write the recommendations as CSV")
    parser.add_argument("--max-k", type=int, help="Override kmeans.max_k")
    parser.add_argument("--top", type=int, help="Override recommender.top_n")
    parser.add_argument("--no-records", action="store_true", help="Leave per-record rows out of the JSON")
    parser.add_argument("--summary", action="store_true", help="Print a summary table to stdout")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def _print_summary(state) -> None:
    summary = state.summary()
    print(
        f"records={summary['records']} | brands={summary['brands']} | materials={summary['materials']} | "
        f"avgSIS={summary['avgSIS']:.3f} | wEnv={summary['wEnv']:.3f} | wPolicy={summary['wPolicy']:.3f} | "
        f"k={summary['bestK']} | pareto={summary['paretoRecords']}"
    )
    for name, frame in state.recommendations.categories().items():
        print(f"[{name}]")
        for rank, (_, row) in enumerate(frame.iterrows(), start=1):
            print(
                f"  #{rank:02d} | {row.get(BRAND_NAME, '')} | {row.get(MATERIAL, '')} | "
                f"price={float(row[PRICE]):.2f} | SIS={float(row[SIS]):.3f}"
            )


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        overrides = {}
        if args.max_k is not None:
            overrides["kmeans"] = {"max_k": args.max_k}
        if args.top is not None:
            overrides["recommender"] = {"top_n": args.top}
        if overrides:
            config = config.with_overrides(**overrides)
        records = load_records(args.input)
        state = run_analysis(records, config)
    except MissingDatasetError as error:
        LOGGER.error("%s", error)
        return 2
    except AnalysisError as error:
        LOGGER.error("%s", error)
        return 1

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_bytes(state_to_json(state, include_records=not args.no_records))
    if args.recommendations_csv is not None:
        args.recommendations_csv.parent.mkdir(parents=True, exist_ok=True)
        args.recommendations_csv.write_bytes(recommendations_to_csv(state.recommendations))

    if args.summary:
        _print_summary(state)

    print(f"Analysis saved to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
