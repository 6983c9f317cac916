# comp_outlook/cli.py
# Command-line interface entry point (argparse)
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from comp_outlook.analytics.offers import build_comparison
from comp_outlook.analytics.report import build_salary_analytics
from comp_outlook.api.repository import InMemoryJobRepository
from comp_outlook.config.loaders import load_engine_config
from comp_outlook.config.models import EngineConfig
from comp_outlook.exceptions import CompOutlookError, ConfigLoadError
from comp_outlook.logging_config import setup_logging
from comp_outlook.projections.client import EnrichmentClient
from comp_outlook.projections.enrichment import generate_career_projection
from comp_outlook.projections.orchestrator import build_career_projection

logger = logging.getLogger(__name__)

# Directory for log files
LOG_DIR = Path("output_dev/comp_outlook_logs")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="comp-outlook",
        description="Compensation projections, offer comparison and salary analytics.",
    )
    parser.add_argument("--config", type=str, default=None, help="Path to a YAML configuration file.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--log-dir",
        type=str,
        default=str(LOG_DIR),
        help=f"Directory to store log files (default: {LOG_DIR})",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    analytics = sub.add_parser("analytics", help="Salary analytics report for a set of jobs.")
    analytics.add_argument("--jobs", type=str, required=True, help="JSON file with job documents.")
    analytics.add_argument("--user", type=str, default=None, help="Only analyze jobs owned by this userId.")

    project = sub.add_parser("project", help="Multi-year career projection across jobs.")
    project.add_argument("--jobs", type=str, required=True, help="JSON file with job documents.")
    project.add_argument("--inputs", type=str, default=None, help="JSON file with projection inputs.")
    project.add_argument("--csv", type=str, default=None, help="Write the long-format timeline table here.")
    project.add_argument(
        "--use-ai",
        action="store_true",
        help="Enrich assumptions through the configured chat model (falls back when unavailable).",
    )

    compare = sub.add_parser("compare", help="Side-by-side comparison of job offers.")
    compare.add_argument("--jobs", type=str, required=True, help="JSON file with job documents.")
    compare.add_argument(
        "--inputs",
        type=str,
        default=None,
        help="JSON file with COL indexes, scenarios, ratings and weights.",
    )
    compare.add_argument("--csv", type=str, default=None, help="Write the comparison matrix here.")

    return parser.parse_args(argv)


def initialize_logging(debug: bool = False, log_dir: Path = LOG_DIR) -> None:
    setup_logging(log_dir=log_dir, debug=debug)
    logger.info(f"Command line arguments: {sys.argv}")
    logger.info(f"Pandas version: {pd.__version__}, NumPy version: {np.__version__}")


def load_json(path: str) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CompOutlookError(f"Could not read JSON from {path}: {e}") from e


def run_analytics(args: argparse.Namespace, config: EngineConfig) -> Dict[str, Any]:
    repository = InMemoryJobRepository.from_json(args.jobs)
    jobs = repository.find_jobs(args.user) if args.user else repository.all_jobs()
    return build_salary_analytics(jobs, config=config).to_dict()


async def _enriched_projection(jobs: List[Any], inputs: Any, config: EngineConfig):
    client = EnrichmentClient.from_settings(config.enrichment)
    try:
        return await generate_career_projection(jobs, inputs, client=client, config=config)
    finally:
        if client is not None:
            await client.aclose()


def run_projection(args: argparse.Namespace, config: EngineConfig) -> Dict[str, Any]:
    jobs = InMemoryJobRepository.from_json(args.jobs).all_jobs()
    inputs = load_json(args.inputs) if args.inputs else {}

    if args.use_ai:
        result = asyncio.run(_enriched_projection(jobs, inputs, config))
    else:
        result = build_career_projection(jobs, inputs, config=config)

    if args.csv:
        out = Path(args.csv)
        out.parent.mkdir(parents=True, exist_ok=True)
        result.to_frame().to_csv(out, index=False)
        logger.info(f"Wrote timeline table to {out}")
    return result.to_dict()


def run_comparison(args: argparse.Namespace, config: EngineConfig) -> Dict[str, Any]:
    jobs = InMemoryJobRepository.from_json(args.jobs).all_jobs()
    inputs = load_json(args.inputs) if args.inputs else {}
    comparison = build_comparison(jobs, inputs, config=config)

    if args.csv:
        out = Path(args.csv)
        out.parent.mkdir(parents=True, exist_ok=True)
        comparison.to_frame().to_csv(out)
        logger.info(f"Wrote comparison matrix to {out}")
    return comparison.to_dict()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the comp-outlook CLI."""
    args = parse_arguments(argv)
    try:
        initialize_logging(debug=args.debug, log_dir=Path(args.log_dir))
    except Exception as e:
        print(f"Error initializing logging: {e}", file=sys.stderr)
        return 1

    try:
        config = load_engine_config(args.config)
        if args.command == "analytics":
            payload = run_analytics(args, config)
        elif args.command == "compare":
            payload = run_comparison(args, config)
        else:
            payload = run_projection(args, config)
    except ConfigLoadError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    except CompOutlookError as e:
        logger.error(str(e))
        return 1
    except Exception:
        logger.critical("Fatal error", exc_info=True)
        return 1

    json.dump(payload, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
