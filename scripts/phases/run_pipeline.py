"""Run the whole build (fetch DataPack -> build listing) in one go.

Run:
  python scripts/phases/run_pipeline.py [--force] [--skip-fetch] [--checkpoint]
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import Any

# Ensure repo root is on sys.path so `import suburb_listing...` works when executing this file directly.
REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from suburb_listing.core.cli_utils import StepStats, add_skip_flags, create_base_parser
from suburb_listing.core.config import configure_logging
from suburb_listing.core.errors import PipelineError

LOGGER = logging.getLogger("run_pipeline")


def _parse_args() -> argparse.Namespace:
    """Parse command line arguments for the full build."""
    parser = create_base_parser("Fetch the DataPack and build the suburb listing.")
    add_skip_flags(parser)
    return parser.parse_args()


def _run_step(module_name: str, step_name: str, stats: StepStats, **kwargs: Any) -> None:
    try:
        LOGGER.info("Running %s step...", step_name)
        mod = importlib.import_module(module_name)
        stats.update(mod.run(**kwargs))
        stats.add_step(step_name)
        LOGGER.info("Completed %s step", step_name)
    except PipelineError as e:
        LOGGER.error("Failed %s step at stage %r: %s", step_name, e.stage, e)
        raise


def main() -> None:
    configure_logging()
    args = _parse_args()
    stats = StepStats()

    steps = [
        (
            "scripts.data_ingestion.01_fetch_datapack",
            "fetch",
            not args.skip_fetch,
            {"force": args.force, "checkpoint": args.checkpoint, "config_path": args.config},
        ),
        (
            "scripts.phases.build_listing",
            "listing",
            True,
            {"checkpoint": args.checkpoint, "config_path": args.config},
        ),
    ]

    for module_name, step_name, should_run, kwargs in steps:
        if should_run:
            _run_step(module_name, step_name, stats, **kwargs)
        else:
            LOGGER.info("Skipping %s step", step_name)

    summary = stats.get_summary()
    LOGGER.info("Build complete. Steps: %d, summary: %s", summary["step_count"], summary)


if __name__ == "__main__":
    main()
