"""Common CLI utilities for pipeline scripts."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any


def create_base_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        "--force",
        action="store_true",
        help="Re-download the DataPack even if a cached archive exists.",
    )
    parser.add_argument(
        "--checkpoint",
        action="store_true",
        help="Print checkpoint summary including output hashes.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Pipeline config YAML (default: config/pipeline_config.yaml).",
    )
    return parser


def add_skip_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--skip-fetch",
        action="store_true",
        help="Skip the DataPack download/extract step (reuse data/raw/datapack).",
    )


class StepStats:
    """Simple container for collecting statistics across pipeline steps."""

    def __init__(self) -> None:
        self.stats: dict[str, Any] = {}
        self.completed_steps: list[str] = []

    def update(self, step_stats: dict[str, Any]) -> None:
        self.stats.update(step_stats)

    def add_step(self, step_name: str) -> None:
        self.completed_steps.append(step_name)

    def get_summary(self) -> dict[str, Any]:
        return {
            "completed_steps": self.completed_steps,
            "step_count": len(self.completed_steps),
            **self.stats,
        }
