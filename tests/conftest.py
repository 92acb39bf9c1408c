"""Pytest configuration for the test environment.

- Ensures the project root is available on ``sys.path`` for imports.
- Provides a synthetic DataPack written into ``tmp_path``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
for p in (ROOT, ROOT / "tests"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from datapack_factory import write_datapack  # noqa: E402

from suburb_listing.core.data_loaders import SourceFiles  # noqa: E402


@pytest.fixture
def datapack(tmp_path: Path) -> SourceFiles:
    return write_datapack(tmp_path / "datapack")
