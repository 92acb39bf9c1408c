from __future__ import annotations

import logging
import shutil
from collections.abc import Mapping
from pathlib import Path
from zipfile import BadZipFile, ZipFile

from suburb_listing.core.errors import ArchiveError

LOGGER = logging.getLogger(__name__)


def extract_archive(
    zip_path: Path,
    dest_dir: Path,
    *,
    rename: Mapping[str, str] | None = None,
) -> Path:
    """Extract every member of `zip_path` into `dest_dir` and return `dest_dir`.

    - members must stay inside `dest_dir` (no absolute paths or `..`)
    - `rename` maps an extracted top-level directory to a fixed alias; an alias
      left over from a previous extraction is replaced
    """
    zip_path = Path(zip_path)
    dest_dir = Path(dest_dir)
    if not zip_path.is_file():
        raise ArchiveError("archive not found", stage="fetch", path=zip_path)

    dest_dir.mkdir(parents=True, exist_ok=True)
    root = dest_dir.resolve()

    try:
        with ZipFile(zip_path) as zf:
            members = [n for n in zf.namelist() if n]
            if not members:
                raise ArchiveError("archive contains no members", stage="fetch", path=zip_path)
            for name in members:
                target = (root / name).resolve()
                if target != root and root not in target.parents:
                    raise ArchiveError(
                        f"member {name!r} escapes the extraction directory", stage="fetch", path=zip_path
                    )
            zf.extractall(root)
    except BadZipFile as exc:
        raise ArchiveError(f"not a valid zip archive: {exc}", stage="fetch", path=zip_path) from exc

    LOGGER.info("Extracted %d members from %s into %s", len(members), zip_path.name, dest_dir)

    for src_name, alias in (rename or {}).items():
        src = dest_dir / src_name
        dst = dest_dir / alias
        if not src.is_dir():
            raise ArchiveError(
                f"expected directory {src_name!r} not found after extraction", stage="fetch", path=zip_path
            )
        if dst.exists():
            shutil.rmtree(dst)
        src.replace(dst)
        LOGGER.info("Renamed %r -> %r", src_name, alias)

    return dest_dir
