"""ZIP packaging of generated card documents.

Functions
---------
- ``build_archive``: Pack every document in a directory into one flat ZIP.
- ``timestamped_archive_name`` / ``next_archive_path``: Per-run archive
  names that never collide with an archive still present from a previous
  run.
- ``resolve_download_path``: Validate a requested archive path before it is
  handed to a download endpoint.
"""

from __future__ import annotations

import logging
import zipfile
from datetime import datetime
from pathlib import Path

from src.config import (
    ARCHIVE_COMPRESSION_LEVEL,
    ARCHIVE_EXTENSION,
    ARCHIVE_TIMESTAMP_FORMAT,
    DOCUMENT_EXTENSION,
)

logger = logging.getLogger(__name__)


def collect_documents(source_dir: Path) -> list[Path]:
    """Return the generated documents in ``source_dir`` sorted by name."""
    source_dir = Path(source_dir)
    if not source_dir.is_dir():
        return []
    return sorted(
        p
        for p in source_dir.iterdir()
        if p.is_file() and p.suffix.lower() == DOCUMENT_EXTENSION
    )


def timestamped_archive_name(now: datetime | None = None) -> str:
    """Return an archive filename derived from ``now``.

    Examples
    --------
    >>> timestamped_archive_name(datetime(2024, 3, 9, 14, 5, 7))
    '2024-03-09_14-05-07.zip'
    """
    moment = now or datetime.now()
    return f"{moment.strftime(ARCHIVE_TIMESTAMP_FORMAT)}{ARCHIVE_EXTENSION}"


def next_archive_path(output_dir: Path, now: datetime | None = None) -> Path:
    """Return a timestamped archive path that does not exist yet."""
    candidate = Path(output_dir) / timestamped_archive_name(now)
    suffix = 2
    while candidate.exists():
        candidate = candidate.with_name(
            f"{candidate.stem.rsplit('__', 1)[0]}__{suffix}{ARCHIVE_EXTENSION}"
        )
        suffix += 1
    return candidate


def build_archive(source_dir: Path, archive_path: Path) -> Path:
    """Pack every document of ``source_dir`` into a flat ZIP archive.

    The archive is written under a temporary name and moved into place once
    the ZIP stream is closed, so a caller never sees a partially written
    file at ``archive_path``.

    Parameters
    ----------
    source_dir : Path
        Directory holding the generated ``.pdf`` documents.
    archive_path : Path
        Destination of the archive.

    Returns
    -------
    Path
        ``archive_path``, fully written and closed.

    Raises
    ------
    OSError
        If a document cannot be read or the archive cannot be written.
    """
    archive_path = Path(archive_path)
    archive_path.parent.mkdir(parents=True, exist_ok=True)
    documents = collect_documents(source_dir)
    partial_path = archive_path.with_name(archive_path.name + ".part")
    try:
        with zipfile.ZipFile(
            partial_path,
            "w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=ARCHIVE_COMPRESSION_LEVEL,
        ) as zf:
            for document in documents:
                zf.write(document, arcname=document.name)
        partial_path.replace(archive_path)
    except BaseException:
        partial_path.unlink(missing_ok=True)
        raise
    logger.info("Packed %d documents into %s", len(documents), archive_path.name)
    return archive_path


def resolve_download_path(candidate: Path | str, output_dir: Path) -> Path:
    """Validate an archive path requested for download.

    Raises
    ------
    PermissionError
        If ``candidate`` resolves outside ``output_dir`` or is not a ZIP.
    FileNotFoundError
        If the archive does not exist.
    """
    root = Path(output_dir).resolve()
    target = Path(candidate)
    if not target.is_absolute():
        target = root / target
    target = target.resolve()
    if not target.is_relative_to(root) or target == root:
        raise PermissionError(f"Access denied: {candidate}")
    if target.suffix.lower() != ARCHIVE_EXTENSION:
        raise PermissionError(f"Not an archive: {candidate}")
    if not target.is_file():
        raise FileNotFoundError(f"Archive not found: {candidate}")
    return target


__all__ = [
    "build_archive",
    "collect_documents",
    "next_archive_path",
    "resolve_download_path",
    "timestamped_archive_name",
]
