"""Inline image resolution for logos and seals.

Rendered cards are loaded by the browser from a transient local file, so
every image is embedded as a base64 ``data:`` URI instead of being
referenced by path. A missing file is never an error: logos fall back to
the default blank asset and seals are simply left out.
"""

from __future__ import annotations

import base64
import logging
from pathlib import Path, PurePath

from src.config import DEFAULT_LOGO_FILENAME, SEAL_ASSET_FILENAMES

from .card_types import strip_accents

logger = logging.getLogger(__name__)

_MEDIA_SUBTYPES: dict[str, str] = {
    "jpg": "jpeg",
    "jpeg": "jpeg",
    "svg": "svg+xml",
}


def media_subtype_for(path: Path) -> str:
    """Return the image media subtype for ``path`` based on its extension.

    Examples
    --------
    >>> media_subtype_for(Path("logo.JPG"))
    'jpeg'
    >>> media_subtype_for(Path("logo.png"))
    'png'
    """
    ext = path.suffix.lstrip(".").lower()
    return _MEDIA_SUBTYPES.get(ext, ext)


def image_to_data_uri(path: Path) -> str:
    """Read an image and return it as a base64 ``data:`` URI.

    Parameters
    ----------
    path : Path
        Image file to embed.

    Returns
    -------
    str
        ``data:image/<subtype>;base64,<payload>``, or an empty string when
        the file does not exist.
    """
    path = Path(path)
    if not path.is_file():
        return ""
    payload = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:image/{media_subtype_for(path)};base64,{payload}"


def _asset_name(reference: str) -> str:
    # Only the bare file name is honoured; directories in the cell are dropped.
    return PurePath(str(reference).strip().replace("\\", "/")).name


def resolve_logo(reference: str, logos_dir: Path) -> str:
    """Return the inline logo for a row, falling back to the default asset.

    Parameters
    ----------
    reference : str
        File name from the "logo" column; may be blank.
    logos_dir : Path
        Logo store directory.

    Returns
    -------
    str
        Data URI of the referenced logo, or of ``DEFAULT_LOGO_FILENAME``
        when the reference is blank or points to a missing file. Empty only
        when the default asset itself is missing from the store.
    """
    name = _asset_name(reference) if reference else ""
    if name:
        inline = image_to_data_uri(Path(logos_dir) / name)
        if inline:
            return inline
        logger.warning("Logo %r not found in %s, using default", name, logos_dir)
    inline = image_to_data_uri(Path(logos_dir) / DEFAULT_LOGO_FILENAME)
    if not inline:
        logger.warning(
            "Default logo %s missing from %s", DEFAULT_LOGO_FILENAME, logos_dir
        )
    return inline


def seal_filename_for(designator: str) -> str | None:
    """Map a seal designator ("nova", "Renovada", ...) to its asset name."""
    key = strip_accents(str(designator or "")).strip().upper()
    return SEAL_ASSET_FILENAMES.get(key)


def resolve_seal(designator: str, seals_dir: Path) -> str:
    """Return the inline seal for a row, or an empty string for no seal."""
    filename = seal_filename_for(designator)
    if filename is None:
        return ""
    return image_to_data_uri(Path(seals_dir) / filename)


__all__ = [
    "image_to_data_uri",
    "media_subtype_for",
    "resolve_logo",
    "resolve_seal",
    "seal_filename_for",
]
