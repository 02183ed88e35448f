"""Runtime settings loader for the card generator.

This module provides :class:`GeneratorSettings`, which resolves the
directories, card geometry and rendering limits used by a run. Values come
from, in order of precedence: explicit keyword arguments, environment
variables (optionally loaded from a project ``.env`` file), and the defaults
in ``src/config.py``.

Environment variables
---------------------
``CARDS_TEMPLATES_DIR``, ``CARDS_LOGOS_DIR``, ``CARDS_SEALS_DIR``,
``CARDS_OUTPUT_DIR``, ``CARDS_TMP_DIR``, ``CARD_WIDTH_PX``,
``CARD_HEIGHT_PX``, ``PAGE_LOAD_TIMEOUT_MS``, ``CHROMIUM_ARGS``
(space-separated).

Examples
--------
>>> from src.pipeline.card_generator.settings import GeneratorSettings
>>> settings = GeneratorSettings(page_load_timeout_ms=5000)
>>> settings.page_load_timeout_ms
5000
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

import src.config as _project_config
from src.exceptions import ConfigurationError


def _env_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    return Path(value).expanduser() if value else Path(default)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}", context={"variable": name}
        ) from None


class GeneratorSettings:
    r"""Resolved configuration for one card generation run.

    Attributes
    ----------
    templates_dir : Path
        Directory holding one ``<type>.html`` template per card type.
    logos_dir : Path
        Logo store, including the default ``blank.png``.
    seals_dir : Path
        Seal badge store.
    output_dir : Path
        Where documents and archives are written; owned by the running job.
    tmp_dir : Path
        Scratch directory for transient HTML files.
    card_width_px, card_height_px : int
        Card size in CSS pixels.
    page_load_timeout_ms : int
        Per-card bound on waiting for the page to settle.
    chromium_args : list[str]
        Extra Chromium launch switches.

    Raises
    ------
    ConfigurationError
        If a numeric setting is not a positive integer.
    """

    def __init__(self, **overrides: Any) -> None:
        env_file = Path(_project_config.PROJECT_ROOT) / ".env"
        if env_file.exists():
            load_dotenv(env_file, override=False)

        self.templates_dir: Path = _env_path(
            "CARDS_TEMPLATES_DIR", _project_config.TEMPLATES_DIR
        )
        self.logos_dir: Path = _env_path("CARDS_LOGOS_DIR", _project_config.LOGOS_DIR)
        self.seals_dir: Path = _env_path("CARDS_SEALS_DIR", _project_config.SEALS_DIR)
        self.output_dir: Path = _env_path(
            "CARDS_OUTPUT_DIR", _project_config.OUTPUT_DIR
        )
        self.tmp_dir: Path = _env_path("CARDS_TMP_DIR", _project_config.TMP_DIR)
        self.card_width_px = _env_int(
            "CARD_WIDTH_PX", _project_config.CARD_WIDTH_PX
        )
        self.card_height_px = _env_int(
            "CARD_HEIGHT_PX", _project_config.CARD_HEIGHT_PX
        )
        self.page_load_timeout_ms = _env_int(
            "PAGE_LOAD_TIMEOUT_MS", _project_config.PAGE_LOAD_TIMEOUT_MS
        )
        raw_args = os.getenv("CHROMIUM_ARGS")
        self.chromium_args: list[str] = (
            raw_args.split() if raw_args else list(_project_config.CHROMIUM_ARGS)
        )

        for key, value in overrides.items():
            if value is None:
                continue
            if not hasattr(self, key):
                raise ConfigurationError(
                    f"Unknown setting: {key}", context={"setting": key}
                )
            current = getattr(self, key)
            setattr(self, key, Path(value) if isinstance(current, Path) else value)

        for key in ("card_width_px", "card_height_px", "page_load_timeout_ms"):
            value = getattr(self, key)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigurationError(
                    f"{key} must be a positive integer, got {value!r}",
                    context={"setting": key},
                )

    def __repr__(self) -> str:
        return (
            f"GeneratorSettings(templates_dir={self.templates_dir!s}, "
            f"output_dir={self.output_dir!s}, "
            f"size={self.card_width_px}x{self.card_height_px}, "
            f"timeout_ms={self.page_load_timeout_ms})"
        )


__all__ = ["GeneratorSettings"]
