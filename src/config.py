"""Global configuration constants for the project.

Defines paths, card geometry and filenames used across the card generation
pipeline. Runtime overrides (environment, ``.env``) are applied by
``src.pipeline.card_generator.settings``; this module holds defaults only.
"""

from __future__ import annotations

from pathlib import Path

# Project directories
PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
SRC_DIR: Path = PROJECT_ROOT / "src"
LOG_DIR: Path = PROJECT_ROOT / "logs"

# Template and asset stores
TEMPLATES_DIR: Path = PROJECT_ROOT / "templates"
TEMPLATE_EXTENSION: str = ".html"
LOGOS_DIR: Path = PROJECT_ROOT / "logos"
SEALS_DIR: Path = PROJECT_ROOT / "seals"

# Generated artifacts
OUTPUT_DIR: Path = PROJECT_ROOT / "output"
TMP_DIR: Path = PROJECT_ROOT / "tmp"
DOCUMENT_EXTENSION: str = ".pdf"
ARCHIVE_EXTENSION: str = ".zip"
ARCHIVE_TIMESTAMP_FORMAT: str = "%Y-%m-%d_%H-%M-%S"
ARCHIVE_COMPRESSION_LEVEL: int = 9

# Card geometry (pixels), matches the printed card proportions
CARD_WIDTH_PX: int = 1400
CARD_HEIGHT_PX: int = 2115

# Rendering engine
PAGE_LOAD_TIMEOUT_MS: int = 30_000
CHROMIUM_ARGS: list[str] = ["--no-sandbox", "--disable-setuid-sandbox"]

# Asset fallbacks
DEFAULT_LOGO_FILENAME: str = "blank.png"
NEW_SEAL_FILENAME: str = "acaonova.png"
RENEWED_SEAL_FILENAME: str = "acaorenovada.png"
SEAL_ASSET_FILENAMES: dict[str, str] = {
    "NOVA": NEW_SEAL_FILENAME,
    "NOVO": NEW_SEAL_FILENAME,
    "NEW": NEW_SEAL_FILENAME,
    "RENOVADA": RENEWED_SEAL_FILENAME,
    "RENOVADO": RENEWED_SEAL_FILENAME,
    "RENEWED": RENEWED_SEAL_FILENAME,
}

# Output naming
NO_CATEGORY_LABEL: str = "SEM-CATEGORIA"
UF_LABEL_PREFIX: str = "UF: "
URN_LABEL_PREFIX: str = "URN: "

# Logging
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILENAME_GENERATE_CARDS: str = "generate_cards.log"
