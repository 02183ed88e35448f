"""Card generator pipeline package.

This package turns the rows of a marketing spreadsheet into styled,
fixed-size PDF cards and packs them into one ZIP archive, publishing a
progress snapshot after every card. It re-exports the public API of its
submodules so callers (the CLI, an upload handler, tests) never need to
reach into individual modules.

Modules
-------
- ``card_types``: free-text type classification.
- ``data_loader``: workbook ingestion and cell coercion.
- ``assets``: logo and seal inlining as ``data:`` URIs.
- ``templating``: template loading and placeholder substitution.
- ``compositor``: Chromium rendering of markup to PDF.
- ``naming``: document names and collision handling.
- ``progress``: progress snapshots and the publish/subscribe channel.
- ``archive``: ZIP packaging.
- ``processor``: the run orchestration.
- ``settings`` / ``runner``: configuration, logging and sync entrypoints.

Examples
--------
>>> from src.pipeline.card_generator import CardBatchProcessor, GeneratorSettings
>>> processor = CardBatchProcessor(GeneratorSettings(output_dir="output"))
>>> # result = asyncio.run(processor.generate(Path("cards.xlsx")))
"""

from .archive import build_archive, next_archive_path, resolve_download_path
from .assets import image_to_data_uri, resolve_logo, resolve_seal
from .card_types import normalize_card_type
from .compositor import DocumentCompositor
from .data_loader import load_card_rows_from_workbook
from .models import (
    CardRow,
    CardType,
    GenerationResult,
    GenerationStatus,
    ProgressSnapshot,
    RenderJob,
    RunState,
)
from .naming import UniqueNameAllocator, build_output_filename
from .processor import CardBatchProcessor, generate_cards
from .progress import ProgressBroadcaster, build_progress_snapshot
from .runner import configure_logging, run_from_config
from .settings import GeneratorSettings
from .templating import format_card_value, render_card_markup

__all__ = [
    "CardBatchProcessor",
    "CardRow",
    "CardType",
    "DocumentCompositor",
    "GenerationResult",
    "GenerationStatus",
    "GeneratorSettings",
    "ProgressBroadcaster",
    "ProgressSnapshot",
    "RenderJob",
    "RunState",
    "UniqueNameAllocator",
    "build_archive",
    "build_output_filename",
    "build_progress_snapshot",
    "configure_logging",
    "format_card_value",
    "generate_cards",
    "image_to_data_uri",
    "load_card_rows_from_workbook",
    "next_archive_path",
    "normalize_card_type",
    "render_card_markup",
    "resolve_download_path",
    "resolve_logo",
    "resolve_seal",
    "run_from_config",
]
