"""CardBatchProcessor: spreadsheet-to-archive orchestration layer.

This module drives one card generation run: it clears stale documents from
the output directory, reads the workbook, decides which rows are renderable,
renders each of them through the shared :class:`DocumentCompositor`,
publishes a progress snapshot after every card and finally packs the
documents into a timestamped ZIP archive.

Rows are processed strictly one after another. A row whose type is
unrecognized or has no template is left out of the run's total; a row whose
page times out is skipped after being counted. Only failures of the
rendering engine or of file I/O abort the run, and the engine is released
on every exit path.

Examples
--------
>>> import asyncio
>>> from src.pipeline.card_generator.processor import CardBatchProcessor
>>> processor = CardBatchProcessor()
>>> processor.on_progress(lambda snap: print(snap.to_dict()))
>>> # result = asyncio.run(processor.generate(Path("uploads/cards.xlsx")))
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from pathlib import Path
from typing import Any, Protocol

from src.config import DOCUMENT_EXTENSION
from src.exceptions import TimeoutExceededError

from .archive import build_archive, next_archive_path
from .assets import resolve_logo, resolve_seal
from .card_types import normalize_card_type
from .compositor import DocumentCompositor
from .data_loader import load_card_rows_from_workbook
from .models import (
    CardRow,
    CardType,
    GenerationResult,
    GenerationStatus,
    RenderJob,
    RunState,
)
from .naming import UniqueNameAllocator, build_output_filename
from .progress import ProgressBroadcaster, ProgressListener, build_progress_snapshot
from .settings import GeneratorSettings
from .templating import TemplateCache, has_template, render_card_markup

logger = logging.getLogger(__name__)


class Compositor(Protocol):
    async def compose(self, markup: str, output_path: Path) -> Path: ...


CompositorFactory = Callable[
    [GeneratorSettings], AbstractAsyncContextManager[Any]
]

# (spreadsheet row number, row, normalized type)
RenderableRow = tuple[int, CardRow, CardType]


def default_compositor_factory(settings: GeneratorSettings) -> DocumentCompositor:
    """Build the Chromium-backed compositor described by ``settings``."""
    return DocumentCompositor(
        width=settings.card_width_px,
        height=settings.card_height_px,
        tmp_dir=settings.tmp_dir,
        page_load_timeout_ms=settings.page_load_timeout_ms,
        launch_args=settings.chromium_args,
    )


class CardBatchProcessor:
    """Turn the rows of a workbook into an archive of card documents.

    Parameters
    ----------
    settings : GeneratorSettings | None
        Directories and rendering limits; defaults are loaded when omitted.
    compositor_factory : CompositorFactory | None
        Callable returning an async context manager that yields an object
        with an async ``compose(markup, output_path)`` method.
    broadcaster : ProgressBroadcaster | None
        Channel used to publish progress snapshots.

    Attributes
    ----------
    state : RunState
        Lifecycle state of the current (or last) run.
    """

    def __init__(
        self,
        settings: GeneratorSettings | None = None,
        *,
        compositor_factory: CompositorFactory | None = None,
        broadcaster: ProgressBroadcaster | None = None,
    ) -> None:
        self.settings = settings or GeneratorSettings()
        self.broadcaster = broadcaster or ProgressBroadcaster()
        self._compositor_factory = compositor_factory or default_compositor_factory
        self.state = RunState.UNINITIALIZED

    def on_progress(self, listener: ProgressListener) -> None:
        """Subscribe ``listener`` to the progress snapshots of every run."""
        self.broadcaster.subscribe(listener)

    def prepare_output_dir(self) -> int:
        """Create the working directories and purge documents of older runs.

        Returns
        -------
        int
            Number of stale documents removed.
        """
        output_dir = Path(self.settings.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        Path(self.settings.tmp_dir).mkdir(parents=True, exist_ok=True)
        removed = 0
        for stale in output_dir.glob(f"*{DOCUMENT_EXTENSION}"):
            if stale.is_file():
                stale.unlink()
                removed += 1
        if removed:
            logger.info("Removed %d documents left by a previous run", removed)
        return removed

    def classify_rows(self, rows: list[CardRow]) -> list[RenderableRow]:
        """Return the rows whose type is recognized and has a template.

        Spreadsheet row numbers (header is row 1) are kept for logging.
        """
        renderable: list[RenderableRow] = []
        templates_dir = Path(self.settings.templates_dir)
        if not templates_dir.is_dir():
            logger.warning(
                "Template directory %s does not exist; no row can be rendered",
                templates_dir,
            )
        for row_number, row in enumerate(rows, start=2):
            card_type = normalize_card_type(row.type)
            if card_type is None:
                if row.type:
                    logger.info(
                        "Row %d: unrecognized card type %r, skipping",
                        row_number,
                        row.type,
                    )
                continue
            if not has_template(self.settings.templates_dir, card_type):
                logger.warning(
                    "Row %d: no template for card type %s, skipping",
                    row_number,
                    card_type.value,
                )
                continue
            renderable.append((row_number, row, card_type))
        return renderable

    def build_render_job(
        self,
        row: CardRow,
        card_type: CardType,
        position: int,
        templates: TemplateCache,
        names: UniqueNameAllocator,
    ) -> RenderJob:
        """Resolve assets, substitute the template and name the document."""
        template = templates.get(card_type)
        markup = render_card_markup(
            card_type,
            row,
            template,
            logo=resolve_logo(row.logo, self.settings.logos_dir),
            seal=resolve_seal(row.seal, self.settings.seals_dir),
        )
        filename = names.allocate(
            build_output_filename(row.order, card_type, row.category, position)
        )
        return RenderJob(card_type=card_type, markup=markup, filename=filename)

    async def _render_rows(
        self, compositor: Compositor, renderable: list[RenderableRow]
    ) -> list[Path]:
        self.state = RunState.RUNNING
        total = len(renderable)
        output_dir = Path(self.settings.output_dir)
        templates = TemplateCache(self.settings.templates_dir)
        names = UniqueNameAllocator()
        documents: list[Path] = []
        for position, (row_number, row, card_type) in enumerate(renderable, start=1):
            try:
                job = self.build_render_job(
                    row, card_type, position, templates, names
                )
            except FileNotFoundError as exc:
                logger.warning(
                    "Row %d: template disappeared, skipping: %s", row_number, exc
                )
                continue
            try:
                document = await compositor.compose(
                    job.markup, output_dir / job.filename
                )
            except TimeoutExceededError as exc:
                logger.warning("Row %d skipped: %s", row_number, exc.message)
                continue
            documents.append(document)
            snapshot = build_progress_snapshot(len(documents), total)
            logger.debug("Rendered %s (%s)", job.filename, snapshot.current_card)
            self.broadcaster.publish(snapshot)
        return documents

    async def generate(self, workbook_path: Path) -> GenerationResult:
        """Run the whole pipeline for one workbook.

        Parameters
        ----------
        workbook_path : Path
            The uploaded ``.xlsx`` file; only its first sheet is read.

        Returns
        -------
        GenerationResult
            ``COMPLETED`` with the archive path, ``EMPTY_INPUT`` when no row
            is renderable, or ``NO_OUTPUT`` when every renderable row failed.

        Raises
        ------
        FileNotFoundError
            If the workbook does not exist.
        src.exceptions.DataValidationError
            If the workbook cannot be parsed.
        src.exceptions.ExternalServiceError
            If the rendering engine cannot start or fails mid-run.
        OSError
            On output directory or archive I/O failures.
        """
        self.state = RunState.UNINITIALIZED
        try:
            self.prepare_output_dir()
            rows = load_card_rows_from_workbook(Path(workbook_path))
            renderable = self.classify_rows(rows)
            total = len(renderable)
            if total == 0:
                logger.warning("No renderable rows in %s", Path(workbook_path).name)
                self.state = RunState.COMPLETED
                return GenerationResult(
                    status=GenerationStatus.EMPTY_INPUT, skipped=len(rows)
                )

            logger.info("Generating %d cards (%d rows read)", total, len(rows))
            async with self._compositor_factory(self.settings) as compositor:
                self.state = RunState.INITIALIZED
                documents = await self._render_rows(compositor, renderable)

            processed = len(documents)
            skipped = len(rows) - processed
            if processed == 0:
                logger.warning("None of the %d renderable rows produced a card", total)
                self.state = RunState.COMPLETED
                return GenerationResult(
                    status=GenerationStatus.NO_OUTPUT,
                    total=total,
                    skipped=skipped,
                )

            output_dir = Path(self.settings.output_dir)
            archive_path = await asyncio.to_thread(
                build_archive, output_dir, next_archive_path(output_dir)
            )
        except Exception as exc:
            self.state = RunState.FAILED
            logger.error("Card generation failed: %s", exc)
            raise

        self.state = RunState.COMPLETED
        logger.info(
            "Generated %d/%d cards into %s", processed, total, archive_path.name
        )
        return GenerationResult(
            status=GenerationStatus.COMPLETED,
            archive_path=archive_path,
            total=total,
            processed=processed,
            skipped=skipped,
            documents=documents,
        )


async def generate_cards(
    workbook_path: Path,
    settings: GeneratorSettings | None = None,
    on_progress: ProgressListener | None = None,
) -> GenerationResult:
    """Convenience wrapper: build a processor and run it once."""
    processor = CardBatchProcessor(settings)
    if on_progress is not None:
        processor.on_progress(on_progress)
    return await processor.generate(workbook_path)


__all__ = [
    "CardBatchProcessor",
    "CompositorFactory",
    "default_compositor_factory",
    "generate_cards",
]
