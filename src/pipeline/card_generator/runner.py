"""Card Generator Runner Module.

This module provides the programmatic entrypoints and logging configuration
for the card generation step. It is the boundary between callers (the CLI,
an upload handler, tests) and the asynchronous processing in
``processor.py``: callers that are not running an event loop use
:func:`run_from_config`, which wraps :meth:`CardBatchProcessor.generate`
in ``asyncio.run``.

Examples
--------
>>> from src.pipeline.card_generator.runner import configure_logging, run_from_config
>>> configure_logging(log_level="INFO", enable_file=False)
>>> # result = run_from_config(Path("uploads/cards.xlsx"))
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from src.config import LOG_DIR, LOG_FILENAME_GENERATE_CARDS, LOG_FORMAT

from .models import GenerationResult
from .processor import CardBatchProcessor, CompositorFactory
from .progress import ProgressListener
from .settings import GeneratorSettings

logger = logging.getLogger(__name__)


def configure_logging(log_level: str = "INFO", enable_file: bool = True) -> None:
    r"""Configure logging for card generation runs.

    Sets up a stream handler and, optionally, a file handler writing to
    ``LOG_DIR / LOG_FILENAME_GENERATE_CARDS`` with the project log format.
    Failing to create the log directory only drops the file handler.

    Parameters
    ----------
    log_level : str, optional
        The logging level (e.g., "INFO", "DEBUG"). Defaults to "INFO".
    enable_file : bool, optional
        Whether to also write logs to a file. Defaults to True.

    Notes
    -----
    Existing root handlers are removed first, so repeated calls do not
    duplicate output.
    """
    for h in logging.root.handlers[:]:
        logging.root.removeHandler(h)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if enable_file:
        try:
            LOG_DIR.mkdir(exist_ok=True)
            handlers.insert(
                0,
                logging.FileHandler(LOG_DIR / LOG_FILENAME_GENERATE_CARDS, mode="a"),
            )
        except OSError as exc:
            logging.getLogger(__name__).warning("File logging disabled: %s", exc)
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def run_from_config(
    workbook_path: Path,
    settings: GeneratorSettings | None = None,
    on_progress: ProgressListener | None = None,
    compositor_factory: CompositorFactory | None = None,
) -> GenerationResult:
    """Run card generation synchronously.

    Parameters
    ----------
    workbook_path : Path
        Input ``.xlsx`` file.
    settings : GeneratorSettings | None
        Resolved settings; loaded from the environment when omitted.
    on_progress : ProgressListener | None
        Listener receiving a snapshot after every rendered card.
    compositor_factory : CompositorFactory | None
        Override for the rendering backend.

    Returns
    -------
    GenerationResult
        Outcome of the run.

    Raises
    ------
    src.exceptions.AppError, OSError
        Run-level failures are propagated unchanged.
    """
    processor = CardBatchProcessor(settings, compositor_factory=compositor_factory)
    if on_progress is not None:
        processor.on_progress(on_progress)
    return asyncio.run(processor.generate(Path(workbook_path)))


__all__ = ["configure_logging", "run_from_config"]
