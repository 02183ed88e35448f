"""Card generation CLI.

Reads a marketing spreadsheet, renders one PDF card per row and packs the
cards into a timestamped ZIP archive in the output directory, showing a
progress bar while rows are rendered.

Usage:
    python -m src.program_generate_cards cards.xlsx [--output-dir output]
        [--templates-dir templates] [--logos-dir logos] [--seals-dir seals]
        [--timeout-ms 30000] [--log-level INFO]

Exit codes: 0 when an archive was produced, 2 when the workbook had no
renderable rows or no card could be rendered, 1 when the run failed.

Templates, logos and seals default to the directories next to ``src/`` in
the source tree; when running from a non-editable install, point
``--templates-dir``, ``--logos-dir`` and ``--seals-dir`` (or the matching
``CARDS_*`` environment variables) at a copy of them.
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from src.console_helpers import (
    CardProgressDisplay,
    print_failure,
    result_panel,
    rprint,
)
from src.exceptions import AppError
from src.pipeline.card_generator import (
    GenerationStatus,
    GeneratorSettings,
    configure_logging,
    run_from_config,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NOTHING_GENERATED = 2


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Parameters
    ----------
    argv : list[str] | None
        Optional argv to parse. When ``None`` the real CLI args are used.
    """
    parser = argparse.ArgumentParser(
        description="Generate PDF marketing cards from a spreadsheet."
    )
    parser.add_argument("workbook", type=Path, help="Input .xlsx file")
    parser.add_argument("-o", "--output-dir", type=Path, default=None)
    parser.add_argument("--templates-dir", type=Path, default=None)
    parser.add_argument("--logos-dir", type=Path, default=None)
    parser.add_argument("--seals-dir", type=Path, default=None)
    parser.add_argument(
        "--timeout-ms",
        type=int,
        default=None,
        help="Per-card page load timeout in milliseconds",
    )
    parser.add_argument(
        "--log-level", type=str, default=os.environ.get("LOG_LEVEL", "INFO")
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> GeneratorSettings:
    """Merge CLI overrides into the environment-derived settings."""
    return GeneratorSettings(
        output_dir=args.output_dir,
        templates_dir=args.templates_dir,
        logos_dir=args.logos_dir,
        seals_dir=args.seals_dir,
        page_load_timeout_ms=args.timeout_ms,
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint; returns the process exit code."""
    args = parse_arguments(argv)
    disable_file = bool(
        os.environ.get("DISABLE_FILE_LOGS") or os.environ.get("PYTEST_CURRENT_TEST")
    )
    configure_logging(args.log_level, enable_file=not disable_file)
    try:
        settings = build_settings(args)
        with CardProgressDisplay() as display:
            result = run_from_config(
                args.workbook, settings, on_progress=display.update
            )
    except (AppError, OSError) as exc:
        logger.exception("Card generation failed")
        print_failure(exc)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.warning("Card generation interrupted by user.")
        return EXIT_FAILURE

    rprint(result_panel(result))
    if result.status is GenerationStatus.COMPLETED:
        return EXIT_OK
    return EXIT_NOTHING_GENERATED


def entry_point() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    entry_point()
