"""Card Batch Generator package.

This module is the root of the card batch generator, which turns the rows
of a marketing spreadsheet into fixed-size, single-page PDF cards rendered
by a headless browser and packs them into one timestamped ZIP archive.

Package Structure
-----------------
- `pipeline/card_generator/`:
    Headless processing: workbook ingestion, type classification, asset
    inlining, templating, PDF composition, naming, progress and archiving.
- `program_generate_cards.py`: Command line entrypoint.
- `console_helpers.py`: Rich terminal output used by the CLI.
- `config.py`: All configuration constants (paths, sizes, timeouts), as UPPER_SNAKE_CASE.
- `exceptions.py`: Project-specific exception classes.

Examples
--------
>>> import src
>>> # python -m src.program_generate_cards cards.xlsx
"""
