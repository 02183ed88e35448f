"""Pytest configuration for test environment setup.

- Forces ``DISABLE_FILE_LOGS=1`` to avoid writing log files during tests.
- Ensures the project root is available on ``sys.path`` for imports.
- Provides a throwaway card store (templates, logos, seals, output) and a
  fake compositor so pipeline tests never launch a real browser.
"""

import os
import signal
import sys

os.environ.setdefault("DISABLE_FILE_LOGS", "1")  # Avoid creating log files during tests
from pathlib import Path

import pandas as pd
import pytest

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from src.exceptions import ExternalServiceError, TimeoutExceededError  # noqa: E402
from src.pipeline.card_generator.settings import GeneratorSettings  # noqa: E402

_TEST_TIMEOUT = int(os.environ.get("PYTEST_TEST_TIMEOUT", "10"))

# Smallest valid PNG (1x1 transparent pixel).
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d49484452000000010000000108060000001f15c489"
    "0000000d4944415478da63fccfc0500f000485018084a98c210000000049454e44"
    "ae426082"
)

TEMPLATE_BODY = (
    "<html><body>"
    "<img src=\"{{LOGO}}\"><img src=\"{{SELO}}\">"
    "<h1>{{TEXTO}}</h1><p class=\"v\">{{VALOR}}</p><p>{{COMPLEMENTO}}</p>"
    "<p>{{CUPOM}}</p><p>{{SEGMENTO}}</p><p>{{UF}}</p><p>{{URN}}</p>"
    "<small>{{LEGAL}}</small>"
    "</body></html>"
)

CARD_TEMPLATES = ("cupom", "promocao", "queda", "cashback", "bc")


def _timeout_handler(signum, frame):
    """Test Timeout handler."""
    raise TimeoutError(f"Test exceeded {_TEST_TIMEOUT} seconds timeout")


def pytest_runtest_setup(item):
    """Test Pytest runtest setup."""
    try:
        signal.signal(signal.SIGALRM, _timeout_handler)
        signal.alarm(_TEST_TIMEOUT)
    except (AttributeError, ValueError):
        pass


def pytest_runtest_teardown(item, nextitem):
    """Test Pytest runtest teardown."""
    try:
        signal.alarm(0)
    except (AttributeError, ValueError):
        pass


@pytest.fixture(autouse=True)
def _isolate_card_env(monkeypatch):
    """Keep developer environment overrides out of the tests."""
    for name in (
        "CARDS_TEMPLATES_DIR",
        "CARDS_LOGOS_DIR",
        "CARDS_SEALS_DIR",
        "CARDS_OUTPUT_DIR",
        "CARDS_TMP_DIR",
        "CARD_WIDTH_PX",
        "CARD_HEIGHT_PX",
        "PAGE_LOAD_TIMEOUT_MS",
        "CHROMIUM_ARGS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def card_store(tmp_path: Path) -> GeneratorSettings:
    """Settings pointing at a fresh store with every template and asset."""
    templates = tmp_path / "templates"
    logos = tmp_path / "logos"
    seals = tmp_path / "seals"
    for d in (templates, logos, seals):
        d.mkdir()
    for name in CARD_TEMPLATES:
        (templates / f"{name}.html").write_text(TEMPLATE_BODY, encoding="utf-8")
    (logos / "blank.png").write_bytes(PNG_BYTES)
    (logos / "acme.png").write_bytes(PNG_BYTES + b"acme")
    (seals / "acaonova.png").write_bytes(PNG_BYTES + b"new")
    (seals / "acaorenovada.png").write_bytes(PNG_BYTES + b"renewed")
    return GeneratorSettings(
        templates_dir=templates,
        logos_dir=logos,
        seals_dir=seals,
        output_dir=tmp_path / "output",
        tmp_dir=tmp_path / "tmp",
    )


@pytest.fixture
def write_workbook(tmp_path: Path):
    """Return a helper that writes a list of row dicts to an .xlsx file."""

    def _write(rows, name: str = "cards.xlsx", columns=None) -> Path:
        path = tmp_path / name
        frame = pd.DataFrame(rows, columns=columns)
        frame.to_excel(path, index=False, engine="openpyxl")
        return path

    return _write


class FakeCompositor:
    """Async context manager standing in for ``DocumentCompositor``.

    ``compose`` writes the markup bytes to the target path. Markups that
    contain a marker listed in ``timeouts`` raise ``TimeoutExceededError``;
    ``fail_on`` triggers an ``ExternalServiceError`` on the n-th call.
    """

    def __init__(self, timeouts=(), fail_on: int | None = None):
        self.timeouts = tuple(timeouts)
        self.fail_on = fail_on
        self.calls: list[tuple[str, Path]] = []
        self.entered = False
        self.closed = False

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True
        return False

    async def compose(self, markup: str, output_path: Path) -> Path:
        self.calls.append((markup, Path(output_path)))
        if self.fail_on is not None and len(self.calls) == self.fail_on:
            raise ExternalServiceError("browser crashed")
        if any(marker in markup for marker in self.timeouts):
            raise TimeoutExceededError("page did not settle")
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        Path(output_path).write_bytes(b"%PDF-1.4\n" + markup.encode("utf-8"))
        return Path(output_path)


@pytest.fixture
def fake_compositor():
    """Return a factory producing one shared :class:`FakeCompositor`."""

    def _make(**kwargs):
        compositor = FakeCompositor(**kwargs)
        created = []

        def factory(settings):
            created.append(settings)
            return compositor

        factory.compositor = compositor
        factory.created = created
        return factory

    return _make
