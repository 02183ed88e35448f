"""CLI tests for program_generate_cards."""

import src.program_generate_cards as cli
from src.exceptions import DataValidationError, ExternalServiceError
from src.pipeline.card_generator.models import GenerationResult, GenerationStatus


def test_parse_arguments_and_settings(tmp_path):
    args = cli.parse_arguments(
        [
            str(tmp_path / "cards.xlsx"),
            "--output-dir",
            str(tmp_path / "out"),
            "--timeout-ms",
            "5000",
        ]
    )
    assert args.workbook == tmp_path / "cards.xlsx"
    settings = cli.build_settings(args)
    assert settings.output_dir == tmp_path / "out"
    assert settings.page_load_timeout_ms == 5000


def _patch_run(monkeypatch, outcome):
    calls = {}

    def fake_run(workbook, settings, on_progress=None):
        calls["workbook"] = workbook
        calls["settings"] = settings
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(cli, "run_from_config", fake_run)
    monkeypatch.setattr(cli, "configure_logging", lambda *a, **k: None)
    return calls


def test_main_exit_codes(monkeypatch, tmp_path):
    workbook = str(tmp_path / "cards.xlsx")
    done = GenerationResult(
        status=GenerationStatus.COMPLETED,
        archive_path=tmp_path / "a.zip",
        total=1,
        processed=1,
    )
    calls = _patch_run(monkeypatch, done)
    assert cli.main([workbook]) == cli.EXIT_OK
    assert str(calls["workbook"]) == workbook

    _patch_run(monkeypatch, GenerationResult(status=GenerationStatus.EMPTY_INPUT))
    assert cli.main([workbook]) == cli.EXIT_NOTHING_GENERATED

    _patch_run(monkeypatch, GenerationResult(status=GenerationStatus.NO_OUTPUT, total=2))
    assert cli.main([workbook]) == cli.EXIT_NOTHING_GENERATED


def test_main_reports_failures(monkeypatch, tmp_path, capsys):
    workbook = str(tmp_path / "cards.xlsx")
    _patch_run(monkeypatch, ExternalServiceError("browser missing"))
    assert cli.main([workbook]) == cli.EXIT_FAILURE
    assert "browser missing" in capsys.readouterr().out

    _patch_run(monkeypatch, DataValidationError("bad sheet"))
    assert cli.main([workbook]) == cli.EXIT_FAILURE

    _patch_run(monkeypatch, FileNotFoundError("no workbook"))
    assert cli.main([workbook]) == cli.EXIT_FAILURE


def test_main_rejects_bad_timeout(monkeypatch, tmp_path):
    _patch_run(monkeypatch, GenerationResult(status=GenerationStatus.EMPTY_INPUT))
    assert cli.main([str(tmp_path / "x.xlsx"), "--timeout-ms", "0"]) == cli.EXIT_FAILURE
