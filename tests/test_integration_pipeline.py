"""End-to-end run of the CLI against the shipped templates and assets.

The rendering engine is replaced by the fake compositor from ``conftest``;
everything else (workbook parsing, templates, asset inlining, naming,
archiving, exit codes) runs for real.
"""

import zipfile

import src.pipeline.card_generator.processor as proc_mod
import src.program_generate_cards as cli
from src.config import LOGOS_DIR, SEALS_DIR, TEMPLATES_DIR


def test_cli_generates_archive_from_shipped_templates(
    monkeypatch, tmp_path, write_workbook, fake_compositor
):
    factory = fake_compositor()
    monkeypatch.setattr(proc_mod, "default_compositor_factory", factory)
    monkeypatch.setattr(cli, "configure_logging", lambda *a, **k: None)
    monkeypatch.setenv("CARDS_TMP_DIR", str(tmp_path / "tmp"))
    workbook = write_workbook(
        [
            {
                "ordem": 1,
                "tipo": "Cupom",
                "valor": 0.3,
                "cupom": "leve30",
                "categoria": "Bebidas",
            },
            {"ordem": 2, "tipo": "Promoção", "valor": "Leve 3 pague 2", "selo": "nova"},
            {"ordem": 3, "tipo": "Queda", "valor": "15%", "uf": "rj"},
            {"ordem": 4, "tipo": "cashback", "valor": 10, "urn": "42"},
            {"ordem": 5, "tipo": "BC", "valor": 20, "selo": "renovada"},
            {"ordem": 6, "tipo": "banner", "valor": 1},
        ]
    )
    out = tmp_path / "output"

    code = cli.main(
        [
            str(workbook),
            "--output-dir",
            str(out),
            "--templates-dir",
            str(TEMPLATES_DIR),
            "--logos-dir",
            str(LOGOS_DIR),
            "--seals-dir",
            str(SEALS_DIR),
        ]
    )

    assert code == cli.EXIT_OK
    archives = list(out.glob("*.zip"))
    assert len(archives) == 1
    with zipfile.ZipFile(archives[0]) as zf:
        assert sorted(zf.namelist()) == [
            "1_CUPOM_BEBIDAS.pdf",
            "2_PROMOCAO_SEM-CATEGORIA.pdf",
            "3_QUEDA_SEM-CATEGORIA.pdf",
            "4_CASHBACK_SEM-CATEGORIA.pdf",
            "5_BC_SEM-CATEGORIA.pdf",
        ]
    markups = [call[0] for call in factory.compositor.calls]
    assert all("{{" not in m for m in markups)
    assert all("data:image/png;base64," in m for m in markups)
    assert "30" in markups[0] and "LEVE30" in markups[0]
    assert "LEVE 3 PAGUE 2" in markups[1]
    assert "UF: RJ" in markups[2]
    assert "URN: 42" in markups[3]
    assert factory.compositor.closed


def test_cli_empty_workbook_exits_with_nothing_generated(
    monkeypatch, tmp_path, write_workbook, fake_compositor
):
    factory = fake_compositor()
    monkeypatch.setattr(proc_mod, "default_compositor_factory", factory)
    monkeypatch.setattr(cli, "configure_logging", lambda *a, **k: None)
    monkeypatch.setenv("CARDS_TMP_DIR", str(tmp_path / "tmp"))
    workbook = write_workbook([{"tipo": "banner", "valor": 1}])
    code = cli.main([str(workbook), "--output-dir", str(tmp_path / "out")])
    assert code == cli.EXIT_NOTHING_GENERATED
    assert factory.created == []
    assert list((tmp_path / "out").glob("*.zip")) == []
