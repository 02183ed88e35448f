"""Tests for logo and seal inlining."""

import base64
from pathlib import Path

from src.pipeline.card_generator.assets import (
    image_to_data_uri,
    media_subtype_for,
    resolve_logo,
    resolve_seal,
    seal_filename_for,
)


def _payload(uri: str) -> bytes:
    return base64.b64decode(uri.split(",", 1)[1])


def test_media_subtype_for():
    assert media_subtype_for(Path("a.JPG")) == "jpeg"
    assert media_subtype_for(Path("a.jpeg")) == "jpeg"
    assert media_subtype_for(Path("a.svg")) == "svg+xml"
    assert media_subtype_for(Path("a.png")) == "png"


def test_image_to_data_uri(tmp_path: Path):
    img = tmp_path / "x.jpg"
    img.write_bytes(b"\xff\xd8data")
    uri = image_to_data_uri(img)
    assert uri.startswith("data:image/jpeg;base64,")
    assert _payload(uri) == b"\xff\xd8data"
    assert image_to_data_uri(tmp_path / "missing.png") == ""


def test_resolve_logo_found_and_fallbacks(card_store):
    logos = card_store.logos_dir
    acme = resolve_logo("acme.png", logos)
    assert _payload(acme) == (logos / "acme.png").read_bytes()
    blank = (logos / "blank.png").read_bytes()
    assert _payload(resolve_logo("", logos)) == blank
    assert _payload(resolve_logo("missing.png", logos)) == blank


def test_resolve_logo_strips_directories(card_store):
    uri = resolve_logo("../../etc/acme.png", card_store.logos_dir)
    assert _payload(uri) == (card_store.logos_dir / "acme.png").read_bytes()


def test_resolve_logo_without_default_asset(tmp_path: Path, caplog):
    assert resolve_logo("missing.png", tmp_path) == ""
    assert "Default logo" in caplog.text


def test_seal_designators(card_store):
    assert seal_filename_for("nova") == "acaonova.png"
    assert seal_filename_for(" Renovada ") == "acaorenovada.png"
    assert seal_filename_for("") is None
    assert seal_filename_for("outra") is None
    seals = card_store.seals_dir
    assert _payload(resolve_seal("NOVA", seals)) == (seals / "acaonova.png").read_bytes()
    assert resolve_seal("", seals) == ""
    assert resolve_seal("qualquer", seals) == ""
