"""Tests for free-text card type classification."""

import pytest

from src.pipeline.card_generator.card_types import normalize_card_type, strip_accents
from src.pipeline.card_generator.models import CardType


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Promoção", CardType.PROMOCAO),
        ("promo-relampago", CardType.PROMOCAO),
        ("  PROMOCAO  ", CardType.PROMOCAO),
        ("Cupom 10%", CardType.CUPOM),
        ("cupom", CardType.CUPOM),
        ("Queda de preço", CardType.QUEDA),
        ("CASHBACK", CardType.CASHBACK),
        ("bc", CardType.BC),
        (" BC ", CardType.BC),
    ],
)
def test_normalize_card_type_recognized(raw, expected):
    assert normalize_card_type(raw) is expected


@pytest.mark.parametrize("raw", [None, "", "   ", "bcx", "abc", "banner", 42])
def test_normalize_card_type_unrecognized(raw):
    assert normalize_card_type(raw) is None


def test_keyword_priority_promo_before_cupom():
    """Free text with several keywords resolves by fixed priority."""
    assert normalize_card_type("cupom promo") is CardType.PROMOCAO
    assert normalize_card_type("queda com cupom") is CardType.CUPOM
    assert normalize_card_type("cashback queda") is CardType.QUEDA


def test_strip_accents():
    assert strip_accents("Promoção Relâmpago") == "Promocao Relampago"
    assert strip_accents("plain") == "plain"
