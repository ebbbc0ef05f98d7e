"""Unit tests for keyword-based attribute inference."""
import pytest

from core.domain.entities import ItemDetail
from core.domain.services import (
    UNCATEGORIZED,
    PartialAttributes,
    contains_term,
    infer_attributes,
    infer_category,
    infer_format,
    is_music_product,
    looks_like_release,
    merge_with_inferred,
    search_query_for,
)


def test_artist_title_name_is_rock_lp():
    attrs = infer_attributes("Radiohead - OK Computer")

    assert attrs.category == "Rock"
    assert attrs.format == "LP"
    assert attrs.condition_sleeve is None
    assert attrs.condition_media is None


def test_new_vinyl_with_mint_condition():
    attrs = infer_attributes("Miles Davis - Kind of Blue (Vinyl, New)")

    assert attrs.category == "New Vinyl"
    assert attrs.format == "Vinyl"
    assert attrs.condition_sleeve == "Mint (M)"
    assert attrs.condition_media == "Mint (M)"


def test_condition_grade_from_abbreviation():
    attrs = infer_attributes("Nirvana - Nevermind (Used, VG+)")

    assert attrs.condition_sleeve == "Very Good Plus (VG+)"
    assert attrs.format == "LP"


def test_merchandise_has_no_format():
    assert infer_format("Band T-Shirt (Large)") is None
    assert infer_category("Band T-Shirt (Large)") == "T-Shirts"


def test_unknown_item_is_uncategorized_vinyl_by_default():
    assert infer_category("Gift Card") == UNCATEGORIZED
    assert infer_format("Gift Card") == "Vinyl"


@pytest.mark.parametrize("name,expected", [
    ('Beatles - Help! 7"', "45"),
    ("Pink Floyd - The Wall Box Set", "Box Set"),
    ("Turntable Cleaner Kit", "Cleaner"),
])
def test_category_rules_first_match_wins(name, expected):
    assert infer_category(name) == expected


def test_genre_keyword_in_description():
    assert infer_category("Fela Kuti - Zombie", "Classic afrobeat funk") == "Funk/Soul"


def test_contains_term_respects_word_boundaries():
    assert contains_term("Live at the Fillmore LP", "lp")
    assert not contains_term("Help!", "lp")
    assert contains_term("two CDs", "cd")


def test_looks_like_release_excludes_merch():
    assert looks_like_release("Radiohead - OK Computer")
    assert not looks_like_release("Radiohead - Tour Poster")
    assert not looks_like_release("Radiohead OK Computer")


def test_merge_keeps_explicit_values():
    detail = ItemDetail(item_id="A1", category="Jazz", format=None)
    merged = merge_with_inferred(detail, PartialAttributes(category="Rock", format="LP"))

    assert merged.category == "Jazz"
    assert merged.format == "LP"


def test_merge_replaces_explicit_uncategorized():
    detail = ItemDetail(item_id="A1", category=UNCATEGORIZED)
    merged = merge_with_inferred(detail, PartialAttributes(category="Metal"))

    assert merged.category == "Metal"


@pytest.mark.parametrize("name,kwargs,expected", [
    ("Radiohead - OK Computer", {}, True),
    ("Mystery Item", {"format": "LP"}, True),
    ("Band T-Shirt", {}, False),
    ("Gift Card", {"category": "Poster"}, False),
    ("Sampler", {"description": "Twelve tracks from the label"}, True),
    ("1 - 2 Slipmats", {}, False),
])
def test_is_music_product(name, kwargs, expected):
    assert is_music_product(name, **kwargs) is expected


def test_search_query_strips_format_suffix():
    assert search_query_for("Radiohead - OK Computer - Vinyl LP") == "Radiohead - OK Computer"
    assert search_query_for("Radiohead - OK Computer") == "Radiohead - OK Computer"
    assert search_query_for("") == ""
