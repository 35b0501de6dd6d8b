"""Arable — verifies the strict-majority rule on related FADN products."""

from farmdata.core.arable import is_arable_majority, update_arable_category


def test_strict_majority():
    assert is_arable_majority([True, True, False])
    assert not is_arable_majority([True, False])
    assert not is_arable_majority([])


def test_adds_arable_category():
    assert update_arable_category(["Other"], [True]) == ["Arable", "Other"]


def test_removes_arable_category():
    assert update_arable_category(["Arable", "Cereal"], [False, False, True]) == ["Cereal"]


def test_unchanged_without_related_products():
    assert update_arable_category(["Cereal", "Arable"], []) == ["Cereal", "Arable"]
    assert update_arable_category(None, []) == []
