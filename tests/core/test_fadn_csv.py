"""FADN CSV — verifies header matching, boolean parsing and line-numbered errors."""

import pytest

from farmdata.core.domain_types import ProductType
from farmdata.core.errors import InvalidInputError
from farmdata.core.fadn_csv import parse_bool, parse_fadn_products


def test_parses_rows_in_any_column_order():
    text = "Arable,FADN Code,Crop Description\ntrue,10110,Common wheat\nno,10120, Durum wheat \n"
    rows = parse_fadn_products(text)
    assert [r.fadn_identifier for r in rows] == ["10110", "10120"]
    assert rows[0].arable is True
    assert rows[1].description == "Durum wheat"
    assert rows[0].product_type == ProductType.AGRICULTURAL


def test_blank_lines_are_skipped():
    rows = parse_fadn_products("fadn code,crop description,arable\n\n1,Oats,1\n,,\n")
    assert len(rows) == 1


def test_missing_column_is_rejected():
    with pytest.raises(InvalidInputError, match="arable"):
        parse_fadn_products("fadn code,crop description\n1,Oats\n")


def test_empty_file_is_rejected():
    with pytest.raises(InvalidInputError):
        parse_fadn_products("")


def test_bad_boolean_reports_line_number():
    with pytest.raises(InvalidInputError, match="line 3"):
        parse_fadn_products("fadn code,crop description,arable\n1,Oats,true\n2,Rye,maybe\n")


def test_parse_bool_values():
    assert parse_bool(" YES ")
    assert not parse_bool("0")
    with pytest.raises(ValueError):
        parse_bool("maybe")
