"""Tests for GET/POST request parsing."""

import json

import pytest

from fx_config import COVERAGE_PRESETS, DEFAULT_SYMBOLS
from fx_request import (
    MethodNotAllowed,
    RequestValidationError,
    clean_symbols,
    coverage_symbols,
    parse_fx_request,
    parse_symbol_list,
)


class TestParseGet:
    def test_should_read_date_and_symbols_from_query(self):
        req = parse_fx_request("GET", {"date": "2024-06-07", "symbols": "eurusd, GBPUSD ,,"}, None)
        assert req == {"date": "2024-06-07", "coverage": "full", "symbols": ["EURUSD", "GBPUSD"]}

    def test_should_fall_back_to_coverage_preset(self):
        req = parse_fx_request("GET", {"date": "2024-06-07", "coverage": "MAJORS"}, None)
        assert req["coverage"] == "majors"
        assert req["symbols"] == COVERAGE_PRESETS["majors"]
        assert len(req["symbols"]) == 10

    def test_should_default_to_full_coverage(self):
        req = parse_fx_request("GET", {"date": "2024-06-07"}, None)
        assert req["symbols"] == DEFAULT_SYMBOLS
        assert len(req["symbols"]) == 42

    def test_should_fall_back_to_full_for_unknown_coverage(self):
        req = parse_fx_request("GET", {"date": "2024-06-07", "coverage": "everything"}, None)
        assert req["symbols"] == DEFAULT_SYMBOLS

    def test_should_keep_duplicate_symbols(self):
        req = parse_fx_request("GET", {"date": "2024-06-07", "symbols": "EURUSD,eurusd"}, None)
        assert req["symbols"] == ["EURUSD", "EURUSD"]

    def test_should_accept_lowercase_method(self):
        assert parse_fx_request("get", {"date": "2024-06-07"}, None)["date"] == "2024-06-07"


class TestParsePost:
    def test_should_read_json_body(self):
        body = json.dumps({"date": "2024-06-08", "symbols": ["eurusd", " jpyusd "]})
        req = parse_fx_request("POST", None, body)
        assert req == {"date": "2024-06-08", "coverage": "full", "symbols": ["EURUSD", "JPYUSD"]}

    def test_should_accept_bytes_and_mapping_bodies(self):
        assert parse_fx_request("POST", None, b'{"date": "2024-06-07"}')["symbols"] == DEFAULT_SYMBOLS
        assert parse_fx_request("POST", None, {"date": "2024-06-07", "coverage": "extended"})["symbols"] == DEFAULT_SYMBOLS[:30]

    def test_should_ignore_non_list_symbols(self):
        req = parse_fx_request("POST", None, {"date": "2024-06-07", "symbols": "EURUSD", "coverage": "majors"})
        assert req["symbols"] == COVERAGE_PRESETS["majors"]

    def test_should_reject_malformed_json(self):
        with pytest.raises(RequestValidationError, match="valid JSON"):
            parse_fx_request("POST", None, "{not json")

    def test_should_reject_non_object_json(self):
        with pytest.raises(RequestValidationError, match="JSON object"):
            parse_fx_request("POST", None, '["EURUSD"]')

    def test_should_treat_empty_body_as_missing_date(self):
        with pytest.raises(RequestValidationError, match="YYYY-MM-DD"):
            parse_fx_request("POST", None, "")

    def test_should_reject_body_that_is_not_utf8(self):
        with pytest.raises(RequestValidationError, match="valid JSON"):
            parse_fx_request("POST", None, b'{"date": "2024-06-07\xff"}')

    def test_should_reject_deeply_nested_json(self):
        with pytest.raises(RequestValidationError, match="valid JSON"):
            parse_fx_request("POST", None, "[" * 100000)


class TestValidation:
    @pytest.mark.parametrize("method", ["PUT", "DELETE", "PATCH", ""])
    def test_should_reject_other_methods(self, method):
        with pytest.raises(MethodNotAllowed) as exc_info:
            parse_fx_request(method, {"date": "2024-06-07"}, None)
        assert exc_info.value.status_code == 405
        assert str(exc_info.value) == "Use GET or POST"

    @pytest.mark.parametrize("raw", [None, "", "06/07/2024", "2024-6-7", "2024-06-07T00:00", "٢٠٢٤-06-07", 20240607])
    def test_should_reject_malformed_dates(self, raw):
        query = {} if raw is None else {"date": raw}
        with pytest.raises(RequestValidationError) as exc_info:
            parse_fx_request("POST", None, query)
        assert exc_info.value.status_code == 400
        assert str(exc_info.value) == "date must be YYYY-MM-DD"

    def test_should_reject_impossible_calendar_dates(self):
        with pytest.raises(RequestValidationError, match="valid calendar date"):
            parse_fx_request("GET", {"date": "2024-02-30"}, None)

    def test_should_require_symbols_in_strict_mode(self):
        with pytest.raises(RequestValidationError, match=r"symbols\[\] required"):
            parse_fx_request("GET", {"date": "2024-06-07"}, None, require_symbols=True)

    def test_strict_mode_accepts_explicit_symbols(self):
        req = parse_fx_request("GET", {"date": "2024-06-07", "symbols": "EURUSD"}, None, require_symbols=True)
        assert req["symbols"] == ["EURUSD"]


def test_clean_symbols_stringifies_and_drops_blanks():
    assert clean_symbols([" eurusd", "", "  ", 123]) == ["EURUSD", "123"]


def test_parse_symbol_list_handles_missing_value():
    assert parse_symbol_list(None) == []
    assert parse_symbol_list("") == []


def test_coverage_symbols_returns_copy():
    symbols = coverage_symbols("majors")
    symbols.append("XXXUSD")
    assert "XXXUSD" not in COVERAGE_PRESETS["majors"]
