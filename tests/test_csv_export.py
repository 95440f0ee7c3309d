"""
tests/test_csv_export.py

Pytest unit tests for CSV serialisation and export filenames.
"""

from __future__ import annotations

import csv
import io
from datetime import date
from types import SimpleNamespace

import pytest

from analytics.csv_export import export_filename, format_value, slugify, to_csv


class TestToCsv:
    def test_empty_records_produce_empty_string(self) -> None:
        assert to_csv([], ["a", "b"]) == ""

    def test_header_unquoted_and_fields_quoted(self) -> None:
        text = to_csv([{"a": "x", "b": 1}], ["a", "b"])
        assert text == 'a,b\n"x","1"'

    def test_no_trailing_newline(self) -> None:
        text = to_csv([{"a": 1}, {"a": 2}], ["a"])
        assert text == 'a\n"1"\n"2"'
        assert not text.endswith("\n")

    def test_embedded_quotes_are_doubled(self) -> None:
        text = to_csv([{"note": 'He said "hi"'}], ["note"])
        assert text.splitlines()[1] == '"He said ""hi"""'

    def test_commas_stay_inside_quotes(self) -> None:
        text = to_csv([{"a": "one, two", "b": "three"}], ["a", "b"])
        assert text.splitlines()[1] == '"one, two","three"'

    def test_missing_and_none_values_are_empty(self) -> None:
        text = to_csv([{"a": None}], ["a", "b"])
        assert text == 'a,b\n"",""'

    def test_column_order_is_respected(self) -> None:
        text = to_csv([{"a": 1, "b": 2, "c": 3}], ["c", "a"])
        assert text == 'c,a\n"3","1"'

    def test_objects_with_attributes_are_accepted(self) -> None:
        row = SimpleNamespace(initials="AB", score=4.0)
        assert to_csv([row], ["initials", "score"]) == 'initials,score\n"AB","4"'

    def test_round_trip_on_simple_data(self) -> None:
        records = [
            {"date": "2026-03-01", "initials": "AB", "category": "Imaging delay"},
            {"date": "2026-03-02", "initials": "CD", "category": "Bed not ready"},
        ]
        columns = ["date", "initials", "category"]
        lines = to_csv(records, columns).split("\n")

        assert lines[0].split(",") == columns
        rebuilt = [
            dict(zip(columns, [field.strip('"') for field in line.split(",")]))
            for line in lines[1:]
        ]
        assert rebuilt == records

    def test_output_parses_with_csv_reader(self) -> None:
        records = [{"comment": 'multi\nline, "quoted"', "n": 2}]
        parsed = list(csv.reader(io.StringIO(to_csv(records, ["comment", "n"]))))
        assert parsed == [["comment", "n"], ['multi\nline, "quoted"', "2"]]


class TestFormatValue:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, ""),
            (True, "true"),
            (False, "false"),
            (3.0, "3"),
            (3.25, "3.25"),
            (float("nan"), "NaN"),
            (float("inf"), "Infinity"),
            (float("-inf"), "-Infinity"),
            (0, "0"),
            (date(2026, 3, 1), "2026-03-01"),
            (["AB", "CD"], "AB|CD"),
            ([], ""),
            ("text", "text"),
        ],
    )
    def test_stringification(self, value: object, expected: str) -> None:
        assert format_value(value) == expected


class TestFilenames:
    def test_without_entity(self) -> None:
        name = export_filename("discharge_raw", date(2026, 3, 1), date(2026, 3, 31))
        assert name == "discharge_raw_2026-03-01_2026-03-31.csv"

    def test_with_entity(self) -> None:
        name = export_filename("delay_survey", "2026-03-01", "2026-03-31", "AB")
        assert name == "delay_survey_2026-03-01_2026-03-31_AB.csv"

    def test_open_bounds(self) -> None:
        assert export_filename("rankings", None, None) == "rankings_all_all.csv"

    def test_slugify(self) -> None:
        assert slugify("Spring   Peer Survey") == "spring_peer_survey"

    def test_slugify_keeps_edge_whitespace_as_underscores(self) -> None:
        assert slugify("  Spring Survey\n") == "_spring_survey_"
