"""Tests for ETA parsing and arrival ordering."""

import pytest

from nextbus_api.models.predictions import Prediction
from nextbus_api.services.bustracker.eta import parse_eta, sort_predictions


class TestParseEta:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("5 MIN", 5),
            ("12MIN", 12),
            ("3 MINUTES", 3),
            ("007 min", 7),
            ("APPROACHING", 0),
            ("approaching", 0),
            ("Due", 0),
            ("ARRIVING", 0),
            ("NOW ARRIVING 3", 0),
            ("MIN", None),
            ("", None),
            ("--", None),
        ],
    )
    def test_parse(self, token: str, expected: int | None) -> None:
        assert parse_eta(token) == expected


def _p(route: str, eta: int | None) -> Prediction:
    return Prediction(route=route, headsign="UCSB", eta_minutes=eta)


class TestSortPredictions:
    def test_unknown_sorts_last(self) -> None:
        result = sort_predictions([_p("a", 5), _p("b", None), _p("c", 0)])
        assert [p.eta_minutes for p in result] == [0, 5, None]

    def test_ties_keep_extraction_order(self) -> None:
        result = sort_predictions([_p("28", 5), _p("11", 5), _p("24X", 2), _p("6", 5)])
        assert [p.route for p in result] == ["24X", "28", "11", "6"]

    def test_unknown_ties_keep_order(self) -> None:
        result = sort_predictions([_p("x", None), _p("y", 1), _p("z", None)])
        assert [p.route for p in result] == ["y", "x", "z"]

    def test_large_known_eta_before_unknown(self) -> None:
        result = sort_predictions([_p("a", None), _p("b", 20_000)])
        assert [p.route for p in result] == ["b", "a"]

    def test_empty(self) -> None:
        assert sort_predictions([]) == []


class TestEtaLabel:
    @pytest.mark.parametrize(
        ("eta", "label"),
        [(None, "—"), (0, "Approaching"), (1, "1 min"), (14, "14 min")],
    )
    def test_label(self, eta: int | None, label: str) -> None:
        assert _p("11", eta).eta_label == label
