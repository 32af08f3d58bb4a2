"""Tests for the 13th-month element classifier."""

from __future__ import annotations

import pytest

from controle_loa.services.classificador import RegraTrezeMeses, is_treze_meses


@pytest.mark.parametrize(
    "elemento",
    [
        "3.1.90.11.00.00.00.00",
        "3.1.90.13.00.00.00.00",
        "319011",
        "3.3.90.08.01",
        "339008",
        "  3.1.90.94  ",
    ],
)
def test_personnel_elements_are_13_months(elemento):
    assert is_treze_meses(elemento) is True


@pytest.mark.parametrize(
    "elemento",
    [
        "4.4.90.52.00.00.00.00",
        "3.3.90.39.00.00.00.00",
        "339039",
        "",
        None,
        319011,
    ],
)
def test_other_elements_are_not_13_months(elemento):
    assert is_treze_meses(elemento) is False


def test_classifier_is_stable():
    assert [is_treze_meses("3.1.90.11") for _ in range(3)] == [True, True, True]


def test_custom_rule_table():
    regra = RegraTrezeMeses(prefixos=("4.4",), contem=())
    assert is_treze_meses("4.4.90.52", regra) is True
    assert is_treze_meses("3.1.90.11", regra) is False
