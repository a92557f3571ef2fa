# Test type: Engine unit test
# Validation: progressive slab walk, 87A rebate, cess, age-band selection, regime handling and rule fallback
# Command: pytest -q test/test_engine_unit.py

import logging
from decimal import Decimal

import pytest

from app.rules.base import AgeBand, TaxSlab
from app.services.engine import TaxEngine, apply_slabs


@pytest.fixture()
def engine():
    return TaxEngine()


def test_old_regime_600k_scenario(engine):
    result = engine.compute(600000, age=45, assessment_year="2024-25", regime="Old")
    assert result.tax_after_rebate == Decimal("32500")
    assert result.rebate == Decimal("0")
    assert result.cess == Decimal("1300")
    assert result.total_tax == Decimal("33800")
    assert result.rule_key == "2024-25"
    assert result.age_band is AgeBand.GENERAL
    assert result.fallback_applied is False


def test_old_regime_rebate_wipes_out_tax_below_limit(engine):
    result = engine.compute(400000, age=30, assessment_year="2024-25", regime="Old")
    assert result.rebate == Decimal("7500")
    assert result.tax_after_rebate == Decimal("0")
    assert result.cess == Decimal("0")
    assert result.total_tax == Decimal("0")


def test_rebate_stops_just_above_limit(engine):
    at_limit = engine.compute(500000, regime="Old")
    above = engine.compute(500001, regime="Old")
    assert at_limit.total_tax == Decimal("0")
    assert above.rebate == Decimal("0")
    assert above.tax_after_rebate == Decimal("12500.20")


@pytest.mark.parametrize(
    "age, band, expected_tax",
    [
        (45, AgeBand.GENERAL, Decimal("172500")),
        (65, AgeBand.SENIOR, Decimal("170000")),
        (85, AgeBand.SUPER_SENIOR, Decimal("160000")),
    ],
)
def test_old_regime_uses_age_band_slabs(engine, age, band, expected_tax):
    result = engine.compute(1200000, age=age, assessment_year="2024-25", regime="Old")
    assert result.age_band is band
    assert result.tax_after_rebate == expected_tax


def test_new_regime_ignores_age(engine):
    young = engine.compute(1000000, age=25, assessment_year="2024-25", regime="New")
    senior = engine.compute(1000000, age=70, assessment_year="2024-25", regime="New")
    assert young == senior
    assert young.tax_after_rebate == Decimal("60000")
    assert young.cess == Decimal("2400")
    assert young.total_tax == Decimal("62400")
    assert young.rule_key == "2024-25-new"


def test_new_regime_rebate_limit(engine):
    result = engine.compute(700000, assessment_year="2024-25", regime="New")
    assert result.rebate == Decimal("25000")
    assert result.total_tax == Decimal("0")


def test_previous_year_new_regime_schedule(engine):
    result = engine.compute(800000, assessment_year="2023-24", regime="New")
    assert result.tax_after_rebate == Decimal("45000")
    assert result.rule_key == "2023-24-new"


def test_unknown_year_falls_back_to_default_old_rule(engine, caplog):
    with caplog.at_level(logging.WARNING, logger="app.services.engine"):
        result = engine.compute(600000, age=45, assessment_year="1999-00", regime="Old")
    assert result.fallback_applied is True
    assert result.rule_key == "2024-25"
    assert result.total_tax == Decimal("33800")
    assert "1999-00" in caplog.text


def test_fallback_for_new_regime_still_ignores_age(engine):
    result = engine.compute(1200000, age=70, assessment_year="2031-32", regime="New")
    assert result.fallback_applied is True
    assert result.age_band is AgeBand.GENERAL
    assert result.tax_after_rebate == Decimal("172500")


def test_fallback_does_not_alter_the_rule_table(engine):
    before = engine.rules.lookup("2024-25", "Old")
    engine.compute(600000, assessment_year="1999-00", regime="New")
    assert engine.rules.lookup("2024-25", "Old") is before
    assert engine.rules.lookup("1999-00", "New") is None


@pytest.mark.parametrize("income", [0, -1, -250000, "-0.01"])
def test_non_positive_income_owes_nothing(engine, income):
    result = engine.compute(income, assessment_year="2024-25", regime="Old")
    assert result.total_tax == Decimal("0")
    assert result.tax_after_rebate == Decimal("0")


@pytest.mark.parametrize("regime", ["Old", "New"])
@pytest.mark.parametrize("age", [30, 65, 85])
def test_total_tax_is_monotonic_in_income(engine, regime, age):
    incomes = [0, 250000, 300001, 499999, 500000, 500001, 700000, 700001, 999999, 1500000, 5000000]
    totals = [engine.compute(i, age=age, regime=regime).total_tax for i in incomes]
    assert totals == sorted(totals)


@pytest.mark.parametrize("income", [123456.78, 510000, 999999.99, 2500000])
def test_total_is_tax_after_rebate_plus_cess(engine, income):
    result = engine.compute(income, regime="Old")
    assert result.total_tax == result.tax_after_rebate + result.tax_after_rebate * Decimal("0.04")
    assert result.tax_after_rebate >= 0
    assert result.rebate <= Decimal("12500")


def test_regime_is_case_insensitive_and_validated(engine):
    assert engine.compute(600000, regime="old") == engine.compute(600000, regime="Old")
    with pytest.raises(ValueError, match="Unsupported tax regime"):
        engine.compute(600000, regime="flat")


def test_apply_slabs_taxes_each_band_once():
    schedule = (
        TaxSlab(upper_bound=Decimal("100"), rate=Decimal("0")),
        TaxSlab(upper_bound=Decimal("200"), rate=Decimal("0.10")),
        TaxSlab(upper_bound=None, rate=Decimal("0.50")),
    )
    assert apply_slabs(Decimal("50"), schedule) == Decimal("0")
    assert apply_slabs(Decimal("150"), schedule) == Decimal("5")
    assert apply_slabs(Decimal("200"), schedule) == Decimal("10")
    assert apply_slabs(Decimal("300"), schedule) == Decimal("60")
