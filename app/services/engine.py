import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from app.rules.base import AgeBand, Regime, TaxSlab, TaxYearRule
from app.rules.registry import RuleTable


logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def to_decimal(value: float | int | str | Decimal) -> Decimal:
    return Decimal(str(value))


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def to_money_float(value: Decimal) -> float:
    return float(quantize_money(value))


@dataclass(frozen=True)
class TaxComputation:
    tax_after_rebate: Decimal
    rebate: Decimal
    cess: Decimal
    total_tax: Decimal
    rule_key: str
    age_band: AgeBand
    fallback_applied: bool = False


def apply_slabs(income: Decimal, schedule: tuple[TaxSlab, ...]) -> Decimal:
    tax = ZERO
    previous_bound = ZERO
    for slab in schedule:
        ceiling = income if slab.upper_bound is None else min(slab.upper_bound, income)
        taxable = ceiling - previous_bound
        if taxable <= 0:
            break
        tax += taxable * slab.rate
        if slab.upper_bound is None:
            break
        previous_bound = slab.upper_bound
    return tax


class TaxEngine:
    def __init__(self, rules: RuleTable | None = None) -> None:
        self.rules = rules if rules is not None else RuleTable()

    def resolve_rule(self, assessment_year: str, regime: Regime) -> tuple[TaxYearRule, bool]:
        rule = self.rules.lookup(assessment_year, regime)
        if rule is not None:
            return rule, False

        fallback = self.rules.fallback
        logger.warning(
            "No tax rules for AY %s (%s regime); falling back to %s",
            assessment_year,
            regime.value,
            fallback.key,
        )
        return fallback, True

    def compute(
        self,
        net_income: float | int | str | Decimal,
        age: int = 30,
        assessment_year: str = "2024-25",
        regime: Regime | str = Regime.OLD,
    ) -> TaxComputation:
        regime = Regime.parse(regime)
        income = to_decimal(net_income)
        rule, fallback_applied = self.resolve_rule(assessment_year, regime)
        age_band, schedule = rule.select(age, regime)

        tax = apply_slabs(income, schedule)

        rebate = ZERO
        if income <= rule.rebate.income_limit:
            rebate = min(tax, rule.rebate.max_rebate)

        tax_after_rebate = max(ZERO, tax - rebate)
        cess = tax_after_rebate * rule.cess_rate

        return TaxComputation(
            tax_after_rebate=tax_after_rebate,
            rebate=rebate,
            cess=cess,
            total_tax=tax_after_rebate + cess,
            rule_key=rule.key,
            age_band=age_band,
            fallback_applied=fallback_applied,
        )
