from decimal import Decimal

from app.rules.base import RebateRule, Regime, TaxYearRule, slabs


ASSESSMENT_YEAR = "2023-24"

OLD_REGIME = TaxYearRule(
    assessment_year=ASSESSMENT_YEAR,
    regime=Regime.OLD,
    general=slabs((250000, "0"), (500000, "0.05"), (1000000, "0.20"), (None, "0.30")),
    senior=slabs((300000, "0"), (500000, "0.05"), (1000000, "0.20"), (None, "0.30")),
    super_senior=slabs((500000, "0"), (1000000, "0.20"), (None, "0.30")),
    cess_rate=Decimal("0.04"),
    rebate=RebateRule(income_limit=Decimal("500000"), max_rebate=Decimal("12500")),
)

# Section 115BAC as it stood before the Finance Act 2023 revision.
NEW_REGIME = TaxYearRule(
    assessment_year=ASSESSMENT_YEAR,
    regime=Regime.NEW,
    general=slabs(
        (250000, "0"),
        (500000, "0.05"),
        (750000, "0.10"),
        (1000000, "0.15"),
        (1250000, "0.20"),
        (1500000, "0.25"),
        (None, "0.30"),
    ),
    cess_rate=Decimal("0.04"),
    rebate=RebateRule(income_limit=Decimal("500000"), max_rebate=Decimal("12500")),
)

RULES = (OLD_REGIME, NEW_REGIME)
