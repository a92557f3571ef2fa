import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from app.rules.base import Regime
from app.schemas.common import (
    CapitalGains,
    ClientSummary,
    Deductions,
    FinalSettlement,
    IncomeDetails,
    TaxComputationSummary,
    TaxPaid,
)
from app.schemas.itr import ITRDocument, total
from app.services.age import calculate_age
from app.services.engine import TaxEngine, quantize_money, to_money_float


logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class MalformedDocumentError(ValueError):
    """The raw input could not be traversed as an ITR document; no summary is produced."""


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def describe_errors(exc: ValidationError, limit: int = 3) -> str:
    parts = []
    for error in exc.errors()[:limit]:
        location = ".".join(str(item) for item in error["loc"])
        parts.append(f"{location}: {error['msg']}")
    if exc.error_count() > limit:
        parts.append(f"... {exc.error_count() - limit} more")
    return "; ".join(parts)


def settle(liability: Decimal, paid: Decimal) -> FinalSettlement:
    liability = quantize_money(liability)
    paid = quantize_money(paid)
    return FinalSettlement(
        taxLiability=float(liability),
        taxPaid=float(paid),
        refundDue=float(max(ZERO, paid - liability)),
        taxPayable=float(max(ZERO, liability - paid)),
    )


class DocumentNormalizer:
    def __init__(
        self,
        engine: TaxEngine | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.engine = engine or TaxEngine()
        self.clock = clock

    def decode(self, raw: Any) -> ITRDocument:
        if not isinstance(raw, Mapping):
            logger.warning("Rejected ITR document of type %s", type(raw).__name__)
            raise MalformedDocumentError("ITR document must be a JSON object")
        try:
            return ITRDocument.model_validate(dict(raw))
        except ValidationError as exc:
            logger.warning("Rejected unreadable ITR document: %s", describe_errors(exc))
            raise MalformedDocumentError(
                f"ITR document could not be read: {describe_errors(exc)}"
            ) from exc

    def normalize(self, raw: Any) -> ClientSummary:
        document = self.decode(raw)
        now = self.clock()

        income = document.total_income
        gains = document.capital_gains
        regime = Regime.NEW if document.regime_choice.is_new_regime else Regime.OLD
        age = calculate_age(document.general.dob, now.date())
        assessment_year = document.form.assessment_year

        # Gross total income is taken from the return as filed, not re-summed from the heads.
        net_taxable_income = income.gross_total_income - income.total_deductions
        paid = document.tax_paid
        tds_salary = total(paid.tds_on_salaries)
        tds_others = total(paid.tds_on_others)
        advance_tax = total(paid.advance_tax)
        self_assessment_tax = total(paid.self_assessment_tax)
        total_tax_paid = tds_salary + tds_others + advance_tax + self_assessment_tax

        try:
            computation = self.engine.compute(net_taxable_income, age, assessment_year, regime)
            settlement = settle(computation.total_tax, total_tax_paid)
        except InvalidOperation as exc:
            logger.warning("Rejected ITR document with out-of-range amounts")
            raise MalformedDocumentError("ITR document amounts are out of range") from exc

        direction = "settled"
        if settlement.refundDue > 0:
            direction = "refund due"
        elif settlement.taxPayable > 0:
            direction = "tax payable"
        logger.info(
            "Normalized ITR for AY %s (%s regime, rule %s): %s",
            assessment_year,
            regime.value,
            computation.rule_key,
            direction,
        )

        return ClientSummary(
            name=document.general.name,
            pan=document.general.pan,
            assessmentYear=assessment_year,
            filingStatus=document.filing_status.status,
            age=age,
            taxRegime=regime.value,
            incomeDetails=IncomeDetails(
                salary=to_money_float(income.salaries),
                houseProperty=to_money_float(income.house_property),
                businessIncome=to_money_float(income.business),
                capitalGains=CapitalGains(
                    shortTerm=to_money_float(gains.short_term),
                    longTerm=to_money_float(gains.long_term),
                ),
                otherSources=to_money_float(income.other_sources),
                grossTotalIncome=to_money_float(income.gross_total_income),
            ),
            deductions=Deductions(
                section80C=to_money_float(income.deductions.section_80c),
                section80D=to_money_float(income.deductions.section_80d),
                section80G=to_money_float(income.deductions.section_80g),
                totalDeductions=to_money_float(income.total_deductions),
            ),
            netTaxableIncome=to_money_float(net_taxable_income),
            taxComputation=TaxComputationSummary(
                taxOnIncome=to_money_float(computation.tax_after_rebate),
                rebate87A=to_money_float(computation.rebate),
                cess=to_money_float(computation.cess),
                totalTaxLiability=to_money_float(computation.total_tax),
            ),
            taxPaid=TaxPaid(
                tdsSalary=to_money_float(tds_salary),
                tdsOthers=to_money_float(tds_others),
                advanceTax=to_money_float(advance_tax),
                selfAssessmentTax=to_money_float(self_assessment_tax),
                totalTaxPaid=to_money_float(total_tax_paid),
            ),
            finalSettlement=settlement,
            uploadedAt=now.isoformat(),
        )
