"""Schema-with-defaults decoder for raw ITR JSON documents.

Each section of the return is modelled once with its source field names as aliases and a
default for every field, so a missing or reshaped section decodes to zeros and placeholders
instead of failing. Only values that cannot be read at all (a non-numeric amount, a tax-paid
schedule that is not a list) raise ``ValidationError``.
"""

from decimal import Decimal
from typing import Any, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator


ZERO = Decimal("0")
# Keeps slab, cess and paisa rounding within the default 28-digit decimal context.
MAX_AMOUNT = Decimal("1e15")


def as_section(value: Any) -> Any:
    return value if isinstance(value, dict) else {}


def as_entries(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, list):
        return [as_section(item) for item in value]
    return value


class Section(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class AmountSection(Section):
    @field_validator("*", mode="before")
    @classmethod
    def default_blank_amounts(cls, value: Any, info: ValidationInfo) -> Any:
        if cls.model_fields[info.field_name].annotation is not Decimal:
            return value
        if value is None or (isinstance(value, str) and not value.strip()):
            return ZERO
        if isinstance(value, bool):
            raise ValueError("amount must be numeric")
        if isinstance(value, float):
            return str(value)
        return value

    @field_validator("*")
    @classmethod
    def bound_amounts(cls, value: Any) -> Any:
        if isinstance(value, Decimal) and abs(value) > MAX_AMOUNT:
            raise ValueError(f"amount must not exceed {MAX_AMOUNT:,.0f} in magnitude")
        return value


class TextSection(Section):
    @field_validator("*", mode="before")
    @classmethod
    def default_blank_text(cls, value: Any, info: ValidationInfo) -> Any:
        default = cls.model_fields[info.field_name].default
        if value is None or (isinstance(value, str) and not value.strip()):
            return default
        if isinstance(value, str):
            return value.strip()
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return default


class GeneralInfo(TextSection):
    name: str = Field(default="N/A", validation_alias=AliasChoices("Name", "name"))
    pan: str = Field(default="N/A", validation_alias=AliasChoices("PAN", "pan"))
    dob: str | None = Field(default=None, validation_alias=AliasChoices("DOB", "dob"))


class FormInfo(TextSection):
    assessment_year: str = Field(
        default="2024-25", validation_alias=AliasChoices("AssessmentYear", "assessment_year")
    )


class FilingStatusInfo(TextSection):
    status: str = Field(default="Filed", validation_alias=AliasChoices("Status", "status"))


class RegimeChoice(Section):
    opting_new_regime: Any = Field(
        default=None,
        validation_alias=AliasChoices("isOptingForNewTaxRegime", "opting_new_regime"),
    )

    @property
    def is_new_regime(self) -> bool:
        flag = self.opting_new_regime
        if isinstance(flag, bool):
            return flag
        return isinstance(flag, str) and flag.strip().upper() == "Y"


class DeductionsSection(AmountSection):
    section_80c: Decimal = Field(default=ZERO, validation_alias=AliasChoices("Section80C", "section_80c"))
    section_80d: Decimal = Field(default=ZERO, validation_alias=AliasChoices("Section80D", "section_80d"))
    section_80g: Decimal = Field(default=ZERO, validation_alias=AliasChoices("Section80G", "section_80g"))


class TotalIncomeSection(AmountSection):
    salaries: Decimal = Field(default=ZERO, validation_alias=AliasChoices("Salaries", "salaries"))
    house_property: Decimal = Field(
        default=ZERO, validation_alias=AliasChoices("IncomeFromHP", "house_property")
    )
    business: Decimal = Field(default=ZERO, validation_alias=AliasChoices("IncomeFromBP", "business"))
    other_sources: Decimal = Field(
        default=ZERO, validation_alias=AliasChoices("IncomeFromOS", "other_sources")
    )
    gross_total_income: Decimal = Field(
        default=ZERO, validation_alias=AliasChoices("GrossTotalIncome", "gross_total_income")
    )
    deductions: DeductionsSection = Field(
        default_factory=DeductionsSection, validation_alias=AliasChoices("Deductions", "deductions")
    )
    total_deductions: Decimal = Field(
        default=ZERO, validation_alias=AliasChoices("TotalDeductions", "total_deductions")
    )

    _deductions_section = field_validator("deductions", mode="before")(as_section)


class CapitalGainsSection(AmountSection):
    short_term: Decimal = Field(default=ZERO, validation_alias=AliasChoices("TotalSTCG", "short_term"))
    long_term: Decimal = Field(default=ZERO, validation_alias=AliasChoices("TotalLTCG", "long_term"))


class SalaryTdsEntry(AmountSection):
    amount: Decimal = Field(default=ZERO, validation_alias=AliasChoices("TotalTDSSalary", "amount"))


class OtherTdsEntry(AmountSection):
    amount: Decimal = Field(
        default=ZERO, validation_alias=AliasChoices("TotalTDSonOthThanSals", "amount")
    )


class ChallanEntry(AmountSection):
    amount: Decimal = Field(default=ZERO, validation_alias=AliasChoices("Amt", "amount"))


def total(entries: List[Any]) -> Decimal:
    return sum((entry.amount for entry in entries), ZERO)


class TaxPaidSection(Section):
    tds_on_salaries: List[SalaryTdsEntry] = Field(
        default_factory=list, validation_alias=AliasChoices("TDSonSalaries", "tds_on_salaries")
    )
    tds_on_others: List[OtherTdsEntry] = Field(
        default_factory=list, validation_alias=AliasChoices("TDSonOthThanSals", "tds_on_others")
    )
    advance_tax: List[ChallanEntry] = Field(
        default_factory=list, validation_alias=AliasChoices("AdvanceTax", "advance_tax")
    )
    self_assessment_tax: List[ChallanEntry] = Field(
        default_factory=list,
        validation_alias=AliasChoices("SelfAssessmentTax", "self_assessment_tax"),
    )

    _entry_lists = field_validator(
        "tds_on_salaries", "tds_on_others", "advance_tax", "self_assessment_tax", mode="before"
    )(as_entries)


class ITRDocument(Section):
    general: GeneralInfo = Field(
        default_factory=GeneralInfo, validation_alias=AliasChoices("PartA_Gen1", "general")
    )
    form: FormInfo = Field(default_factory=FormInfo, validation_alias=AliasChoices("ITRForm", "form"))
    filing_status: FilingStatusInfo = Field(
        default_factory=FilingStatusInfo,
        validation_alias=AliasChoices("FilingStatus", "filing_status"),
    )
    regime_choice: RegimeChoice = Field(
        default_factory=RegimeChoice, validation_alias=AliasChoices("PartB_TTI", "regime_choice")
    )
    total_income: TotalIncomeSection = Field(
        default_factory=TotalIncomeSection,
        validation_alias=AliasChoices("PartA_TotalIncome", "total_income"),
    )
    capital_gains: CapitalGainsSection = Field(
        default_factory=CapitalGainsSection,
        validation_alias=AliasChoices("ScheduleCG", "capital_gains"),
    )
    tax_paid: TaxPaidSection = Field(
        default_factory=TaxPaidSection, validation_alias=AliasChoices("TaxPaid", "tax_paid")
    )

    _sections = field_validator(
        "general",
        "form",
        "filing_status",
        "regime_choice",
        "total_income",
        "capital_gains",
        "tax_paid",
        mode="before",
    )(as_section)
