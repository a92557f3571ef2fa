from typing import List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class TaxComputeRequest(BaseModel):
    netIncome: float = Field(allow_inf_nan=False, ge=-1e15, le=1e15)
    age: int = Field(default=30, ge=0, le=150)
    assessmentYear: str = "2024-25"
    regime: Literal["Old", "New"] = "Old"

    @field_validator("assessmentYear")
    @classmethod
    def validate_assessment_year(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("assessmentYear must not be blank")
        return value


class TaxComputationResponse(BaseModel):
    assessmentYear: str
    regime: Literal["Old", "New"]
    appliedRule: str
    ageBand: Literal["general", "senior", "superSenior"]
    fallbackApplied: bool
    taxAfterRebate: float
    rebate: float
    cess: float
    totalTax: float


class CapitalGains(FrozenModel):
    shortTerm: float = 0.0
    longTerm: float = 0.0


class IncomeDetails(FrozenModel):
    salary: float = 0.0
    houseProperty: float = 0.0
    businessIncome: float = 0.0
    capitalGains: CapitalGains = Field(default_factory=CapitalGains)
    otherSources: float = 0.0
    grossTotalIncome: float = 0.0


class Deductions(FrozenModel):
    section80C: float = 0.0
    section80D: float = 0.0
    section80G: float = 0.0
    totalDeductions: float = 0.0


class TaxComputationSummary(FrozenModel):
    taxOnIncome: float
    rebate87A: float
    cess: float
    totalTaxLiability: float


class TaxPaid(FrozenModel):
    tdsSalary: float = 0.0
    tdsOthers: float = 0.0
    advanceTax: float = 0.0
    selfAssessmentTax: float = 0.0
    totalTaxPaid: float = 0.0


class FinalSettlement(FrozenModel):
    taxLiability: float
    taxPaid: float
    refundDue: float = Field(ge=0)
    taxPayable: float = Field(ge=0)


class ClientSummary(FrozenModel):
    name: str
    pan: str
    assessmentYear: str
    filingStatus: str
    age: int = Field(ge=0)
    taxRegime: Literal["Old", "New"]
    incomeDetails: IncomeDetails
    deductions: Deductions
    netTaxableIncome: float
    taxComputation: TaxComputationSummary
    taxPaid: TaxPaid
    finalSettlement: FinalSettlement
    notes: str = ""
    uploadedAt: str


class ExportRequest(BaseModel):
    summaries: List[ClientSummary] = Field(default_factory=list)

    @field_validator("summaries")
    @classmethod
    def validate_summaries_size(cls, value: List[ClientSummary]) -> List[ClientSummary]:
        if len(value) >= 100_000:
            raise ValueError("summaries size must be less than 100,000")
        return value


class ExportResponse(BaseModel):
    columns: List[str]
    rows: List[List[Union[int, float, str]]]


class RulesResponse(BaseModel):
    rules: List[str]
    fallback: str


class PerformanceResponse(BaseModel):
    time: str
    memory: str
    threads: int
    requestsServed: int
    endpointStats: List[dict] = Field(default_factory=list)
