import logging
from typing import Iterable

from app.schemas.common import ClientSummary


logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "Name",
    "PAN",
    "Assessment Year",
    "Filing Status",
    "Tax Regime",
    "Age",
    "Gross Total Income",
    "Total Deductions",
    "Net Taxable Income",
    "Tax on Income",
    "87A Rebate",
    "Cess",
    "Total Tax Liability",
    "Total Tax Paid",
    "Refund Due",
    "Tax Payable",
]


def export_row(summary: ClientSummary) -> list:
    """Flatten a summary into ``EXPORT_COLUMNS`` order for CSV/PDF renderers."""
    return [
        summary.name,
        summary.pan,
        summary.assessmentYear,
        summary.filingStatus,
        summary.taxRegime,
        summary.age,
        summary.incomeDetails.grossTotalIncome,
        summary.deductions.totalDeductions,
        summary.netTaxableIncome,
        summary.taxComputation.taxOnIncome,
        summary.taxComputation.rebate87A,
        summary.taxComputation.cess,
        summary.taxComputation.totalTaxLiability,
        summary.taxPaid.totalTaxPaid,
        summary.finalSettlement.refundDue,
        summary.finalSettlement.taxPayable,
    ]


def export_table(summaries: Iterable[ClientSummary]) -> dict:
    rows = [export_row(summary) for summary in summaries]
    if not rows:
        logger.warning("No client summaries to export")
    return {"columns": list(EXPORT_COLUMNS), "rows": rows}
