import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.main import app


FIXED_NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("DB_PROVIDER", "sqlite")
    monkeypatch.setenv("DB_PATH", str(tmp_path / "metrics.db"))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture()
def itr_document():
    return {
        "PartA_Gen1": {"Name": "Asha Rao", "PAN": "ABCDE1234F", "DOB": "1979-04-12"},
        "ITRForm": {"AssessmentYear": "2024-25"},
        "FilingStatus": {"Status": "Revised"},
        "PartB_TTI": {"isOptingForNewTaxRegime": "N"},
        "PartA_TotalIncome": {
            "Salaries": 700000,
            "IncomeFromHP": 0,
            "IncomeFromBP": 0,
            "IncomeFromOS": 50000,
            "GrossTotalIncome": 750000,
            "Deductions": {"Section80C": 150000, "Section80D": 0, "Section80G": 0},
            "TotalDeductions": 150000,
        },
        "ScheduleCG": {"TotalSTCG": 0, "TotalLTCG": 0},
        "TaxPaid": {
            "TDSonSalaries": [{"TotalTDSSalary": 20000}, {"TotalTDSSalary": 5000}],
            "TDSonOthThanSals": [{"TotalTDSonOthThanSals": 2000}],
            "AdvanceTax": [],
            "SelfAssessmentTax": [{"Amt": 1000}],
        },
    }
