# api/models/kpi_models.py
from pydantic import BaseModel
from typing import List


class YearlyBreakdownRow(BaseModel):
    year: int
    wos_count: int
    scopus_count: int


class RangeTotalsOut(BaseModel):
    totalPapers: int
    totalImpactFactor: float
    totalCiteScore: float


class KpiResponse(BaseModel):
    yearlyBreakdown: List[YearlyBreakdownRow]
    rangeTotals: RangeTotalsOut
