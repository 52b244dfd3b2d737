# services/kpi_service.py
import logging
import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.models.journal_model import Journal, JournalType
from database.models.publication_model import Publication
from services.errors import AggregationFailure, InvalidRangeError

logger = logging.getLogger(__name__)


@dataclass
class YearlyCount:
    year: int
    wos_count: int = 0
    scopus_count: int = 0


@dataclass
class RangeTotals:
    totalPapers: int = 0
    totalImpactFactor: float = 0.0
    totalCiteScore: float = 0.0


@dataclass
class KpiReport:
    yearlyBreakdown: List[YearlyCount]
    rangeTotals: RangeTotals

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _bound(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def resolve_year_range(start_year: Any = None, end_year: Any = None) -> Tuple[Optional[float], Optional[float]]:
    """
    Returns the inclusive range to filter on. A missing or non-finite bound is None,
    meaning that side of the range is open.
    Raises:
        InvalidRangeError: If both bounds are given and start is after end.
    """
    start, end = _bound(start_year), _bound(end_year)
    if start is not None and end is not None and start > end:
        raise InvalidRangeError("startYear must be less than or equal to endYear")
    return start, end


def _year_filter(stmt, start: Optional[float], end: Optional[float]):
    if start is not None:
        stmt = stmt.where(Publication.year >= start)
    if end is not None:
        stmt = stmt.where(Publication.year <= end)
    return stmt


def _joined(stmt):
    return stmt.select_from(Publication).outerjoin(Journal, Publication.journal_id == Journal.id)


def query_yearly_type_counts(db: Session, start: Optional[float], end: Optional[float]) -> List[Tuple[int, Optional[str], int]]:
    stmt = _joined(
        select(
            Publication.year.label("year"),
            Journal.type.label("type"),
            func.count(Publication.id).label("count"),
        )
    )
    stmt = _year_filter(stmt, start, end)
    stmt = stmt.group_by(Publication.year, Journal.type).order_by(Publication.year.desc())
    return [(year, journal_type, count) for year, journal_type, count in db.execute(stmt)]


def query_range_totals(db: Session, start: Optional[float], end: Optional[float]) -> Dict[str, Any]:
    is_wos = Journal.type == JournalType.WOS.value
    is_scopus = Journal.type == JournalType.SCOPUS.value
    impact = func.coalesce(Journal.impact_factor, 0)

    stmt = _joined(
        select(
            func.sum(case((is_wos, 1), else_=0)).label("wos_count"),
            func.sum(case((is_scopus, 1), else_=0)).label("scopus_count"),
            func.sum(case((is_wos, impact), else_=0)).label("total_impact_factor"),
            func.sum(case((is_scopus, impact), else_=0)).label("total_cite_score"),
        )
    )
    stmt = _year_filter(stmt, start, end)
    return dict(db.execute(stmt).mappings().one())


def pivot_yearly_counts(rows: List[Tuple[int, Optional[str], int]]) -> List[YearlyCount]:
    """
    Turns (year, type, count) rows into one entry per observed year, newest first.
    A year only appears if at least one row mentions it; rows without a journal
    type create the entry but add no count.
    """
    by_year: Dict[int, YearlyCount] = {}
    for year, journal_type, count in rows:
        entry = by_year.setdefault(year, YearlyCount(year=year))
        if journal_type == JournalType.WOS.value:
            entry.wos_count = count
        elif journal_type == JournalType.SCOPUS.value:
            entry.scopus_count = count

    return sorted(by_year.values(), key=lambda e: e.year, reverse=True)


def compute_kpis(db: Session, start_year: Any = None, end_year: Any = None) -> KpiReport:
    """
    Builds the KPI report for the inclusive range [start_year, end_year].
    The breakdown and the totals are two separate reads; they are not
    wrapped in a shared transaction.
    Raises:
        InvalidRangeError: start_year > end_year.
        AggregationFailure: The store failed while running either query.
    """
    start, end = resolve_year_range(start_year, end_year)

    try:
        yearly_rows = query_yearly_type_counts(db, start, end)
        totals_row = query_range_totals(db, start, end)
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch KPIs: {e}", exc_info=True)
        raise AggregationFailure("Failed to fetch KPIs") from e

    wos_count = totals_row.get("wos_count") or 0
    scopus_count = totals_row.get("scopus_count") or 0

    return KpiReport(
        yearlyBreakdown=pivot_yearly_counts(yearly_rows),
        rangeTotals=RangeTotals(
            totalPapers=int(wos_count) + int(scopus_count),
            totalImpactFactor=float(totals_row.get("total_impact_factor") or 0),
            totalCiteScore=float(totals_row.get("total_cite_score") or 0),
        ),
    )
