# api/routers/kpis.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.dependencies.db import get_db
from api.models.kpi_models import KpiResponse
from services.errors import AggregationFailure, InvalidRangeError
from services.kpi_service import compute_kpis

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/kpis", response_model=KpiResponse)
def get_kpis(
    startYear: Optional[str] = None,
    endYear: Optional[str] = None,
    db: Session = Depends(get_db),
):
    # Raw strings: unparsable or empty bounds mean "no bound", not a 422
    try:
        report = compute_kpis(db, startYear or None, endYear or None)
    except InvalidRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AggregationFailure:
        raise HTTPException(status_code=500, detail="Failed to fetch KPIs")
    return report.to_dict()
