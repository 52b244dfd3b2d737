# api/routers/parsing.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.dependencies.db import get_db
from api.models.parsing_models import ParseRequest, ParseResponse
from services.errors import ExtractionFailure, ValidationError
from services.extraction_service import parse_publication_text, EXTRACTION_FAILED_MESSAGE

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/parse_publication", response_model=ParseResponse)
def parse_publication(payload: ParseRequest, db: Session = Depends(get_db)):
    try:
        parsed = parse_publication_text(db, payload.text)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ExtractionFailure as e:
        raise HTTPException(status_code=500, detail=str(e))
    except SQLAlchemyError:
        logger.error("Failed to load journals for parsing", exc_info=True)
        raise HTTPException(status_code=500, detail=EXTRACTION_FAILED_MESSAGE)
    return parsed.to_dict()
