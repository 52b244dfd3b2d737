# api/routers/journals.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.dependencies.db import get_db
from api.models.catalog_models import JournalPayload, JournalOut, CreatedResponse, SuccessResponse
from services.catalog_service import CatalogService
from services.errors import ValidationError, NotFoundError, ConflictError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/journals", response_model=List[JournalOut])
def list_journals(db: Session = Depends(get_db)):
    try:
        return CatalogService(db).list_journals()
    except SQLAlchemyError:
        logger.error("Failed to fetch journals", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch journals")


@router.post("/journals", response_model=CreatedResponse, status_code=201)
def create_journal(payload: JournalPayload, db: Session = Depends(get_db)):
    try:
        journal_id = CatalogService(db).create_journal(payload.model_dump())
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        logger.error("Failed to save journal", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save journal")
    return CreatedResponse(id=journal_id)


@router.get("/journals/{journal_id}", response_model=JournalOut)
def get_journal(journal_id: int, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).get_journal(journal_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.error("Failed to fetch journal", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch journal")


@router.put("/journals/{journal_id}", response_model=SuccessResponse)
def update_journal(journal_id: int, payload: JournalPayload, db: Session = Depends(get_db)):
    try:
        CatalogService(db).update_journal(journal_id, payload.model_dump())
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.error("Failed to update journal", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update journal")
    return SuccessResponse()


@router.delete("/journals/{journal_id}", status_code=204)
def delete_journal(journal_id: int, db: Session = Depends(get_db)):
    try:
        CatalogService(db).delete_journal(journal_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SQLAlchemyError:
        logger.error("Failed to delete journal", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete journal")
    return Response(status_code=204)
