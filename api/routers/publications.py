# api/routers/publications.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.dependencies.db import get_db
from api.models.catalog_models import (
    PublicationPayload,
    PublicationOut,
    PublicationWithJournal,
    CreatedResponse,
    SuccessResponse,
)
from services.catalog_service import CatalogService
from services.errors import ValidationError, NotFoundError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/publications", response_model=CreatedResponse, status_code=201)
def create_publication(payload: PublicationPayload, db: Session = Depends(get_db)):
    try:
        publication_id = CatalogService(db).create_publication(payload.model_dump())
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        logger.error("Failed to save publication", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save publication")
    return CreatedResponse(id=publication_id)


@router.get("/publications/{publication_id}", response_model=PublicationOut)
def get_publication(publication_id: int, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).get_publication(publication_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.error("Failed to fetch publication", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch publication")


@router.put("/publications/{publication_id}", response_model=SuccessResponse)
def update_publication(publication_id: int, payload: PublicationPayload, db: Session = Depends(get_db)):
    try:
        CatalogService(db).update_publication(publication_id, payload.model_dump())
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.error("Failed to update publication", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update publication")
    return SuccessResponse()


@router.delete("/publications/{publication_id}", status_code=204)
def delete_publication(publication_id: int, db: Session = Depends(get_db)):
    try:
        CatalogService(db).delete_publication(publication_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.error("Failed to delete publication", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete publication")
    return Response(status_code=204)


@router.get("/publications_list", response_model=List[PublicationWithJournal])
def list_publications(db: Session = Depends(get_db)):
    try:
        return CatalogService(db).list_publications_with_journal()
    except SQLAlchemyError:
        logger.error("Failed to fetch publications", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch publications")
