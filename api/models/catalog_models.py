# File: api/models/catalog_models.py
from pydantic import BaseModel, ConfigDict
from typing import Literal, Optional


class JournalPayload(BaseModel):
    # Required fields are checked by the catalog service so the error is a 400
    name: Optional[str] = None
    issn: Optional[str] = None
    impact_factor: Optional[float] = None
    quartile: Optional[str] = None
    type: Optional[str] = None
    image_url: Optional[str] = None


class JournalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    issn: Optional[str] = None
    impact_factor: Optional[float] = None
    quartile: Optional[str] = None
    type: Literal["WOS", "SCOPUS"]
    image_url: Optional[str] = None


class PublicationPayload(BaseModel):
    authors: Optional[str] = None
    title: Optional[str] = None
    year: Optional[int] = None
    doi: Optional[str] = None
    journal_id: Optional[float] = None


class PublicationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    authors: str
    title: str
    year: int
    doi: Optional[str] = None
    journal_id: Optional[int] = None


class PublicationWithJournal(BaseModel):
    id: int
    authors: str
    title: str
    year: int
    doi: Optional[str] = None
    journal_id: Optional[int] = None
    journal_name: Optional[str] = None
    journal_type: Optional[str] = None
    journal_image_url: Optional[str] = None
    journal_quartile: Optional[str] = None
    journal_impact_factor: Optional[float] = None


class CreatedResponse(BaseModel):
    id: int


class SuccessResponse(BaseModel):
    success: bool = True
