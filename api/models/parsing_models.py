# api/models/parsing_models.py
from pydantic import BaseModel
from typing import Optional


class ParseRequest(BaseModel):
    text: Optional[str] = None


class ParseResponse(BaseModel):
    authors: str
    title: str
    year: Optional[int] = None
    doi: Optional[str] = None
    matched_journal_id: Optional[int] = None
