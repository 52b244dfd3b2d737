# database/models/journal_model.py
import enum

from sqlalchemy import Column, Integer, String, Float, Text, CheckConstraint
from database.db import Base


class JournalType(str, enum.Enum):
    WOS = "WOS"
    SCOPUS = "SCOPUS"


JOURNAL_TYPES = tuple(t.value for t in JournalType)


class Journal(Base):
    __tablename__ = "journals"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    name = Column(String(512), nullable=False, index=True)
    issn = Column(String(64), nullable=True)

    # Impact factor for WOS journals, CiteScore for SCOPUS journals
    impact_factor = Column(Float, nullable=True)
    quartile = Column(String(16), nullable=True)

    # Stored as plain text so the CHECK constraint is the single source of truth
    type = Column(String(16), nullable=False)
    image_url = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("type IN ('WOS', 'SCOPUS')", name="ck_journal_type"),
    )

