# database/models/publication_model.py
from sqlalchemy import Column, Integer, String, Text, ForeignKey
from database.db import Base


class Publication(Base):
    __tablename__ = "publications"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    authors = Column(Text, nullable=False)
    title = Column(String(1024), nullable=False)
    year = Column(Integer, nullable=False, index=True)
    doi = Column(String(255), nullable=True)

    # Journals with publications cannot be deleted
    journal_id = Column(
        Integer,
        ForeignKey("journals.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
