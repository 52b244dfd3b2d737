# services/catalog_service.py
import logging
import math
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database.models.journal_model import Journal, JOURNAL_TYPES
from database.models.publication_model import Publication
from services.errors import ValidationError, NotFoundError, ConflictError
from utils.sanitization import is_nonempty_text

logger = logging.getLogger(__name__)

UNKNOWN_JOURNAL = "journal_id does not reference an existing journal"


def _optional(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _whole_number(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


def _positive_int(value: Any) -> Optional[int]:
    number = _whole_number(value)
    if number is None or number <= 0:
        return None
    return number


def _journal_values(fields: Mapping[str, Any]) -> Dict[str, Any]:
    name = fields.get("name")
    journal_type = fields.get("type")

    if not is_nonempty_text(name) or journal_type not in JOURNAL_TYPES:
        raise ValidationError("Invalid journal data")

    impact_factor = _optional(fields.get("impact_factor"))
    if impact_factor is not None:
        try:
            impact_factor = float(impact_factor)
        except (TypeError, ValueError):
            raise ValidationError("impact_factor must be a number")
        if not math.isfinite(impact_factor) or impact_factor < 0:
            raise ValidationError("impact_factor must be a non-negative number")

    return {
        "name": name,
        "issn": _optional(fields.get("issn")),
        "impact_factor": impact_factor,
        "quartile": _optional(fields.get("quartile")),
        "type": journal_type,
        "image_url": _optional(fields.get("image_url")),
    }


def _publication_values(fields: Mapping[str, Any]) -> Dict[str, Any]:
    authors = fields.get("authors")
    title = fields.get("title")
    year = fields.get("year")

    if not is_nonempty_text(authors) or not is_nonempty_text(title) or year in (None, ""):
        raise ValidationError("Missing required publication fields")

    year = _whole_number(year)
    if year is None:
        raise ValidationError("year must be an integer")

    journal_id = _positive_int(fields.get("journal_id"))
    if journal_id is None:
        raise ValidationError("journal_id is required")

    return {
        "authors": authors,
        "title": title,
        "year": year,
        "doi": _optional(fields.get("doi")),
        "journal_id": journal_id,
    }


class CatalogService:
    """
    CRUD over the journal and publication catalogs.
    Every mutating call commits before returning.
    """

    def __init__(self, db: Session):
        self.db = db

    # --- Journals ---

    def create_journal(self, fields: Mapping[str, Any]) -> int:
        journal = Journal(**_journal_values(fields))
        self._commit(journal, "Journal violates a store constraint")
        logger.info(f"Created journal id={journal.id} type={journal.type}")
        return journal.id

    def get_journal(self, journal_id: int) -> Journal:
        journal = self.db.get(Journal, journal_id)
        if journal is None:
            raise NotFoundError("Journal not found")
        return journal

    def update_journal(self, journal_id: int, fields: Mapping[str, Any]) -> bool:
        values = _journal_values(fields)
        journal = self.get_journal(journal_id)
        for key, value in values.items():
            setattr(journal, key, value)
        self._commit(journal, "Journal violates a store constraint")
        return True

    def delete_journal(self, journal_id: int) -> bool:
        journal = self.get_journal(journal_id)

        referencing = self.db.scalar(
            select(func.count(Publication.id)).where(Publication.journal_id == journal_id)
        )
        if referencing:
            raise ConflictError(f"Journal has {referencing} publications and cannot be deleted")

        self.db.delete(journal)
        try:
            self.db.commit()
        except IntegrityError:
            # A publication was added between the check and the delete
            self.db.rollback()
            raise ConflictError("Journal has publications and cannot be deleted")
        logger.info(f"Deleted journal id={journal_id}")
        return True

    def list_journals(self) -> List[Journal]:
        return list(self.db.scalars(select(Journal).order_by(Journal.name.asc())))

    # --- Publications ---

    def create_publication(self, fields: Mapping[str, Any]) -> int:
        publication = Publication(**_publication_values(fields))
        self._commit(publication, UNKNOWN_JOURNAL)
        logger.info(f"Created publication id={publication.id} journal_id={publication.journal_id}")
        return publication.id

    def get_publication(self, publication_id: int) -> Publication:
        publication = self.db.get(Publication, publication_id)
        if publication is None:
            raise NotFoundError("Publication not found")
        return publication

    def update_publication(self, publication_id: int, fields: Mapping[str, Any]) -> bool:
        values = _publication_values(fields)
        publication = self.get_publication(publication_id)
        for key, value in values.items():
            setattr(publication, key, value)
        self._commit(publication, UNKNOWN_JOURNAL)
        return True

    def delete_publication(self, publication_id: int) -> bool:
        publication = self.get_publication(publication_id)
        self.db.delete(publication)
        self.db.commit()
        logger.info(f"Deleted publication id={publication_id}")
        return True

    def list_publications_with_journal(self) -> List[Dict[str, Any]]:
        stmt = (
            select(
                Publication.id,
                Publication.authors,
                Publication.title,
                Publication.year,
                Publication.doi,
                Journal.id.label("journal_id"),
                Journal.name.label("journal_name"),
                Journal.type.label("journal_type"),
                Journal.image_url.label("journal_image_url"),
                Journal.quartile.label("journal_quartile"),
                Journal.impact_factor.label("journal_impact_factor"),
            )
            .select_from(Publication)
            .outerjoin(Journal, Publication.journal_id == Journal.id)
            .order_by(Publication.year.desc(), Publication.title.asc())
        )
        return [dict(row) for row in self.db.execute(stmt).mappings()]

    def _commit(self, instance, message: str) -> None:
        self.db.add(instance)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Integrity error on {type(instance).__name__}: {e.orig}")
            raise ValidationError(message) from e
        self.db.refresh(instance)
