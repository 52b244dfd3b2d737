# services/extraction_service.py
import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError as SchemaError
from sqlalchemy.orm import Session

from database.models.journal_model import Journal
from services.catalog_service import CatalogService
from services.errors import ExtractionFailure, ValidationError
from services.llm_service import generate_json_response, LLMGenerationError, LLMJSONParseError
from utils.sanitization import is_nonempty_text, normalize_name

logger = logging.getLogger(__name__)

EXTRACTION_FAILED_MESSAGE = "Não foi possível processar o texto com a IA."

SYSTEM_PROMPT_TEMPLATE = """
Você é um assistente que extrai metadados de publicações científicas.
Utilize somente os seguintes nomes de revistas ao definir "journal_name": {journal_names}.
Responda APENAS com um JSON minificado no formato:
{{"authors": "...", "title": "...", "year": 2024, "doi": "...", "journal_name": "..."}}
- Use null para qualquer campo desconhecido.
- Se a revista não estiver na lista fornecida, defina "journal_name": null.
"""


class ExtractedFields(BaseModel):
    """Shape the LLM is asked to answer with. Unknown keys are ignored."""
    authors: Optional[str] = None
    title: Optional[str] = None
    year: Optional[int] = None
    doi: Optional[str] = None
    journal_name: Optional[str] = None


@dataclass
class ParsedPublication:
    authors: str
    title: str
    year: Optional[int]
    doi: Optional[str]
    matched_journal_id: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_system_prompt(journals: List[Journal]) -> str:
    names = ", ".join(j.name for j in journals)
    return SYSTEM_PROMPT_TEMPLATE.format(journal_names=names or "nenhuma revista cadastrada").strip()


def match_journal(journal_name: Any, journals: List[Journal]) -> Optional[int]:
    """Case-insensitive exact match; anything else resolves to None."""
    wanted = normalize_name(journal_name)
    if not wanted:
        return None
    for journal in journals:
        if normalize_name(journal.name) == wanted:
            return journal.id
    return None


def parse_publication_text(db: Session, text: Optional[str]) -> ParsedPublication:
    """
    Sends pasted citation text to the LLM, restricted to the journals in the catalog.
    Raises:
        ValidationError: If the text is empty.
        ExtractionFailure: If the LLM call fails or its output is not valid JSON
            of the expected shape.
    """
    if not is_nonempty_text(text):
        raise ValidationError("Text is required")

    journals = CatalogService(db).list_journals()

    try:
        parsed = generate_json_response(text, system_prompt=build_system_prompt(journals))
    except (LLMGenerationError, LLMJSONParseError, ValueError) as e:
        logger.error(f"Failed to parse publication text: {e}", exc_info=True)
        raise ExtractionFailure(EXTRACTION_FAILED_MESSAGE) from e

    try:
        fields = ExtractedFields.model_validate(parsed)
    except SchemaError as e:
        logger.error(f"LLM returned publication fields of the wrong type: {e}")
        raise ExtractionFailure(EXTRACTION_FAILED_MESSAGE) from e

    return ParsedPublication(
        authors=fields.authors or "",
        title=fields.title or "",
        year=fields.year,
        doi=fields.doi or None,
        matched_journal_id=match_journal(fields.journal_name, journals),
    )
