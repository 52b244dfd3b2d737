# services/llm_service.py
import os
import json
import logging
from typing import Optional, Dict, Any
from openai import OpenAI

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

_client: Optional[OpenAI] = None

DEFAULT_MODEL = "gpt-4o-mini"
REQUEST_TIMEOUT_SECONDS = 30.0


class LLMGenerationError(Exception):
    """Raised when the LLM call fails or comes back empty."""
    pass


class LLMJSONParseError(Exception):
    """Raised when the LLM answer is not a JSON object."""
    pass


def get_client() -> OpenAI:
    global _client
    if _client is None:
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY environment variable is not set")
        _client = OpenAI(api_key=api_key)
    return _client


def get_model() -> str:
    return os.getenv("OPENAI_MODEL", DEFAULT_MODEL)


def generate_json_response(text: str, system_prompt: str = "") -> Dict[str, Any]:
    """
    Single deterministic chat completion in JSON mode; returns the decoded object.
    Raises:
        LLMGenerationError: If the API call fails or returns no content.
        LLMJSONParseError: If the answer does not decode to a JSON object.
    """
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": text})

    try:
        response = get_client().chat.completions.create(
            model=get_model(),
            messages=messages,
            temperature=0,
            response_format={"type": "json_object"},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
    except ValueError:
        raise
    except Exception as e:
        logger.error(f"Publication extraction call failed: {e}", exc_info=True)
        raise LLMGenerationError(f"LLM request failed: {e}") from e

    content = response.choices[0].message.content if response.choices else None
    if not content:
        logger.error("LLM returned no content")
        raise LLMGenerationError("LLM returned empty response")

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(f"LLM answer is not JSON: {e}. Content: {content}")
        raise LLMJSONParseError(f"Failed to parse JSON from LLM response: {e}") from e

    if not isinstance(parsed, dict):
        raise LLMJSONParseError("LLM response is not a JSON object")
    return parsed
