"""Structured generation with a free-text fallback.

Some models ignore the response schema or wrap the JSON in markdown. When the
structured call fails with a StructuredOutputError, the prompt is retried as
plain text with a JSON-only instruction, the answer is parsed by hand and
known field-name variants are mapped onto the schema names. Fields present
with the wrong type fail the fallback with the original error. Any other
error propagates without a retry.
"""

from __future__ import annotations

import json
import logging
import re

from pydantic import BaseModel, ValidationError

from edashow import llm
from edashow.llm import ObjectResult, StructuredOutputError

logger = logging.getLogger(__name__)

JSON_ONLY_INSTRUCTION = (
    "\n\nIMPORTANTE: Retorne APENAS o JSON puro, sem blocos de markdown (```json) "
    "e sem nenhum texto antes ou depois."
)

# (variant, canonical) pairs; applied in order, only when canonical is absent.
FIELD_VARIANTS: tuple[tuple[str, str], ...] = (
    ("body", "content"),
    ("text", "content"),
    ("tags", "suggestedTags"),
    ("category", "suggestedCategory"),
)

_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*|\s*```\s*$", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` fence and a trailing ``` fence."""
    return _FENCE_RE.sub("", text).strip()


def normalize_fields(data: dict) -> dict:
    for variant, canonical in FIELD_VARIANTS:
        if canonical not in data and variant in data:
            data[canonical] = data.pop(variant)
    return data


def type_errors(schema: type[BaseModel], data: dict) -> list[dict]:
    """Validation errors of `data` against `schema`, ignoring missing fields.

    Missing fields are filled in by the caller; a present field of the wrong
    type makes the object unusable.
    """
    try:
        schema.model_validate(data)
    except ValidationError as e:
        return [err for err in e.errors() if err["type"] != "missing"]
    return []


class ResilientGenerator:
    """Two-step strategy: schema-bound call, then text call plus manual parsing.

    `structured` and `text` default to the LiteLLM adapters in `edashow.llm`.
    """

    def __init__(self, structured=None, text=None):
        self._structured = structured or llm.generate_structured
        self._text = text or llm.generate_text

    def generate(
        self,
        model: str,
        schema: type[BaseModel],
        prompt: str,
        system: str,
        temperature: float = 0.7,
    ) -> ObjectResult:
        try:
            return self._structured(model, schema, system, prompt, temperature=temperature)
        except StructuredOutputError as error:
            logger.warning(f"Structured generation failed for {schema.__name__}, retrying as text: {error}")
            return self._fallback(model, schema, prompt, system, temperature, error)

    def _fallback(
        self,
        model: str,
        schema: type[BaseModel],
        prompt: str,
        system: str,
        temperature: float,
        error: StructuredOutputError,
    ) -> ObjectResult:
        result = self._text(model, system, prompt + JSON_ONLY_INSTRUCTION, temperature=temperature)
        cleaned = strip_code_fences(result.text)
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError:
            logger.error(f"Text fallback did not return JSON: {cleaned[:200]!r}")
            raise error
        if not isinstance(data, dict):
            logger.error(f"Text fallback returned {type(data).__name__}, expected an object")
            raise error
        data = normalize_fields(data)
        errors = type_errors(schema, data)
        if errors:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in errors)
            logger.error(f"Text fallback does not match {schema.__name__} ({fields})")
            raise error
        return ObjectResult(object=data, model=result.model, usage=result.usage)


def generate_resilient_object(
    model: str,
    schema: type[BaseModel],
    prompt: str,
    system: str,
    temperature: float = 0.7,
) -> ObjectResult:
    return ResilientGenerator().generate(model, schema, prompt, system, temperature=temperature)
