"""System prompt assembly: persona + knowledge blocks + task instructions.

Personas and knowledge blocks are read from the knowledge store first and
fall back to the built-in catalog when the store fails or has no active
record. Resolution never raises.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from edashow.context.catalog import (
    BRAND_VOICE_SLUG,
    DEFAULT_PERSONA,
    KNOWLEDGE_BLOCKS,
    PERSONAS,
    SEO_RULES_SLUG,
)
from edashow.models import ContextConfig, KnowledgeBlock, Persona
from edashow.prompts import builder

logger = logging.getLogger(__name__)

T = TypeVar("T")


def first_match(*resolvers: Callable[[], T | None]) -> T | None:
    """Return the first non-None result, calling resolvers in order."""
    for resolve in resolvers:
        value = resolve()
        if value is not None:
            return value
    return None


def _persona_from_row(row: dict) -> Persona:
    return Persona(
        id=row["slug"],
        name=row["name"],
        role=row["role"],
        description=row["description"],
        base_prompt=row["base_prompt"],
        preferred_tone=row["preferred_tone"],
    )


def _knowledge_from_row(row: dict) -> KnowledgeBlock:
    return KnowledgeBlock(
        id=row["slug"],
        name=row.get("name") or "",
        content=row["content"],
        tags=row.get("tags") or [],
    )


class ContextAssembler:
    """Builds system prompts from a `ContextConfig`.

    `db` is anything with `get_active_record(table, slug)`; None means
    catalog-only resolution.
    """

    def __init__(self, db=None):
        self._db = db

    def _from_store(self, table: str, slug: str, mapper: Callable[[dict], T]) -> T | None:
        if self._db is None:
            return None
        try:
            row = self._db.get_active_record(table, slug)
            return mapper(row) if row else None
        except Exception as e:
            logger.warning(f"Failed to fetch {table} '{slug}' from DB, using fallback: {e}")
            return None

    def resolve_persona(self, slug: str) -> Persona:
        return first_match(
            lambda: self._from_store("personas", slug, _persona_from_row),
            lambda: PERSONAS.get(slug),
            lambda: DEFAULT_PERSONA,
        )

    def resolve_knowledge(self, slug: str) -> KnowledgeBlock | None:
        return first_match(
            lambda: self._from_store("knowledge_blocks", slug, _knowledge_from_row),
            lambda: KNOWLEDGE_BLOCKS.get(slug),
        )

    def build_system_prompt(self, config: ContextConfig) -> str:
        """Persona prompt, then brand voice, SEO rules, custom instructions and the output format directive."""
        persona = self.resolve_persona(config.persona_id)
        brand_voice = self.resolve_knowledge(BRAND_VOICE_SLUG) if config.include_brand_voice else None
        seo_rules = self.resolve_knowledge(SEO_RULES_SLUG) if config.include_seo_rules else None
        return builder.build_system_prompt(
            persona,
            brand_voice=brand_voice,
            seo_rules=seo_rules,
            custom_instructions=config.custom_instructions,
        )


def build_system_prompt(config: ContextConfig, db=None) -> str:
    return ContextAssembler(db).build_system_prompt(config)
