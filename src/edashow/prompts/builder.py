"""Jinja2-based prompt assembly."""

from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateSyntaxError

from edashow.models import KnowledgeBlock, Persona

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

# Operator overrides live in the store under this category, keyed by template stem.
TEMPLATE_CATEGORY = "prompt"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    trim_blocks=True,
    lstrip_blocks=True,
)


def build_system_prompt(
    persona: Persona,
    brand_voice: KnowledgeBlock | None = None,
    seo_rules: KnowledgeBlock | None = None,
    custom_instructions: str = "",
) -> str:
    """Render the system prompt from already-resolved parts."""
    template = _env.get_template("system.j2")
    return template.render(
        persona=persona,
        brand_voice=brand_voice,
        seo_rules=seo_rules,
        custom_instructions=custom_instructions,
    )


def build_user_prompt(name: str, db=None, **variables) -> str:
    """Render a task prompt. An active override stored in `db` wins over the packaged template
    unless it fails to load or parse.

    Placeholders without a value render as an empty string.
    """
    source = None
    if db is not None:
        try:
            source = db.get_prompt_template(TEMPLATE_CATEGORY, name)
        except Exception as e:
            logger.warning(f"Failed to load prompt template '{name}' from DB, using packaged: {e}")
    template = None
    if source:
        try:
            template = _env.from_string(source)
        except TemplateSyntaxError as e:
            logger.warning(f"Stored prompt template '{name}' is invalid, using packaged: {e}")
    if template is None:
        template = _env.get_template(f"{name}.j2")
    return template.render(**variables)
