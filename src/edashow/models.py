"""Data model definitions."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PERSONA_ID = "eda-pro"


class ToneOfVoice(str, Enum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    DIDACTIC = "didactic"
    PROVOCATIVE = "provocative"


class ImprovementType(str, Enum):
    CLARITY = "clarity"
    SEO = "seo"
    ENGAGEMENT = "engagement"
    GRAMMAR = "grammar"


class Persona(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    role: str = ""
    description: str = ""
    base_prompt: str
    preferred_tone: ToneOfVoice = ToneOfVoice.PROFESSIONAL


class KnowledgeBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    content: str
    tags: list[str] = Field(default_factory=list)


class ContextConfig(BaseModel):
    """Request-scoped input to the system prompt assembly."""

    persona_id: str = DEFAULT_PERSONA_ID
    include_brand_voice: bool = False
    include_seo_rules: bool = False
    custom_instructions: str = ""


class PostGenerationConfig(BaseModel):
    topic: str
    keywords: list[str] = Field(default_factory=list)
    tone: ToneOfVoice | None = None
    persona_id: str | None = None
    word_count: int = 800
    additional_instructions: str = ""
    model: str | None = None
    include_brand_voice: bool = True
    include_seo_rules: bool = True


class RewriteConfig(BaseModel):
    source_content: str
    tone: ToneOfVoice = ToneOfVoice.PROFESSIONAL
    instructions: str = ""
    source_url: str = ""
    keywords: list[str] = Field(default_factory=list)
    persona_id: str | None = None
    model: str | None = None
    include_brand_voice: bool = True
    include_seo_rules: bool = True


# --- Structured output schemas (wire names are camelCase) ---


class PostDraft(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    excerpt: str
    content: str = Field(description="Full article body in Markdown")
    meta_description: str = Field(alias="metaDescription")
    suggested_tags: list[str] = Field(alias="suggestedTags")
    suggested_category: str | None = Field(default=None, alias="suggestedCategory")


class TitleOptions(BaseModel):
    titles: list[str]


class KeywordSuggestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    primary: list[str] = Field(default_factory=list)
    secondary: list[str] = Field(default_factory=list)
    long_tail: list[str] = Field(default_factory=list, alias="longTail")


# --- Results ---


class GeneratedPost(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    slug: str
    excerpt: str = ""
    content: str = ""
    meta_description: str = Field(default="", alias="metaDescription")
    suggested_tags: list[str] = Field(default_factory=list, alias="suggestedTags")
    suggested_category: str | None = Field(default=None, alias="suggestedCategory")


class GenerationResult(BaseModel):
    data: GeneratedPost
    tokens_used: int = 0
    model: str
    # Placeholder: no pricing table is applied.
    cost: float = 0.0


class GenerationLog(BaseModel):
    id: int | None = None
    type: str
    input_data: dict = Field(default_factory=dict)
    output_data: dict = Field(default_factory=dict)
    model: str
    tokens_used: int = 0
    cost_usd: float = 0.0
    status: str = "completed"
    created_at: datetime = Field(default_factory=datetime.now)
