"""Post generation service: prompt template -> system prompt -> model -> post."""

from __future__ import annotations

import logging

from edashow import llm
from edashow.config import DEFAULT_MODEL
from edashow.context.assembler import ContextAssembler
from edashow.formatter import derive_slug, extract_excerpt
from edashow.generation import ResilientGenerator
from edashow.models import (
    DEFAULT_PERSONA_ID,
    ContextConfig,
    GeneratedPost,
    GenerationLog,
    GenerationResult,
    ImprovementType,
    KeywordSuggestion,
    PostDraft,
    PostGenerationConfig,
    RewriteConfig,
    TitleOptions,
    ToneOfVoice,
)
from edashow.prompts.builder import build_user_prompt

logger = logging.getLogger(__name__)

AUXILIARY_SYSTEM_PROMPT = (
    "Você é um especialista em SEO e redação do portal EDA Show. "
    "Responda estritamente com o que foi solicitado, em português brasileiro."
)

DEFAULT_REWRITE_GUIDELINES = """Ao reescrever conteúdo:
- Manter todas as informações factuais corretas
- Usar linguagem própria e original
- Adaptar o tom para o portal EDA Show
- Manter a estrutura lógica do conteúdo
- Otimizar para SEO quando possível"""

TONE_DESCRIPTIONS: dict[ToneOfVoice, str] = {
    ToneOfVoice.PROFESSIONAL: "profissional e informativo",
    ToneOfVoice.CASUAL: "casual e acessível",
    ToneOfVoice.DIDACTIC: "didático e explicativo",
    ToneOfVoice.PROVOCATIVE: "provocativo e opinativo",
}

IMPROVEMENT_INSTRUCTIONS: dict[ImprovementType, str] = {
    ImprovementType.CLARITY: "Melhore a clareza e fluidez do texto, tornando-o mais fácil de ler.",
    ImprovementType.SEO: "Otimize o texto para SEO, adicionando subtítulos, listas e melhor estrutura.",
    ImprovementType.ENGAGEMENT: "Torne o texto mais envolvente e interessante para o leitor.",
    ImprovementType.GRAMMAR: "Corrija erros gramaticais e melhore a escrita mantendo o significado.",
}


def _post_from_draft(draft: dict, fallback_title: str) -> GeneratedPost:
    title = draft.get("title") or fallback_title
    content = draft.get("content") or ""
    return GeneratedPost(
        title=title,
        slug=derive_slug(title) or derive_slug(fallback_title),
        excerpt=draft.get("excerpt") or extract_excerpt(content),
        content=content,
        meta_description=draft.get("metaDescription") or "",
        suggested_tags=list(draft.get("suggestedTags") or []),
        suggested_category=draft.get("suggestedCategory") or None,
    )


def _get_setting(db, key: str, default: str) -> str:
    if db is None:
        return default
    try:
        return db.get_config(key, default) or default
    except Exception as e:
        logger.warning(f"Failed to read setting '{key}', using default: {e}")
        return default


def _log_generation(db, kind: str, input_data: dict, result: GenerationResult) -> None:
    """Append to the generation history. Failures are logged, never raised."""
    if db is None:
        return
    try:
        db.save_generation(
            GenerationLog(
                type=kind,
                input_data=input_data,
                output_data={
                    "title": result.data.title,
                    "word_count": len(result.data.content.split()),
                },
                model=result.model,
                tokens_used=result.tokens_used,
                cost_usd=result.cost,
            )
        )
    except Exception as e:
        logger.error(f"Failed to log AI generation: {e}")


def generate_post(
    config: PostGenerationConfig,
    db=None,
    generator: ResilientGenerator | None = None,
) -> GenerationResult:
    """Generate a complete post for a topic.

    1. Render the post prompt template (topic, keywords, instructions)
    2. Assemble the system prompt (persona + brand voice + SEO rules + instructions)
    3. Resilient structured generation against PostDraft
    4. Derive the slug from the returned title
    5. Record the generation in the history
    """
    model = config.model or DEFAULT_MODEL

    # 1. User prompt
    prompt = build_user_prompt(
        "post",
        db,
        topic=config.topic,
        keywords=", ".join(config.keywords),
        tone=TONE_DESCRIPTIONS[config.tone] if config.tone else "",
        word_count=config.word_count,
        additional_instructions=config.additional_instructions,
    )

    # 2. System prompt
    system_prompt = ContextAssembler(db).build_system_prompt(
        ContextConfig(
            persona_id=config.persona_id or DEFAULT_PERSONA_ID,
            include_brand_voice=config.include_brand_voice,
            include_seo_rules=config.include_seo_rules,
            custom_instructions=config.additional_instructions,
        )
    )

    # 3. Model call
    result = (generator or ResilientGenerator()).generate(model, PostDraft, prompt, system_prompt)

    # 4. Slug
    generation = GenerationResult(
        data=_post_from_draft(result.object, config.topic),
        tokens_used=result.usage.total_tokens,
        model=result.model,
    )
    logger.info(f"Generated post '{generation.data.slug}' with {generation.model} ({generation.tokens_used} tokens)")

    # 5. History
    _log_generation(
        db,
        "post",
        {"topic": config.topic, "keywords": config.keywords, "persona_id": config.persona_id},
        generation,
    )
    return generation


def rewrite_content(
    config: RewriteConfig,
    db=None,
    generator: ResilientGenerator | None = None,
) -> GenerationResult:
    """Rewrite source material into an original post in the requested tone.

    Facts are kept; wording and structure are replaced.
    """
    model = config.model or DEFAULT_MODEL
    prompt = build_user_prompt(
        "rewrite",
        db,
        source_content=config.source_content,
        source_url=config.source_url,
        guidelines=_get_setting(db, "rewrite_guidelines", DEFAULT_REWRITE_GUIDELINES),
        tone=TONE_DESCRIPTIONS[config.tone],
        keywords=", ".join(config.keywords),
        instructions=config.instructions,
    )
    system_prompt = ContextAssembler(db).build_system_prompt(
        ContextConfig(
            persona_id=config.persona_id or DEFAULT_PERSONA_ID,
            include_brand_voice=config.include_brand_voice,
            include_seo_rules=config.include_seo_rules,
            custom_instructions=config.instructions,
        )
    )
    result = (generator or ResilientGenerator()).generate(model, PostDraft, prompt, system_prompt)

    generation = GenerationResult(
        data=_post_from_draft(result.object, "Conteúdo reescrito"),
        tokens_used=result.usage.total_tokens,
        model=result.model,
    )
    logger.info(f"Rewrote content into '{generation.data.slug}' with {generation.model}")
    _log_generation(
        db,
        "rewrite",
        {"source_url": config.source_url, "length": len(config.source_content), "tone": config.tone.value},
        generation,
    )
    return generation


def generate_titles(
    topic: str,
    keywords: list[str],
    count: int = 5,
    model: str | None = None,
    generator: ResilientGenerator | None = None,
) -> list[str]:
    """Up to `count` SEO title candidates.

    Extra candidates are dropped; a short list is returned as is and logged.
    """
    prompt = build_user_prompt("titles", topic=topic, keywords=", ".join(keywords), count=count)
    result = (generator or ResilientGenerator()).generate(
        model or DEFAULT_MODEL, TitleOptions, prompt, AUXILIARY_SYSTEM_PROMPT,
    )
    titles = list(result.object.get("titles") or [])[:count]
    if len(titles) < count:
        logger.warning(f"Model returned {len(titles)} of {count} requested titles for '{topic}'")
    return titles


def suggest_keywords(
    topic: str,
    context: str = "",
    model: str | None = None,
    generator: ResilientGenerator | None = None,
) -> KeywordSuggestion:
    prompt = build_user_prompt("keywords", topic=topic, context=context)
    result = (generator or ResilientGenerator()).generate(
        model or DEFAULT_MODEL, KeywordSuggestion, prompt, AUXILIARY_SYSTEM_PROMPT,
    )
    return KeywordSuggestion.model_validate(result.object)


def _generate_line(prompt: str, model: str | None, max_tokens: int, temperature: float = 0.5) -> str:
    result = llm.generate_text(
        model or DEFAULT_MODEL,
        AUXILIARY_SYSTEM_PROMPT,
        prompt,
        temperature=temperature,
        max_tokens=max_tokens,
    )
    return result.text.strip().strip('"').strip()


def generate_excerpt(content: str, max_length: int = 160, model: str | None = None) -> str:
    prompt = build_user_prompt("excerpt", content=content[:2000], max_length=max_length)
    return _generate_line(prompt, model, max_tokens=100)


def generate_meta_description(
    title: str,
    content: str,
    keywords: list[str],
    model: str | None = None,
) -> str:
    prompt = build_user_prompt(
        "meta_description", title=title, content=content[:1000], keywords=", ".join(keywords),
    )
    return _generate_line(prompt, model, max_tokens=100)


def improve_content(
    content: str,
    kind: ImprovementType | str,
    model: str | None = None,
) -> str:
    """Rewrite Markdown content for clarity, SEO, engagement or grammar."""
    prompt = build_user_prompt(
        "improve", instruction=IMPROVEMENT_INSTRUCTIONS[ImprovementType(kind)], content=content,
    )
    result = llm.generate_text(
        model or DEFAULT_MODEL, AUXILIARY_SYSTEM_PROMPT, prompt, temperature=0.5, max_tokens=4000,
    )
    return result.text.strip()
