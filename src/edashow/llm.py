"""LiteLLM-based model invocation: free text and schema-bound objects."""

from __future__ import annotations

from dataclasses import dataclass, field

from litellm import completion
from pydantic import BaseModel, ValidationError

from edashow.config import LLM_TIMEOUT

MODEL_REGISTRY: dict[str, str] = {
    "DeepSeek V3": "openrouter/deepseek/deepseek-chat",
    "Claude Haiku": "openrouter/anthropic/claude-3-haiku",
    "Claude Sonnet": "openrouter/anthropic/claude-3.5-sonnet",
    "GPT-4o": "openrouter/openai/gpt-4o",
    "GPT-4o Mini": "openrouter/openai/gpt-4o-mini",
    "Gemini Flash": "openrouter/google/gemini-flash-1.5",
}


class StructuredOutputError(Exception):
    """The model answered, but not with a usable object."""


class SchemaParseError(StructuredOutputError):
    """Response was not valid JSON or did not match the schema."""


class NoObjectGeneratedError(StructuredOutputError):
    """Response carried no content at all."""


@dataclass
class Usage:
    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


@dataclass
class TextResult:
    text: str
    model: str
    usage: Usage = field(default_factory=Usage)


@dataclass
class ObjectResult:
    object: dict
    model: str
    usage: Usage = field(default_factory=Usage)


def resolve_model(name: str) -> str:
    """Map a display name to a LiteLLM model string."""
    if "/" in name or name in MODEL_REGISTRY.values():
        return name
    if name in MODEL_REGISTRY:
        return MODEL_REGISTRY[name]
    raise ValueError(f"Unknown model: '{name}'. Available: {list(MODEL_REGISTRY.keys())}")


def list_model_names() -> list[str]:
    """Display names of the available models."""
    return list(MODEL_REGISTRY.keys())


def _messages(system_prompt: str, user_prompt: str) -> list[dict]:
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


def _usage(response) -> Usage:
    usage = getattr(response, "usage", None)
    if usage is None:
        return Usage()
    return Usage(
        prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
        completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
    )


def generate_text(
    model: str,
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.7,
    max_tokens: int = 4000,
) -> TextResult:
    """Call the model and return its free-text answer."""
    model_id = resolve_model(model)
    response = completion(
        model=model_id,
        messages=_messages(system_prompt, user_prompt),
        temperature=temperature,
        max_tokens=max_tokens,
        timeout=LLM_TIMEOUT,
    )
    return TextResult(
        text=response.choices[0].message.content or "",
        model=model_id,
        usage=_usage(response),
    )


def generate_structured(
    model: str,
    schema: type[BaseModel],
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.7,
    max_tokens: int = 4000,
) -> ObjectResult:
    """Call the model with `schema` as response format and validate the answer.

    Raises SchemaParseError or NoObjectGeneratedError when the answer is unusable;
    transport, auth and quota errors from LiteLLM propagate as-is.
    """
    model_id = resolve_model(model)
    response = completion(
        model=model_id,
        messages=_messages(system_prompt, user_prompt),
        temperature=temperature,
        max_tokens=max_tokens,
        response_format=schema,
        timeout=LLM_TIMEOUT,
    )
    content = response.choices[0].message.content
    if not content or not content.strip():
        raise NoObjectGeneratedError(f"Model '{model_id}' returned no object for {schema.__name__}")
    try:
        parsed = schema.model_validate_json(content)
    except ValidationError as e:
        raise SchemaParseError(f"Response does not match {schema.__name__}: {e}") from e
    return ObjectResult(
        object=parsed.model_dump(by_alias=True, exclude_none=True),
        model=model_id,
        usage=_usage(response),
    )
