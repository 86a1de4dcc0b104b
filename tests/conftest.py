from types import SimpleNamespace

import pytest

from edashow.database import Database
from edashow.llm import ObjectResult, TextResult, Usage


@pytest.fixture
def db(tmp_path):
    """Fresh SQLite store per test."""
    return Database(tmp_path / "edashow.db")


@pytest.fixture
def completion_response():
    """Factory for objects shaped like a LiteLLM ModelResponse."""

    def make(content, prompt_tokens=10, completion_tokens=20, model="deepseek-chat"):
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
            usage=SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens),
            model=model,
        )

    return make


class StubModel:
    """Records calls and plays back configured structured/text outcomes."""

    def __init__(self, structured=None, text=None):
        self.structured_outcome = structured
        self.text_outcome = text
        self.structured_calls = []
        self.text_calls = []

    def structured(self, model, schema, system_prompt, user_prompt, temperature=0.7):
        self.structured_calls.append(
            {"model": model, "schema": schema, "system": system_prompt, "prompt": user_prompt}
        )
        if isinstance(self.structured_outcome, Exception):
            raise self.structured_outcome
        return ObjectResult(
            object=dict(self.structured_outcome),
            model=model,
            usage=Usage(prompt_tokens=100, completion_tokens=50),
        )

    def text(self, model, system_prompt, user_prompt, temperature=0.7):
        self.text_calls.append({"model": model, "system": system_prompt, "prompt": user_prompt})
        if isinstance(self.text_outcome, Exception):
            raise self.text_outcome
        return TextResult(
            text=self.text_outcome,
            model=model,
            usage=Usage(prompt_tokens=7, completion_tokens=3),
        )


@pytest.fixture
def stub_model():
    return StubModel
