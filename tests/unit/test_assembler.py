import itertools
import logging
import sqlite3
from unittest.mock import MagicMock

import pytest

from edashow.context.assembler import ContextAssembler, build_system_prompt, first_match
from edashow.context.catalog import BRAND_VOICE, DEFAULT_PERSONA, EDA_PRO, EDA_RAIZ, SEO_RULES
from edashow.models import ContextConfig, KnowledgeBlock, Persona, ToneOfVoice

BRAND_HEADER = "### DIRETRIZES EDITORIAIS"
SEO_HEADER = "### REGRAS DE FORMATAÇÃO"
CUSTOM_HEADER = "### INSTRUÇÕES ESPECÍFICAS DA TAREFA"
OUTPUT_HEADER = "### FORMATO DE SAÍDA"


def failing_store():
    store = MagicMock()
    store.get_active_record.side_effect = sqlite3.OperationalError("database is locked")
    return store


# --- first_match ---


def test_first_match_returns_first_non_none():
    calls = []

    def make(value):
        def resolve():
            calls.append(value)
            return value
        return resolve

    assert first_match(make(None), make("a"), make("b")) == "a"
    assert calls == [None, "a"]


def test_first_match_all_empty():
    assert first_match(lambda: None, lambda: None) is None


# --- resolve_persona ---


@pytest.mark.parametrize("slug", ["unknown", "", "EDA-PRO", "eda pro"])
def test_unknown_persona_resolves_to_default(slug, db):
    assert ContextAssembler().resolve_persona(slug) is DEFAULT_PERSONA
    assert ContextAssembler(db).resolve_persona(slug) is DEFAULT_PERSONA
    assert ContextAssembler(failing_store()).resolve_persona(slug) is DEFAULT_PERSONA


def test_default_persona_is_eda_pro():
    assert DEFAULT_PERSONA is EDA_PRO


def test_catalog_persona_without_store():
    assert ContextAssembler().resolve_persona("eda-raiz") is EDA_RAIZ


def test_store_persona_wins_over_catalog(db):
    db.save_persona(
        Persona(
            id="eda-raiz",
            name="Raiz Editado",
            role="Colunista",
            description="Versão do operador",
            base_prompt="Prompt do operador",
            preferred_tone=ToneOfVoice.CASUAL,
        )
    )

    persona = ContextAssembler(db).resolve_persona("eda-raiz")

    assert persona.id == "eda-raiz"
    assert persona.name == "Raiz Editado"
    assert persona.role == "Colunista"
    assert persona.description == "Versão do operador"
    assert persona.base_prompt == "Prompt do operador"
    assert persona.preferred_tone is ToneOfVoice.CASUAL


def test_store_only_persona(db):
    db.save_persona(Persona(id="saude", name="Saúde", base_prompt="Você escreve sobre saúde."))
    assert ContextAssembler(db).resolve_persona("saude").base_prompt == "Você escreve sobre saúde."


def test_inactive_persona_falls_back_to_catalog_entry(db):
    db.save_persona(Persona(id="eda-raiz", name="Editado", base_prompt="Editado"), is_active=False)
    assert ContextAssembler(db).resolve_persona("eda-raiz") is EDA_RAIZ


def test_inactive_store_only_persona_falls_back_to_default(db):
    db.save_persona(Persona(id="saude", name="Saúde", base_prompt="x"))
    db.set_persona_active("saude", False)
    assert ContextAssembler(db).resolve_persona("saude") is DEFAULT_PERSONA


def test_store_error_uses_catalog_and_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="edashow.context.assembler"):
        persona = ContextAssembler(failing_store()).resolve_persona("eda-raiz")

    assert persona is EDA_RAIZ
    assert "eda-raiz" in caplog.text
    assert "database is locked" in caplog.text


def test_malformed_store_row_uses_fallback():
    store = MagicMock()
    store.get_active_record.return_value = {
        "slug": "eda-pro",
        "name": "x",
        "role": "",
        "description": "",
        "base_prompt": "x",
        "preferred_tone": "sarcastic",
    }
    assert ContextAssembler(store).resolve_persona("eda-pro") is EDA_PRO


# --- resolve_knowledge ---


@pytest.mark.parametrize("slug", ["unknown", "", "tags"])
def test_unknown_knowledge_resolves_to_none(slug, db):
    assert ContextAssembler().resolve_knowledge(slug) is None
    assert ContextAssembler(db).resolve_knowledge(slug) is None
    assert ContextAssembler(failing_store()).resolve_knowledge(slug) is None


def test_knowledge_from_catalog_when_store_fails():
    assert ContextAssembler(failing_store()).resolve_knowledge("brand-voice") is BRAND_VOICE


def test_knowledge_from_store(db):
    db.save_knowledge_block(KnowledgeBlock(id="seo-rules", content="Regras novas", tags=["seo"]))
    block = ContextAssembler(db).resolve_knowledge("seo-rules")
    assert block.content == "Regras novas"
    assert block.tags == ["seo"]


# --- build_system_prompt ---


def test_prompt_starts_with_persona_base_prompt():
    prompt = ContextAssembler().build_system_prompt(ContextConfig(persona_id="eda-raiz"))
    assert prompt.startswith(EDA_RAIZ.base_prompt + "\n\n")


def test_prompt_minimal_config_has_only_persona_and_output_format():
    prompt = ContextAssembler().build_system_prompt(ContextConfig())
    assert prompt.startswith(EDA_PRO.base_prompt)
    assert BRAND_HEADER not in prompt
    assert SEO_HEADER not in prompt
    assert CUSTOM_HEADER not in prompt
    assert OUTPUT_HEADER in prompt
    assert "```json" in prompt


def test_prompt_full_layout():
    prompt = ContextAssembler().build_system_prompt(
        ContextConfig(
            persona_id="eda-pro",
            include_brand_voice=True,
            include_seo_rules=True,
            custom_instructions="Fale sobre Kafka.",
        )
    )
    expected_head = (
        f"{EDA_PRO.base_prompt}\n\n"
        f"{BRAND_HEADER}\n{BRAND_VOICE.content}\n\n"
        f"{SEO_HEADER}\n{SEO_RULES.content}\n\n"
        f"{CUSTOM_HEADER}\nFale sobre Kafka.\n\n"
        f"{OUTPUT_HEADER}\n"
    )
    assert prompt.startswith(expected_head)


@pytest.mark.parametrize(
    "brand_voice,seo_rules,custom",
    list(itertools.product([True, False], [True, False], ["", "Use exemplos."])),
)
def test_section_order_for_all_toggles(brand_voice, seo_rules, custom):
    prompt = ContextAssembler().build_system_prompt(
        ContextConfig(
            include_brand_voice=brand_voice,
            include_seo_rules=seo_rules,
            custom_instructions=custom,
        )
    )
    headers = [
        h
        for h, enabled in [
            (BRAND_HEADER, brand_voice),
            (SEO_HEADER, seo_rules),
            (CUSTOM_HEADER, bool(custom)),
            (OUTPUT_HEADER, True),
        ]
        if enabled
    ]
    positions = [prompt.index(h) for h in headers]
    assert positions == sorted(positions)
    assert prompt.index(OUTPUT_HEADER) == prompt.rindex("### ")
    assert (BRAND_HEADER in prompt) is brand_voice
    assert (SEO_HEADER in prompt) is seo_rules
    assert (CUSTOM_HEADER in prompt) is bool(custom)


@pytest.mark.parametrize("custom", ["", "Use exemplos."])
def test_brand_voice_toggle_removes_exactly_its_section(custom):
    assembler = ContextAssembler()
    full = assembler.build_system_prompt(
        ContextConfig(include_brand_voice=True, include_seo_rules=True, custom_instructions=custom)
    )
    without = assembler.build_system_prompt(
        ContextConfig(include_brand_voice=False, include_seo_rules=True, custom_instructions=custom)
    )
    section = f"{BRAND_HEADER}\n{BRAND_VOICE.content}\n\n"
    assert full.count(section) == 1
    assert full.replace(section, "") == without


@pytest.mark.parametrize("brand_voice", [True, False])
def test_seo_toggle_removes_exactly_its_section(brand_voice):
    assembler = ContextAssembler()
    full = assembler.build_system_prompt(
        ContextConfig(include_brand_voice=brand_voice, include_seo_rules=True)
    )
    without = assembler.build_system_prompt(
        ContextConfig(include_brand_voice=brand_voice, include_seo_rules=False)
    )
    section = f"{SEO_HEADER}\n{SEO_RULES.content}\n\n"
    assert full.replace(section, "") == without


def test_missing_knowledge_block_is_skipped_silently(monkeypatch):
    monkeypatch.setattr("edashow.context.assembler.KNOWLEDGE_BLOCKS", {})
    store = MagicMock()
    store.get_active_record.return_value = None

    prompt = ContextAssembler(store).build_system_prompt(
        ContextConfig(include_brand_voice=True, include_seo_rules=True)
    )

    assert BRAND_HEADER not in prompt
    assert SEO_HEADER not in prompt
    assert prompt.rstrip().endswith("se for solicitado um objeto puro.")


def test_custom_instructions_are_verbatim():
    text = "Cite {{ fonte }} e use {% raw %} literalmente."
    prompt = ContextAssembler().build_system_prompt(ContextConfig(custom_instructions=text))
    assert f"{CUSTOM_HEADER}\n{text}\n\n" in prompt


def test_store_edits_flow_into_prompt(db):
    db.save_knowledge_block(KnowledgeBlock(id="brand-voice", content="Voz editada"))
    prompt = build_system_prompt(ContextConfig(include_brand_voice=True), db=db)
    assert f"{BRAND_HEADER}\nVoz editada\n\n" in prompt
