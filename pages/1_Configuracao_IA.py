"""AI configuration page - edit personas, knowledge blocks and prompt templates."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import streamlit as st
from dotenv import load_dotenv

load_dotenv()

from edashow.context.assembler import ContextAssembler
from edashow.context.catalog import KNOWLEDGE_BLOCKS, PERSONAS
from edashow.database import Database
from edashow.models import ContextConfig, KnowledgeBlock, Persona, ToneOfVoice
from edashow.posts import DEFAULT_REWRITE_GUIDELINES
from edashow.prompts.builder import TEMPLATE_CATEGORY, TEMPLATES_DIR

st.set_page_config(
    page_title="Configuração de IA | EDA Show",
    page_icon="🧠",
    layout="wide",
)


@st.cache_resource
def get_db() -> Database:
    db = Database()
    db.seed_catalog()
    return db


db = get_db()

st.markdown("# 🧠 Configuração de IA")
st.caption("Alterações valem para a próxima geração. Registros inativos usam o padrão embutido.")

tab_personas, tab_knowledge, tab_templates, tab_preview = st.tabs([
    "🎭 Personas", "📚 Blocos de conhecimento", "🧾 Templates", "👁️ Prompt de sistema",
])

# ═══════════════════════════════════════
# Personas
# ═══════════════════════════════════════
with tab_personas:
    personas = db.list_personas()
    options = [p["slug"] for p in personas] + ["(nova persona)"]
    selected = st.selectbox("Persona", options)
    current = next((p for p in personas if p["slug"] == selected), None)

    with st.form("edit_persona"):
        slug = st.text_input("Slug", value=current["slug"] if current else "", disabled=current is not None)
        name = st.text_input("Nome", value=current["name"] if current else "")
        role = st.text_input("Papel", value=current["role"] if current else "")
        description = st.text_input("Descrição", value=current["description"] if current else "")
        tones = [t.value for t in ToneOfVoice]
        tone = st.selectbox(
            "Tom preferido", tones,
            index=tones.index(current["preferred_tone"]) if current else 0,
        )
        base_prompt = st.text_area("Prompt base", value=current["base_prompt"] if current else "", height=250)
        is_active = st.toggle("Ativa", value=bool(current["is_active"]) if current else True)
        col1, col2 = st.columns(2)
        with col1:
            save = st.form_submit_button("💾 Salvar", type="primary")
        with col2:
            reset = st.form_submit_button("🔄 Restaurar padrão", disabled=selected not in PERSONAS)

    if save:
        if not slug.strip() or not base_prompt.strip():
            st.error("Slug e prompt base são obrigatórios.")
        else:
            db.save_persona(
                Persona(
                    id=slug.strip(),
                    name=name.strip() or slug.strip(),
                    role=role.strip(),
                    description=description.strip(),
                    base_prompt=base_prompt,
                    preferred_tone=ToneOfVoice(tone),
                ),
                is_active=is_active,
            )
            st.success(f"Persona '{slug}' salva!")
            st.rerun()

    if reset and selected in PERSONAS:
        db.save_persona(PERSONAS[selected])
        st.success(f"Persona '{selected}' restaurada!")
        st.rerun()

# ═══════════════════════════════════════
# Knowledge blocks
# ═══════════════════════════════════════
with tab_knowledge:
    st.caption("Os blocos `brand-voice` e `seo-rules` são injetados pelos interruptores do gerador.")
    blocks = db.list_knowledge_blocks()
    options = [b["slug"] for b in blocks] + ["(novo bloco)"]
    selected_block = st.selectbox("Bloco", options)
    current_block = next((b for b in blocks if b["slug"] == selected_block), None)

    with st.form("edit_knowledge"):
        block_slug = st.text_input(
            "Slug", value=current_block["slug"] if current_block else "",
            disabled=current_block is not None,
        )
        block_name = st.text_input("Nome", value=current_block["name"] if current_block else "")
        block_tags = st.text_input(
            "Tags (separadas por vírgula)",
            value=", ".join(current_block["tags"]) if current_block else "",
        )
        block_content = st.text_area(
            "Conteúdo (Markdown)", value=current_block["content"] if current_block else "", height=350,
        )
        block_active = st.toggle("Ativo", value=bool(current_block["is_active"]) if current_block else True)
        col1, col2 = st.columns(2)
        with col1:
            save_block = st.form_submit_button("💾 Salvar", type="primary")
        with col2:
            reset_block = st.form_submit_button(
                "🔄 Restaurar padrão", disabled=selected_block not in KNOWLEDGE_BLOCKS,
            )

    if save_block:
        if not block_slug.strip() or not block_content.strip():
            st.error("Slug e conteúdo são obrigatórios.")
        else:
            db.save_knowledge_block(
                KnowledgeBlock(
                    id=block_slug.strip(),
                    name=block_name.strip(),
                    content=block_content,
                    tags=[t.strip() for t in block_tags.split(",") if t.strip()],
                ),
                is_active=block_active,
            )
            st.success(f"Bloco '{block_slug}' salvo!")
            st.rerun()

    if reset_block and selected_block in KNOWLEDGE_BLOCKS:
        db.save_knowledge_block(KNOWLEDGE_BLOCKS[selected_block])
        st.success(f"Bloco '{selected_block}' restaurado!")
        st.rerun()

    with st.expander("👁️ Prévia"):
        st.markdown(current_block["content"] if current_block else "")

# ═══════════════════════════════════════
# Prompt templates
# ═══════════════════════════════════════
with tab_templates:
    st.caption("Placeholders usam a sintaxe Jinja2, ex.: `{{ topic }}`. Sem override, vale o template do pacote.")
    names = sorted(p.stem for p in TEMPLATES_DIR.glob("*.j2") if p.stem != "system")
    template_name = st.selectbox("Template", names)
    packaged = (TEMPLATES_DIR / f"{template_name}.j2").read_text(encoding="utf-8")
    override = db.get_prompt_template(TEMPLATE_CATEGORY, template_name)

    with st.form(f"edit_template_{template_name}"):
        edited = st.text_area("Template", value=override or packaged, height=400)
        col1, col2 = st.columns(2)
        with col1:
            save_template = st.form_submit_button("💾 Salvar override", type="primary")
        with col2:
            drop_template = st.form_submit_button("🔄 Usar template do pacote")

    if save_template:
        db.save_prompt_template(TEMPLATE_CATEGORY, template_name, edited)
        st.success("Template salvo!")
        st.rerun()

    if drop_template:
        db.save_prompt_template(TEMPLATE_CATEGORY, template_name, packaged, is_active=False)
        st.success("Usando o template do pacote.")
        st.rerun()

    st.divider()
    with st.form("rewrite_guidelines"):
        guidelines = st.text_area(
            "Diretrizes de reescrita",
            value=db.get_config("rewrite_guidelines", DEFAULT_REWRITE_GUIDELINES),
            height=180,
        )
        if st.form_submit_button("💾 Salvar diretrizes"):
            db.set_config("rewrite_guidelines", guidelines)
            st.success("Diretrizes salvas!")

# ═══════════════════════════════════════
# System prompt preview
# ═══════════════════════════════════════
with tab_preview:
    persona_slugs = [p["slug"] for p in db.list_personas()]
    preview_persona = st.selectbox("Persona", persona_slugs, key="preview_persona")
    col1, col2 = st.columns(2)
    with col1:
        preview_bv = st.toggle("Voz da marca", value=True, key="preview_bv")
    with col2:
        preview_seo = st.toggle("Regras de SEO", value=True, key="preview_seo")
    preview_custom = st.text_area("Instruções específicas", height=68)

    system_prompt = ContextAssembler(db).build_system_prompt(
        ContextConfig(
            persona_id=preview_persona,
            include_brand_voice=preview_bv,
            include_seo_rules=preview_seo,
            custom_instructions=preview_custom.strip(),
        )
    )
    st.metric("Tamanho", f"{len(system_prompt):,} caracteres (~{len(system_prompt) // 4:,} tokens)")
    st.text(system_prompt)
