"""EDA Show AI post generator - Streamlit web app."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

import streamlit as st
from dotenv import load_dotenv

load_dotenv()

from edashow.config import DEFAULT_MODEL, configure_logging, get_missing_keys
from edashow.database import Database
from edashow.formatter import markdown_to_html
from edashow.llm import list_model_names, resolve_model
from edashow.models import PostGenerationConfig, RewriteConfig, ToneOfVoice
from edashow.posts import generate_post, generate_titles, rewrite_content, suggest_keywords

configure_logging()

st.set_page_config(
    page_title="Gerador de Posts com IA | EDA Show",
    page_icon="✍️",
    layout="wide",
)


@st.cache_resource
def get_db() -> Database:
    db = Database()
    db.seed_catalog()
    return db


db = get_db()


# ═══════════════════════════════════════
# Sidebar
# ═══════════════════════════════════════
with st.sidebar:
    st.markdown("## ⚙️ Configurações")

    model_names = list_model_names()
    default_index = next(
        (i for i, name in enumerate(model_names) if resolve_model(name) == DEFAULT_MODEL), 0,
    )
    selected_model = st.selectbox("Modelo de IA", model_names, index=default_index)

    personas = [p for p in db.list_personas() if p["is_active"]]
    persona_labels = {f'{p["name"]} ({p["role"]})': p["slug"] for p in personas}
    selected_persona_label = st.selectbox("Persona", list(persona_labels.keys()))
    selected_persona = persona_labels.get(selected_persona_label)

    tone_options = {"(tom da persona)": None} | {t.value: t for t in ToneOfVoice}
    selected_tone = tone_options[st.selectbox("Tom", list(tone_options.keys()))]

    st.divider()
    st.markdown("### 🧩 Contexto")
    use_brand_voice = st.toggle("Voz da marca", value=True)
    use_seo_rules = st.toggle("Regras de SEO", value=True)

    missing = get_missing_keys()
    if "openrouter" in missing:
        st.warning("OPENROUTER_API_KEY não configurada no .env")


st.markdown("# ✍️ Gerador de Posts com IA")

tab_generate, tab_rewrite = st.tabs(["🚀 Gerar post", "♻️ Reescrever conteúdo"])


def show_result(result) -> None:
    post = result.data
    st.success(f"Post gerado com {result.model} · {result.tokens_used:,} tokens")
    st.markdown(f"**Slug:** `{post.slug}`")
    st.markdown(f"**Meta description:** {post.meta_description}")
    if post.suggested_tags:
        st.markdown("**Tags:** " + ", ".join(post.suggested_tags))
    if post.suggested_category:
        st.markdown(f"**Categoria sugerida:** {post.suggested_category}")

    preview, markdown_tab, html_tab = st.tabs(["📖 Prévia", "📝 Markdown", "📋 HTML"])
    with preview:
        st.markdown(f"# {post.title}")
        st.caption(post.excerpt)
        st.markdown(post.content)
    with markdown_tab:
        st.code(post.content, language="markdown")
    with html_tab:
        st.code(markdown_to_html(post.content), language="html")


with tab_generate:
    with st.form("generate_form"):
        topic = st.text_input("📌 Tópico", placeholder="Ex: telemedicina no Brasil")
        keywords_text = st.text_input("🔑 Palavras-chave (separadas por vírgula)")
        word_count = st.slider("Tamanho aproximado (palavras)", 300, 2500, 800, step=100)
        instructions = st.text_area("📝 Instruções adicionais (opcional)", height=68)
        col1, col2, col3 = st.columns(3)
        with col1:
            submitted = st.form_submit_button("🚀 Gerar post", type="primary")
        with col2:
            want_titles = st.form_submit_button("💡 Sugerir títulos")
        with col3:
            want_keywords = st.form_submit_button("🔍 Sugerir palavras-chave")

    keywords = [k.strip() for k in keywords_text.split(",") if k.strip()]

    if (submitted or want_titles or want_keywords) and not topic.strip():
        st.warning("Informe um tópico!")
    elif want_keywords:
        with st.spinner("Buscando palavras-chave..."):
            suggestion = suggest_keywords(topic.strip(), model=selected_model)
        st.markdown("**Principais:** " + ", ".join(suggestion.primary))
        st.markdown("**Secundárias:** " + ", ".join(suggestion.secondary))
        st.markdown("**Cauda longa:** " + ", ".join(suggestion.long_tail))
    elif want_titles:
        with st.spinner("Gerando títulos..."):
            titles = generate_titles(topic.strip(), keywords, model=selected_model)
        for title in titles:
            st.markdown(f"- {title}")
    elif submitted:
        config = PostGenerationConfig(
            topic=topic.strip(),
            keywords=keywords,
            tone=selected_tone,
            persona_id=selected_persona,
            word_count=word_count,
            additional_instructions=instructions.strip(),
            model=selected_model,
            include_brand_voice=use_brand_voice,
            include_seo_rules=use_seo_rules,
        )
        with st.spinner("Gerando o post... (30s a 1min)"):
            try:
                result = generate_post(config, db=db)
            except Exception as e:
                st.error(f"Erro ao gerar o post: {e}")
                st.stop()
        show_result(result)


with tab_rewrite:
    with st.form("rewrite_form"):
        source_url = st.text_input("🔗 URL de origem (opcional)")
        source_content = st.text_area("📄 Conteúdo original", height=250)
        rewrite_tone = st.selectbox("Tom desejado", [t.value for t in ToneOfVoice])
        rewrite_instructions = st.text_area("📝 Instruções (opcional)", height=68)
        rewrite_submitted = st.form_submit_button("♻️ Reescrever", type="primary")

    if rewrite_submitted and not source_content.strip():
        st.warning("Cole o conteúdo a ser reescrito!")
    elif rewrite_submitted:
        config = RewriteConfig(
            source_content=source_content.strip(),
            source_url=source_url.strip(),
            tone=ToneOfVoice(rewrite_tone),
            instructions=rewrite_instructions.strip(),
            persona_id=selected_persona,
            model=selected_model,
            include_brand_voice=use_brand_voice,
            include_seo_rules=use_seo_rules,
        )
        with st.spinner("Reescrevendo..."):
            try:
                result = rewrite_content(config, db=db)
            except Exception as e:
                st.error(f"Erro ao reescrever: {e}")
                st.stop()
        show_result(result)
