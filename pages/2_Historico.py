"""Generation history page."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import streamlit as st
from dotenv import load_dotenv

load_dotenv()

from edashow.database import Database

st.set_page_config(
    page_title="Histórico de IA | EDA Show",
    page_icon="📚",
    layout="wide",
)


@st.cache_resource
def get_db() -> Database:
    return Database()


db = get_db()

st.markdown("# 📚 Histórico de gerações")

stats = db.usage_stats(days=30)
col1, col2, col3 = st.columns(3)
col1.metric("Gerações (30 dias)", stats["total_generations"])
col2.metric("Tokens", f"{stats['total_tokens']:,}")
col3.metric("Custo (USD)", f"{stats['total_cost']:.4f}")

if stats["by_type"]:
    st.markdown("**Por tipo:** " + " · ".join(f"{k}: {v}" for k, v in stats["by_type"].items()))

st.divider()

limit = st.slider("Registros", 10, 200, 20, step=10)
history = db.list_generations(limit=limit)

if not history:
    st.info("Nenhuma geração registrada ainda.")
else:
    for gen in history:
        title = gen.output_data.get("title", "(sem título)")
        with st.expander(
            f"#{gen.id} · {gen.type} · {title} · {gen.model} · "
            f"{gen.created_at.strftime('%d/%m %H:%M')}"
        ):
            st.markdown(f"**Tokens:** {gen.tokens_used:,} · **Status:** {gen.status}")
            st.json(gen.input_data)
            st.json(gen.output_data)
