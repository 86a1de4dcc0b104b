"""SQLite knowledge store and generation history."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

from edashow.config import DB_PATH
from edashow.context.catalog import KNOWLEDGE_BLOCKS, PERSONAS
from edashow.models import GenerationLog, KnowledgeBlock, Persona

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS personas (
    slug TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    role TEXT NOT NULL DEFAULT '',
    description TEXT NOT NULL DEFAULT '',
    base_prompt TEXT NOT NULL,
    preferred_tone TEXT NOT NULL DEFAULT 'professional',
    is_active BOOLEAN DEFAULT 1,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS knowledge_blocks (
    slug TEXT PRIMARY KEY,
    name TEXT NOT NULL DEFAULT '',
    content TEXT NOT NULL,
    tags TEXT DEFAULT '[]',
    is_active BOOLEAN DEFAULT 1,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS prompt_templates (
    category TEXT NOT NULL,
    name TEXT NOT NULL,
    template TEXT NOT NULL,
    is_active BOOLEAN DEFAULT 1,
    PRIMARY KEY (category, name)
);

CREATE TABLE IF NOT EXISTS app_config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS generations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    type TEXT NOT NULL,
    input_data TEXT DEFAULT '{}',
    output_data TEXT DEFAULT '{}',
    model TEXT NOT NULL,
    tokens_used INTEGER DEFAULT 0,
    cost_usd REAL DEFAULT 0,
    status TEXT DEFAULT 'completed',
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""

# Tables the context assembler may read by slug.
RECORD_TABLES = ("personas", "knowledge_blocks")


class Database:
    def __init__(self, db_path: Path = DB_PATH):
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db_path = db_path
        self._migrate()

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _migrate(self) -> None:
        with self._get_conn() as conn:
            conn.executescript(SCHEMA_SQL)

    def seed_catalog(self) -> None:
        """Insert the built-in personas and knowledge blocks, keeping operator edits."""
        with self._get_conn() as conn:
            for p in PERSONAS.values():
                conn.execute(
                    "INSERT OR IGNORE INTO personas "
                    "(slug, name, role, description, base_prompt, preferred_tone) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (p.id, p.name, p.role, p.description, p.base_prompt, p.preferred_tone.value),
                )
            for slug, k in KNOWLEDGE_BLOCKS.items():
                conn.execute(
                    "INSERT OR IGNORE INTO knowledge_blocks (slug, name, content, tags) "
                    "VALUES (?, ?, ?, ?)",
                    (slug, k.name, k.content, json.dumps(k.tags, ensure_ascii=False)),
                )

    # --- Record lookup ---

    def get_active_record(self, table: str, slug: str) -> dict | None:
        """Active row of `personas` or `knowledge_blocks` keyed by slug."""
        if table not in RECORD_TABLES:
            raise ValueError(f"Unknown table: '{table}'. Available: {list(RECORD_TABLES)}")
        with self._get_conn() as conn:
            row = conn.execute(
                f"SELECT * FROM {table} WHERE slug = ? AND is_active = 1", (slug,)
            ).fetchone()
        if row is None:
            return None
        data = dict(row)
        if "tags" in data:
            data["tags"] = json.loads(data["tags"] or "[]")
        return data

    # --- Persona ---

    def list_personas(self) -> list[dict]:
        with self._get_conn() as conn:
            rows = conn.execute("SELECT * FROM personas ORDER BY name").fetchall()
        return [dict(r) for r in rows]

    def save_persona(self, persona: Persona, is_active: bool = True) -> None:
        with self._get_conn() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO personas "
                "(slug, name, role, description, base_prompt, preferred_tone, is_active, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)",
                (
                    persona.id,
                    persona.name,
                    persona.role,
                    persona.description,
                    persona.base_prompt,
                    persona.preferred_tone.value,
                    is_active,
                ),
            )

    def set_persona_active(self, slug: str, is_active: bool) -> bool:
        with self._get_conn() as conn:
            cursor = conn.execute(
                "UPDATE personas SET is_active = ?, updated_at = CURRENT_TIMESTAMP WHERE slug = ?",
                (is_active, slug),
            )
        return cursor.rowcount > 0

    # --- Knowledge Block ---

    def list_knowledge_blocks(self) -> list[dict]:
        with self._get_conn() as conn:
            rows = conn.execute("SELECT * FROM knowledge_blocks ORDER BY slug").fetchall()
        results = []
        for r in rows:
            data = dict(r)
            data["tags"] = json.loads(data.get("tags") or "[]")
            results.append(data)
        return results

    def save_knowledge_block(self, block: KnowledgeBlock, is_active: bool = True) -> None:
        with self._get_conn() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO knowledge_blocks "
                "(slug, name, content, tags, is_active, updated_at) "
                "VALUES (?, ?, ?, ?, ?, CURRENT_TIMESTAMP)",
                (
                    block.id,
                    block.name,
                    block.content,
                    json.dumps(block.tags, ensure_ascii=False),
                    is_active,
                ),
            )

    def set_knowledge_active(self, slug: str, is_active: bool) -> bool:
        with self._get_conn() as conn:
            cursor = conn.execute(
                "UPDATE knowledge_blocks SET is_active = ?, updated_at = CURRENT_TIMESTAMP "
                "WHERE slug = ?",
                (is_active, slug),
            )
        return cursor.rowcount > 0

    # --- Prompt templates ---

    def get_prompt_template(self, category: str, name: str) -> str | None:
        with self._get_conn() as conn:
            row = conn.execute(
                "SELECT template FROM prompt_templates "
                "WHERE category = ? AND name = ? AND is_active = 1",
                (category, name),
            ).fetchone()
        if row is None:
            return None
        return row["template"]

    def save_prompt_template(
        self, category: str, name: str, template: str, is_active: bool = True,
    ) -> None:
        with self._get_conn() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO prompt_templates (category, name, template, is_active) "
                "VALUES (?, ?, ?, ?)",
                (category, name, template, is_active),
            )

    # --- App Config ---

    def get_config(self, key: str, default: str = "") -> str:
        with self._get_conn() as conn:
            row = conn.execute(
                "SELECT value FROM app_config WHERE key = ?", (key,)
            ).fetchone()
        if row is None:
            return default
        return row["value"]

    def set_config(self, key: str, value: str) -> None:
        with self._get_conn() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO app_config (key, value) VALUES (?, ?)",
                (key, value),
            )

    # --- Generation history ---

    def save_generation(self, log: GenerationLog) -> GenerationLog:
        with self._get_conn() as conn:
            cursor = conn.execute(
                "INSERT INTO generations "
                "(type, input_data, output_data, model, tokens_used, cost_usd, status) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    log.type,
                    json.dumps(log.input_data, ensure_ascii=False),
                    json.dumps(log.output_data, ensure_ascii=False),
                    log.model,
                    log.tokens_used,
                    log.cost_usd,
                    log.status,
                ),
            )
            log.id = cursor.lastrowid
        return log

    def list_generations(self, limit: int = 20) -> list[GenerationLog]:
        with self._get_conn() as conn:
            rows = conn.execute(
                "SELECT * FROM generations ORDER BY created_at DESC, id DESC LIMIT ?",
                (limit,),
            ).fetchall()
        results = []
        for r in rows:
            data = dict(r)
            data["input_data"] = json.loads(data.get("input_data") or "{}")
            data["output_data"] = json.loads(data.get("output_data") or "{}")
            results.append(GenerationLog(**data))
        return results

    def usage_stats(self, days: int = 30) -> dict:
        """Token/cost totals for the last `days` days, with counts per generation type."""
        with self._get_conn() as conn:
            rows = conn.execute(
                "SELECT type, tokens_used, cost_usd FROM generations "
                "WHERE created_at >= datetime('now', ?)",
                (f"-{days} days",),
            ).fetchall()
        stats = {
            "total_generations": len(rows),
            "total_tokens": 0,
            "total_cost": 0.0,
            "by_type": {},
        }
        for r in rows:
            stats["total_tokens"] += r["tokens_used"] or 0
            stats["total_cost"] += r["cost_usd"] or 0.0
            stats["by_type"][r["type"]] = stats["by_type"].get(r["type"], 0) + 1
        return stats
