"""Plant catalog schema definition and initialization."""
import sqlite3
from pathlib import Path

from plantmatch.matching.normalize import sanitize_plant_name
from plantmatch.matching.similarity import trigram_similarity

DB_TABLES = ["plants"]

# Separator for has_synonyms / has_synonyms_id
SYNONYM_DELIMITER = " | "

SCHEMA_SQL = """
-- Plant taxa: accepted names and their synonyms
CREATE TABLE IF NOT EXISTS plants (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    sv_name TEXT,
    -- Synonym names and ids, joined with ' | '
    has_synonyms TEXT DEFAULT '',
    has_synonyms_id TEXT DEFAULT '',
    -- Set when this row is itself a synonym of an accepted name
    synonym_to TEXT DEFAULT '',
    synonym_to_id INTEGER,
    taxonomy_type TEXT DEFAULT '',
    plant_type TEXT DEFAULT '',
    grupp TEXT DEFAULT '',
    serie TEXT DEFAULT '',
    user_submitted INTEGER DEFAULT 0,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_plants_name_lower ON plants(LOWER(name));
CREATE INDEX IF NOT EXISTS idx_plants_synonym_to ON plants(synonym_to);
"""


def split_synonyms(value: str | None) -> list[str]:
    """Split a ' | ' joined synonym column, dropping blanks."""
    if not value:
        return []
    return [s.strip() for s in value.split(SYNONYM_DELIMITER) if s.strip()]


def exact_synonym(has_synonyms: str | None, term: str) -> str | None:
    """First synonym whose sanitized form equals the sanitized term."""
    for synonym in split_synonyms(has_synonyms):
        if sanitize_plant_name(synonym) == term:
            return synonym
    return None


def similar_synonym(has_synonyms: str | None, term: str, threshold: float) -> str | None:
    """First synonym within trigram similarity threshold of the term."""
    for synonym in split_synonyms(has_synonyms):
        if trigram_similarity(sanitize_plant_name(synonym), term) >= threshold:
            return synonym
    return None


def register_functions(conn: sqlite3.Connection) -> None:
    """Expose name sanitizing and trigram helpers to SQL."""
    conn.create_function("sanitize_plant_name", 1, sanitize_plant_name, deterministic=True)
    conn.create_function("trigram_similarity", 2, trigram_similarity, deterministic=True)
    conn.create_function("exact_synonym", 2, exact_synonym, deterministic=True)
    conn.create_function("similar_synonym", 3, similar_synonym, deterministic=True)


def connect(db_path: str) -> sqlite3.Connection:
    """Open an existing catalog database with the SQL helpers registered."""
    conn = sqlite3.connect(db_path, check_same_thread=False)
    register_functions(conn)
    return conn


def init_db(db_path: str) -> sqlite3.Connection:
    """Initialize the database with the schema. Idempotent."""
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = connect(db_path)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.executescript(SCHEMA_SQL)
    conn.commit()
    return conn


def insert_plant(
    conn: sqlite3.Connection,
    name: str,
    sv_name: str | None = None,
    synonyms: list[str] | None = None,
    synonym_ids: list[str] | None = None,
    synonym_to: str = "",
    plant_type: str = "",
    grupp: str = "",
    serie: str = "",
) -> int:
    """Insert one plant row and return its id. Does not commit."""
    cur = conn.execute(
        "INSERT INTO plants (name, sv_name, has_synonyms, has_synonyms_id, "
        "synonym_to, plant_type, grupp, serie) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        (
            name,
            sv_name,
            SYNONYM_DELIMITER.join(synonyms or []),
            SYNONYM_DELIMITER.join(synonym_ids or []),
            synonym_to,
            plant_type,
            grupp,
            serie,
        ),
    )
    return cur.lastrowid
