"""Tests for the plant catalog schema."""
import os
import tempfile

from plantmatch.data.schema import (
    DB_TABLES,
    exact_synonym,
    init_db,
    insert_plant,
    similar_synonym,
    split_synonyms,
)


def test_init_creates_tables():
    conn = init_db(":memory:")
    tables = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()}
    for table in DB_TABLES:
        assert table in tables
    conn.close()


def test_init_is_idempotent():
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = os.path.join(tmpdir, "nested", "catalog.db")
        conn = init_db(db_path)
        insert_plant(conn, "Pinus sylvestris")
        conn.commit()
        conn.close()
        conn = init_db(db_path)  # Should not raise or drop data
        count = conn.execute("SELECT COUNT(*) FROM plants").fetchone()[0]
        assert count == 1
        conn.close()


def test_insert_plant_joins_synonyms():
    conn = init_db(":memory:")
    plant_id = insert_plant(
        conn, "Pinus sylvestris", sv_name="Tall",
        synonyms=["Pinus rubra", "Pinus silvestris"], synonym_ids=["11", "12"],
    )
    row = conn.execute(
        "SELECT name, sv_name, has_synonyms, has_synonyms_id FROM plants WHERE id = ?", (plant_id,)
    ).fetchone()
    assert row == ("Pinus sylvestris", "Tall", "Pinus rubra | Pinus silvestris", "11 | 12")
    conn.close()


def test_sql_functions_registered():
    conn = init_db(":memory:")
    assert conn.execute("SELECT sanitize_plant_name(?)", ("Acer platanoïdes",)).fetchone()[0] == "acer platanoides"
    assert conn.execute("SELECT trigram_similarity('rosa', 'rosa')").fetchone()[0] == 1.0
    conn.close()


def test_split_synonyms():
    assert split_synonyms("Pinus rubra |  Pinus silvestris | ") == ["Pinus rubra", "Pinus silvestris"]
    assert split_synonyms("") == []
    assert split_synonyms(None) == []
    # Only ' | ' separates synonyms
    assert split_synonyms("Pinus rubra|Pinus silvestris") == ["Pinus rubra|Pinus silvestris"]


def test_exact_and_similar_synonym():
    joined = "Pinus rubra | Pinus 'Fastigiata'"
    assert exact_synonym(joined, "pinus fastigiata") == "Pinus 'Fastigiata'"
    assert exact_synonym(joined, "pinus mugo") is None
    assert similar_synonym(joined, "pinus rubr", 0.3) == "Pinus rubra"
    assert similar_synonym(None, "pinus rubra", 0.3) is None
