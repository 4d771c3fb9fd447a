"""Candidate rows from the plant catalog and the providers that fetch them.

A provider applies a cheap, coarse filter (exact, prefix, substring or
trigram similarity) and hands back a bounded list. Precise scoring happens
in the matcher, never here.
"""
import logging
import sqlite3
from collections.abc import Iterable, Mapping, Sequence
from typing import Protocol

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from plantmatch.data.schema import split_synonyms
from plantmatch.matching.normalize import sanitize_plant_name

logger = logging.getLogger(__name__)

DEFAULT_TRIGRAM_THRESHOLD = 0.3
# Substring matching only kicks in for queries at least this long
MIN_SUBSTRING_LENGTH = 4


class Candidate(BaseModel):
    """One catalog row, typed and validated at the storage boundary."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    id: int
    name: str
    sv_name: str | None = None
    synonyms: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("synonyms", "has_synonyms")
    )
    synonym_ids: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("synonym_ids", "has_synonyms_id")
    )
    plant_type: str | None = None
    grupp: str | None = None
    serie: str | None = None
    match_kind: str | None = Field(
        default=None, validation_alias=AliasChoices("match_kind", "match_details")
    )
    matched_synonym_name: str | None = None
    matched_synonym_id: str | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("sv_name")
    @classmethod
    def _blank_sv_name_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("synonyms", "synonym_ids", mode="before")
    @classmethod
    def _split_joined(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return split_synonyms(value)
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"expected a joined string or a list, got {type(value).__name__}")
        return [str(v).strip() for v in value if v is not None and str(v).strip()]

    @property
    def metadata(self) -> dict:
        """Catalog fields the matcher does not interpret."""
        return dict(self.model_extra or {})


class CandidateProvider(Protocol):
    def fetch_candidates(self, query: str, limit: int) -> Sequence[Candidate]:
        ...


def candidates_from_rows(rows: Iterable) -> list[Candidate]:
    """Validate raw rows into candidates, skipping rows that do not validate.

    Rows already typed as Candidate pass through unchanged.
    """
    candidates = []
    for row in rows:
        if isinstance(row, Candidate):
            candidates.append(row)
            continue
        if not isinstance(row, Mapping):
            logger.warning("Skipping candidate row of type %s", type(row).__name__)
            continue
        payload = dict(row)
        try:
            candidates.append(Candidate.model_validate(payload))
        except ValidationError as e:
            logger.warning(
                "Skipping candidate %r: %d validation error(s): %s",
                payload.get("id"), e.error_count(), e.errors()[0]["msg"],
            )
    return candidates


def _like_escape(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


_SELECT_COLUMNS = """
    id, name, sv_name, has_synonyms, has_synonyms_id,
    plant_type, grupp, serie
"""

_ACCEPTED_ONLY = "(synonym_to IS NULL OR TRIM(synonym_to) = '')"

_STRICT_SQL = f"""
SELECT {_SELECT_COLUMNS},
    CASE WHEN sanitize_plant_name(name) = :term
         THEN 'exact_match' ELSE 'synonym_exact_match' END AS match_kind,
    CASE WHEN sanitize_plant_name(name) = :term
         THEN NULL ELSE exact_synonym(has_synonyms, :term) END AS matched_synonym_name
FROM plants
WHERE {_ACCEPTED_ONLY}
  AND (sanitize_plant_name(name) = :term
       OR exact_synonym(has_synonyms, :term) IS NOT NULL)
ORDER BY LENGTH(name) ASC, name ASC
LIMIT :limit
"""

_FUZZY_SQL = f"""
SELECT {_SELECT_COLUMNS},
    CASE
        WHEN sanitize_plant_name(name) LIKE :prefix ESCAPE '\\'
          OR sanitize_plant_name(sv_name) LIKE :prefix ESCAPE '\\' THEN 'prefix_match'
        WHEN trigram_similarity(sanitize_plant_name(name), :term) >= :threshold THEN 'fast_match'
        WHEN similar_synonym(has_synonyms, :term, :threshold) IS NOT NULL THEN 'synonym_match'
        WHEN trigram_similarity(sanitize_plant_name(sv_name), :term) >= :threshold THEN 'sv_name_match'
        ELSE 'substring_match'
    END AS match_kind,
    similar_synonym(has_synonyms, :term, :threshold) AS matched_synonym_name
FROM plants
WHERE {_ACCEPTED_ONLY}
  AND (
    sanitize_plant_name(name) LIKE :prefix ESCAPE '\\'
    OR sanitize_plant_name(sv_name) LIKE :prefix ESCAPE '\\'
    OR trigram_similarity(sanitize_plant_name(name), :term) >= :threshold
    OR trigram_similarity(sanitize_plant_name(sv_name), :term) >= :threshold
    OR similar_synonym(has_synonyms, :term, :threshold) IS NOT NULL
    OR (:allow_substring AND (
        sanitize_plant_name(name) LIKE :substring ESCAPE '\\'
        OR sanitize_plant_name(sv_name) LIKE :substring ESCAPE '\\'))
  )
ORDER BY LENGTH(name) ASC, name ASC
LIMIT :limit
"""


class SqliteCandidateProvider:
    """Candidate provider backed by the SQLite plant catalog.

    Strategy:
        1. Exact match on the sanitized name or any single synonym.
        2. Only if nothing matched exactly: prefix, trigram and substring
           matching on name, Swedish name and synonyms.

    Rows that are themselves synonyms of an accepted name are never
    returned. Results are ordered shortest name first.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        similarity_threshold: float = DEFAULT_TRIGRAM_THRESHOLD,
    ):
        self._conn = conn
        self.similarity_threshold = similarity_threshold

    def fetch_candidates(self, query: str, limit: int) -> list[Candidate]:
        term = sanitize_plant_name(query)
        if not term:
            return []

        params = {"term": term, "limit": limit}
        rows = self._query(_STRICT_SQL, params)
        if rows:
            logger.debug("Strict phase: %d candidate(s) for %r", len(rows), term)
        else:
            escaped = _like_escape(term)
            params.update(
                prefix=f"{escaped}%",
                substring=f"%{escaped}%",
                threshold=self.similarity_threshold,
                allow_substring=len(term) >= MIN_SUBSTRING_LENGTH,
            )
            rows = self._query(_FUZZY_SQL, params)
            logger.debug("Fuzzy phase: %d candidate(s) for %r", len(rows), term)

        return candidates_from_rows(_with_synonym_id(row) for row in rows)

    def _query(self, sql: str, params: dict) -> list[dict]:
        cursor = self._conn.execute(sql, params)
        columns = [c[0] for c in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]


def _with_synonym_id(row: dict) -> dict:
    """Look up the id that sits at the matched synonym's position."""
    matched = row.get("matched_synonym_name")
    row["matched_synonym_id"] = None
    if matched:
        synonyms = split_synonyms(row.get("has_synonyms"))
        ids = split_synonyms(row.get("has_synonyms_id"))
        if matched in synonyms:
            pos = synonyms.index(matched)
            if pos < len(ids):
                row["matched_synonym_id"] = ids[pos]
    return row
