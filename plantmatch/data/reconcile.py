"""Import-time reconciliation of nursery plant names against the catalog.

Each imported name is run through the matcher and classified:
    linked      exactly one strict match, safe to auto-link
    ambiguous   several strict matches, needs a human decision
    suggested   no strict match, but scored suggestions exist
    unmatched   nothing above the minimum score
"""
import argparse
import logging
from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from plantmatch.data.candidates import SqliteCandidateProvider
from plantmatch.data.config import MatcherConfig
from plantmatch.data.schema import SYNONYM_DELIMITER, connect
from plantmatch.matching.cache import ParsedNameCache
from plantmatch.matching.orchestrator import MatchResult, PlantMatcher

logger = logging.getLogger(__name__)

STATUSES = ("linked", "ambiguous", "suggested", "unmatched")

RESULT_COLUMNS = [
    "input_name",
    "status",
    "plant_id",
    "plant_name",
    "score",
    "match_source",
    "alternatives",
]

# Alternatives listed per row
MAX_ALTERNATIVES = 3


def _classify(input_name: str, result: MatchResult) -> dict:
    row = {
        "input_name": input_name,
        "status": "unmatched",
        "plant_id": None,
        "plant_name": None,
        "score": None,
        "match_source": None,
        "alternatives": "",
    }
    if result.strict_matches:
        row["status"] = "linked" if len(result.strict_matches) == 1 else "ambiguous"
        ranked = result.strict_matches + result.suggestions
    elif result.suggestions:
        row["status"] = "suggested"
        ranked = result.suggestions
    else:
        return row

    best = ranked[0]
    row.update(
        plant_id=best.id,
        plant_name=best.name,
        score=round(best.total_score, 4),
        match_source=best.best_match_source.value,
        alternatives=SYNONYM_DELIMITER.join(r.name for r in ranked[1 : 1 + MAX_ALTERNATIVES]),
    )
    return row


def reconcile_names(
    matcher: PlantMatcher,
    names: Iterable[str],
    minimum_score: float | None = None,
) -> pd.DataFrame:
    """Match every imported name; repeated names are matched once."""
    seen: dict[str, dict] = {}
    rows = []
    for raw in names:
        name = "" if raw is None or (isinstance(raw, float) and pd.isna(raw)) else str(raw)
        if name not in seen:
            result = matcher.find_best_matches(name, minimum_score=minimum_score)
            seen[name] = _classify(name, result)
        rows.append(dict(seen[name]))
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def summarize(df: pd.DataFrame) -> dict:
    counts = df["status"].value_counts()
    stats = {status: int(counts.get(status, 0)) for status in STATUSES}
    stats["total"] = len(df)
    return stats


def run_reconciliation(
    db_path: str,
    input_path: str,
    output_path: str,
    column: str = "name",
    config: MatcherConfig | None = None,
) -> dict:
    """Reconcile the names in one CSV column and write the results as CSV.

    Returns a stats dict with a count per status plus the total.
    """
    config = config or MatcherConfig(db_path=db_path)
    if not Path(db_path).is_file():
        raise ValueError(f"Catalog database not found: {db_path}")
    names_df = pd.read_csv(input_path, dtype=str, keep_default_na=False)
    if column not in names_df.columns:
        raise ValueError(
            f"Column {column!r} not found in {input_path}; "
            f"available: {', '.join(names_df.columns)}"
        )

    conn = connect(db_path)
    try:
        provider = SqliteCandidateProvider(conn, similarity_threshold=config.trigram_threshold)
        matcher = PlantMatcher(provider, cache=ParsedNameCache(config.cache_size), config=config)
        results = reconcile_names(matcher, names_df[column].tolist())
    finally:
        conn.close()

    results.to_csv(output_path, index=False)
    stats = summarize(results)
    logger.info("Reconciled %d names from %s into %s", stats["total"], input_path, output_path)
    return stats


def main():
    """CLI entry point for import reconciliation."""
    parser = argparse.ArgumentParser(
        description="Match imported plant names against the plant catalog"
    )
    parser.add_argument("--db", default=None, help="Path to the catalog SQLite database")
    parser.add_argument("--input", required=True, help="CSV file with plant names")
    parser.add_argument("--output", required=True, help="CSV file to write matches to")
    parser.add_argument("--column", default="name", help="Name column in the input (default: name)")
    parser.add_argument("--min-score", type=float, default=None, help="Minimum score to keep")
    parser.add_argument("--limit", type=int, default=None, help="Max suggestions per name")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    config = MatcherConfig.from_env()
    if args.db:
        config.db_path = args.db
    if args.min_score is not None:
        config.minimum_score = args.min_score
    if args.limit is not None:
        config.limit = args.limit

    try:
        stats = run_reconciliation(config.db_path, args.input, args.output, args.column, config)
    except ValueError as e:
        parser.error(str(e))

    print("\nReconciliation complete:")
    print(f"  Total names:  {stats['total']}")
    print(f"  Linked:       {stats['linked']}")
    print(f"  Ambiguous:    {stats['ambiguous']}")
    print(f"  Suggested:    {stats['suggested']}")
    print(f"  Unmatched:    {stats['unmatched']}")


if __name__ == "__main__":
    main()
