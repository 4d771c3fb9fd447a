"""Plant name sanitization for exact and trigram comparison."""
import re
import unicodedata

# Quote styles used around cultivar names
_QUOTES_RE = re.compile(r"['\"`´‘’“”]")
_DISALLOWED_RE = re.compile(r"[^\w\s\-.]")


def _fold_accents(name: str) -> str:
    """Strip combining marks: å -> a, ö -> o, ï -> i."""
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def sanitize_plant_name(name: str | None) -> str:
    """Normalize a plant name for case and punctuation insensitive lookup.

    Lowercases, folds accents and Swedish letters, drops quote marks and
    other punctuation (hyphens and periods are kept), collapses whitespace.

    Examples:
        "Pinus cembra 'Stricta'"    -> "pinus cembra stricta"
        "Acer platanoïdes"          -> "acer platanoides"
        "Rosa  'Queen  Elizabeth'"  -> "rosa queen elizabeth"
    """
    if not name:
        return ""
    name = _fold_accents(name.lower())
    name = name.replace("–", "-").replace("—", "-")
    name = _QUOTES_RE.sub("", name)
    name = _DISALLOWED_RE.sub("", name)
    name = re.sub(r"\s+", " ", name).strip()
    return name
