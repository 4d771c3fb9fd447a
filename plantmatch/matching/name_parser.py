"""Decompose botanical plant names into genus, species and cultivar parts.

A catalog name such as ``Rosa gallica 'Charles de Mills'`` carries its
cultivar in single quotes, while nursery price lists often write the same
cultivar as a trade name in capitals (``Rosa KNOCKOUT``). The parser pulls
those qualifiers out first so the Linnaean binomial is whatever remains.
"""
import re
from dataclasses import dataclass

_SORT_NAME_RE = re.compile(r"'([^']+)'")
_CULTIVAR_RE = re.compile(r'"([^"]+)"')
# Words of 3+ capitals, optionally several in a row ("PINK DRIFT")
_BRAND_NAME_RE = re.compile(r"\b[A-ZÅÄÖ]{3,}(?:\s+[A-ZÅÄÖ]{3,})*\b")


@dataclass(frozen=True)
class PlantNameComponents:
    genus: str = ""
    species: str = ""
    sort_name: str = ""
    brand_name: str = ""
    cultivar: str = ""
    remaining: str = ""
    full_name: str = ""

    def qualifiers(self) -> list[tuple[str, str]]:
        """Non-empty (field, value) pairs that identify a cultivar."""
        items = [("sort_name", self.sort_name), ("brand_name", self.brand_name)]
        return [(field, value) for field, value in items if value]

    def to_dict(self) -> dict:
        return {
            "genus": self.genus,
            "species": self.species,
            "sort_name": self.sort_name,
            "brand_name": self.brand_name,
            "cultivar": self.cultivar,
            "remaining": self.remaining,
            "full_name": self.full_name,
        }


EMPTY_COMPONENTS = PlantNameComponents()


def _extract(pattern: re.Pattern, text: str, group: int = 0) -> tuple[str, str]:
    """Return (joined matches, text with matches removed)."""
    matches = [m.group(group) for m in pattern.finditer(text)]
    if not matches:
        return "", text
    return " ".join(matches), pattern.sub(" ", text).strip()


def parse_plant_name(name) -> PlantNameComponents:
    """Parse a raw plant name into its components.

    Order matters: quoted sort names, then double-quoted cultivars, then
    capitalised brand names are removed before the remaining words are
    split into genus, species and the rest. Every field is lowercased;
    ``full_name`` keeps the whole original name.

    Never raises. Empty or non-string input gives empty components.
    """
    if not name or not isinstance(name, str):
        return EMPTY_COMPONENTS

    original = name.strip()
    working = original

    sort_name, working = _extract(_SORT_NAME_RE, working, group=1)
    cultivar, working = _extract(_CULTIVAR_RE, working, group=1)
    brand_name, working = _extract(_BRAND_NAME_RE, working)

    words = working.split()
    genus = words[0] if words else ""
    species = words[1] if len(words) > 1 else ""
    remaining = " ".join(words[2:])

    return PlantNameComponents(
        genus=genus.lower(),
        species=species.lower(),
        sort_name=sort_name.lower(),
        brand_name=brand_name.lower(),
        cultivar=cultivar.lower(),
        remaining=remaining.lower(),
        full_name=original.lower(),
    )
