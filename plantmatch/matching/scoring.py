"""Per-field comparison of two parsed plant names."""
from dataclasses import dataclass

from plantmatch.matching.name_parser import PlantNameComponents
from plantmatch.matching.similarity import DEFAULT_SCORER, similarity


@dataclass(frozen=True)
class ComponentMatchResult:
    search_value: str
    plant_value: str
    score: float
    # Which qualifier field won on each side (sort/brand cross-match only)
    search_field: str = ""
    plant_field: str = ""

    def to_dict(self) -> dict:
        result = {
            "search_value": self.search_value,
            "plant_value": self.plant_value,
            "score": self.score,
        }
        if self.search_field or self.plant_field:
            result["search_field"] = self.search_field
            result["plant_field"] = self.plant_field
        return result


@dataclass(frozen=True)
class ComponentScores:
    genus: ComponentMatchResult
    species: ComponentMatchResult
    sort_brand_name: ComponentMatchResult
    full_name: ComponentMatchResult

    def to_dict(self) -> dict:
        return {
            "genus": self.genus.to_dict(),
            "species": self.species.to_dict(),
            "sort_brand_name": self.sort_brand_name.to_dict(),
            "full_name": self.full_name.to_dict(),
        }


def score_field(search_value: str, plant_value: str, scorer: str = DEFAULT_SCORER) -> ComponentMatchResult:
    """Direct similarity of one field. Empty on either side scores 0."""
    if not search_value or not plant_value:
        return ComponentMatchResult(search_value, plant_value, 0.0)
    return ComponentMatchResult(
        search_value, plant_value, similarity(search_value, plant_value, scorer)
    )


def score_sort_brand(
    search: PlantNameComponents,
    plant: PlantNameComponents,
    scorer: str = DEFAULT_SCORER,
) -> ComponentMatchResult:
    """Cross-match sort names and brand names between the two names.

    Suppliers write the same cultivar either as 'Sort Name' or as a
    BRAND NAME, so every qualifier on one side is compared with every
    qualifier on the other and the best pair wins.

    - neither side has a qualifier: 1.0 (the dimension says nothing)
    - only one side has a qualifier: 0.0 (a specific cultivar vs. none)
    """
    search_items = search.qualifiers()
    plant_items = plant.qualifiers()

    if not search_items and not plant_items:
        return ComponentMatchResult("", "", 1.0)

    if not search_items or not plant_items:
        return ComponentMatchResult(
            ", ".join(value for _, value in search_items),
            ", ".join(value for _, value in plant_items),
            0.0,
        )

    best_score = 0.0
    best_search = search_items[0]
    best_plant = plant_items[0]
    for search_item in search_items:
        for plant_item in plant_items:
            score = similarity(search_item[1], plant_item[1], scorer)
            if score > best_score:
                best_score = score
                best_search = search_item
                best_plant = plant_item

    return ComponentMatchResult(
        search_value=best_search[1],
        plant_value=best_plant[1],
        score=best_score,
        search_field=best_search[0],
        plant_field=best_plant[0],
    )


def score_components(
    search: PlantNameComponents,
    plant: PlantNameComponents,
    scorer: str = DEFAULT_SCORER,
) -> ComponentScores:
    """Compare a parsed query with a parsed candidate name field by field."""
    return ComponentScores(
        genus=score_field(search.genus, plant.genus, scorer),
        species=score_field(search.species, plant.species, scorer),
        sort_brand_name=score_sort_brand(search, plant, scorer),
        full_name=score_field(search.full_name, plant.full_name, scorer),
    )
