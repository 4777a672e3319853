"""Truncation selection of parents by trait or by a balanced selection index."""

from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Dict, List, Sequence

from .loci import Trait
from .phenotype import TraitValues
from .population import Plant, Population
from .utils import mean

# Smith-Hazel style index weights. Height enters on a third of its scale.
INDEX_WEIGHTS: Dict[Trait, float] = {
    Trait.YIELD: 0.5,
    Trait.RESISTANCE: 0.3,
    Trait.HEIGHT: 0.2,
}
HEIGHT_INDEX_DIVISOR = 3.0


class SelectionCriterion(str, Enum):
    YIELD = "yield"
    RESISTANCE = "resistance"
    HEIGHT = "height"
    INDEX = "index"


def selection_index(values: TraitValues) -> float:
    return (
        INDEX_WEIGHTS[Trait.YIELD] * values.grain_yield
        + INDEX_WEIGHTS[Trait.RESISTANCE] * values.resistance
        + INDEX_WEIGHTS[Trait.HEIGHT] * values.height / HEIGHT_INDEX_DIVISOR
    )


def selection_count(population_size: int, intensity: float) -> int:
    if not 0.0 < intensity <= 1.0:
        raise ValueError("Selection intensity must lie in (0, 1]")
    return min(population_size, max(2, math.ceil(population_size * intensity)))


def _score(criterion: SelectionCriterion, use_breeding_value: bool) -> Callable[[Plant], float]:
    def values(plant: Plant) -> TraitValues:
        return plant.breeding_value if use_breeding_value else plant.phenotype

    if criterion is SelectionCriterion.INDEX:
        return lambda plant: selection_index(values(plant))
    if criterion is SelectionCriterion.HEIGHT:
        # Dwarf selection: shorter plants rank first.
        return lambda plant: -values(plant).height
    trait = Trait(criterion.value)
    return lambda plant: values(plant).get(trait)


def select_parents(
    population: Population | Sequence[Plant],
    criterion: SelectionCriterion | str,
    intensity: float,
    *,
    use_breeding_value: bool = False,
) -> List[Plant]:
    """Keep the best ``ceil(N * intensity)`` plants (at least two).

    Ranking uses observed phenotypes, or genomic breeding values when
    ``use_breeding_value`` is set.
    """
    plants = list(population)
    if len(plants) < 2:
        raise ValueError("Selection requires a population of at least 2 plants")
    criterion = SelectionCriterion(criterion)
    count = selection_count(len(plants), intensity)
    ranked = sorted(plants, key=_score(criterion, use_breeding_value), reverse=True)
    return ranked[:count]


def selection_differential(
    population: Population | Sequence[Plant],
    selected: Sequence[Plant],
) -> Dict[Trait, float]:
    """Mean phenotype of the selected parents minus the population mean (S)."""
    plants = list(population)
    if not plants or not selected:
        raise ValueError("Selection differential requires a population and a non-empty selection")
    return {
        trait: mean([plant.phenotype.get(trait) for plant in selected])
        - mean([plant.phenotype.get(trait) for plant in plants])
        for trait in Trait
    }
