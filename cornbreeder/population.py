"""Plants, populations and the founder generation."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .config import DEFAULT_CONFIG, SimulationConfig
from .genome import Genome
from .phenotype import TraitValues, evaluate
from .utils import check_variance

logger = logging.getLogger(__name__)

FOUNDER_GENERATION = 1


@dataclass(frozen=True)
class Plant:
    id: str
    generation: int
    genome: Genome
    phenotype: TraitValues
    breeding_value: TraitValues
    is_heterozygous: bool

    @property
    def heterozygosity(self) -> float:
        return self.genome.heterozygosity()


@dataclass(frozen=True)
class Population:
    generation: int
    plants: Tuple[Plant, ...]

    def __len__(self) -> int:
        return len(self.plants)

    def __iter__(self) -> Iterator[Plant]:
        return iter(self.plants)

    def __getitem__(self, index: int) -> Plant:
        return self.plants[index]

    @property
    def ids(self) -> List[str]:
        return [plant.id for plant in self.plants]

    def _index(self) -> Dict[str, Plant]:
        return {plant.id: plant for plant in self.plants}

    def get(self, plant_id: str) -> Plant:
        try:
            return self._index()[plant_id]
        except KeyError:
            raise KeyError(f"Plant '{plant_id}' not found in generation {self.generation}") from None

    def subset(self, plant_ids: Iterable[str]) -> List[Plant]:
        index = self._index()
        selected: List[Plant] = []
        for plant_id in plant_ids:
            if plant_id not in index:
                raise KeyError(f"Plant '{plant_id}' not found in generation {self.generation}")
            selected.append(index[plant_id])
        return selected


def plant_id(generation: int, index: int, rng: random.Random) -> str:
    return f"G{generation}-{index:03d}-{rng.getrandbits(24):06x}"


def make_plant(
    genome: Genome,
    generation: int,
    index: int,
    env_variance: float,
    rng: random.Random,
    config: Optional[SimulationConfig] = None,
) -> Plant:
    observed, values = evaluate(genome, env_variance, rng, config)
    return Plant(
        id=plant_id(generation, index, rng),
        generation=generation,
        genome=genome,
        phenotype=observed,
        breeding_value=values,
        is_heterozygous=genome.heterozygous_count() > 0,
    )


def random_founder_genome(rng: random.Random, config: Optional[SimulationConfig] = None) -> Genome:
    config = config or DEFAULT_CONFIG
    frequency = config.founder_allele_frequency
    maternal = [rng.random() < frequency for _ in range(config.locus_count)]
    paternal = [rng.random() < frequency for _ in range(config.locus_count)]
    return Genome.from_strands(maternal, paternal)


def create_initial_population(
    env_variance: float,
    *,
    rng: Optional[random.Random] = None,
    config: Optional[SimulationConfig] = None,
) -> Population:
    """Build the founder generation.

    Alleles are drawn independently at the configured founder frequency
    (0.5 by default, which maximises both heterozygosity and additive
    variance), so early selection has genetic variance to work on.
    """
    check_variance(env_variance)
    rng = rng or random.Random()
    config = config or DEFAULT_CONFIG
    plants = tuple(
        make_plant(random_founder_genome(rng, config), FOUNDER_GENERATION, index, env_variance, rng, config)
        for index in range(config.population_size)
    )
    logger.debug("Created founder population of %d plants (env variance %.2f)", len(plants), env_variance)
    return Population(generation=FOUNDER_GENERATION, plants=plants)
