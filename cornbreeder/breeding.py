"""Generation advancement: pair the selected parents and fill the next population."""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Tuple

from .config import DEFAULT_CONFIG, SimulationConfig
from .meiosis import cross
from .population import Plant, Population, make_plant
from .utils import check_variance

logger = logging.getLogger(__name__)

MIN_PARENTS = 2


def validate_parents(parents: Sequence[Plant]) -> None:
    if parents is None or len(parents) < MIN_PARENTS:
        count = 0 if parents is None else len(parents)
        raise ValueError(f"At least {MIN_PARENTS} parents are required to breed, got {count}")
    if len({parent.id for parent in parents}) < MIN_PARENTS:
        raise ValueError(f"At least {MIN_PARENTS} distinct parents are required to breed")


def mating_pairs(parents: Sequence[Plant], count: int, rng: random.Random) -> List[Tuple[Plant, Plant]]:
    """Draw ``count`` pairs of distinct parents uniformly, with replacement across pairs.

    ``random.sample`` returns the pair in random order, which decides which
    parent contributes the maternal strand.
    """
    validate_parents(parents)
    unique = list({parent.id: parent for parent in parents}.values())
    pairs: List[Tuple[Plant, Plant]] = []
    for _ in range(count):
        mother, father = rng.sample(unique, 2)
        pairs.append((mother, father))
    return pairs


def breed_next_generation(
    parents: Sequence[Plant],
    generation: int,
    env_variance: float,
    *,
    rng: Optional[random.Random] = None,
    config: Optional[SimulationConfig] = None,
) -> Population:
    """Cross the selected parents into a full offspring population.

    ``generation`` is the parents' generation; offspring are stamped with
    ``generation + 1`` and evaluated under ``env_variance``.
    """
    validate_parents(parents)
    check_variance(env_variance)
    rng = rng or random.Random()
    config = config or DEFAULT_CONFIG
    offspring_generation = generation + 1
    offspring = []
    for index, (mother, father) in enumerate(mating_pairs(parents, config.population_size, rng)):
        genome = cross(mother, father, rng=rng, locus_map=config.locus_map)
        offspring.append(make_plant(genome, offspring_generation, index, env_variance, rng, config))
    logger.debug(
        "Bred generation %d: %d offspring from %d parents (env variance %.2f)",
        offspring_generation,
        len(offspring),
        len(parents),
        env_variance,
    )
    return Population(generation=offspring_generation, plants=tuple(offspring))
