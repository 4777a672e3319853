"""A breeding program: one population, its history and the current environment.

Session state is owned by a ``BreedingProgram`` instance and passed
explicitly into the engine functions. A program is meant to have a single caller at a time.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .advisor import (
    DEFAULT_SCENARIO,
    Scenario,
    request_analysis,
    request_scenario,
    weather_for,
)
from .breeding import MIN_PARENTS, breed_next_generation
from .config import DEFAULT_CONFIG, SimulationConfig
from .population import FOUNDER_GENERATION, Plant, Population, create_initial_population
from .selection import SelectionCriterion, select_parents
from .stats import PopulationStats, StatsHistory, calculate_stats

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    "F0 population initialized with high genetic variance. Compare phenotypes with "
    "GEBVs and mind the trait linkages when choosing parents."
)


@dataclass(frozen=True)
class GenerationResult:
    population: Population
    stats: PopulationStats
    scenario: Scenario
    analysis: str

    @property
    def generation(self) -> int:
        return self.population.generation

    @property
    def weather(self) -> str:
        return weather_for(self.scenario.env_variance)


class BreedingProgram:
    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        advisor=None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.rng = rng or random.Random()
        self.advisor = advisor
        self.reset()

    @property
    def generation(self) -> int:
        return self.population.generation

    @property
    def env_variance(self) -> float:
        return self.scenario.env_variance

    @property
    def weather(self) -> str:
        return weather_for(self.env_variance)

    @property
    def default_scenario(self) -> Scenario:
        return Scenario(DEFAULT_SCENARIO.description, self.config.initial_env_variance)

    def reset(self) -> GenerationResult:
        self.scenario = self.default_scenario
        self.population = create_initial_population(self.env_variance, rng=self.rng, config=self.config)
        stats = calculate_stats(self.population, FOUNDER_GENERATION)
        self.history = StatsHistory([stats])
        self.analysis = WELCOME_MESSAGE
        logger.info(
            "Breeding program reset: %d founders, env variance %.2f",
            len(self.population),
            self.env_variance,
        )
        return GenerationResult(self.population, stats, self.scenario, self.analysis)

    def select(
        self,
        criterion: SelectionCriterion | str,
        intensity: float,
        *,
        use_breeding_value: bool = False,
    ) -> List[Plant]:
        return select_parents(self.population, criterion, intensity, use_breeding_value=use_breeding_value)

    def breed(self, parent_ids: Iterable[str]) -> GenerationResult:
        """Breed the next generation from the given parents of the current one.

        The program itself is left untouched until the result is passed to
        ``commit``, so a caller can persist the result first. The scenario and
        narration come from the advisor when one is configured; its failures
        fall back to the default environment and a static message.
        """
        ids = list(dict.fromkeys(parent_ids))
        if len(ids) < MIN_PARENTS:
            raise ValueError(f"Select at least {MIN_PARENTS} parents to breed, got {len(ids)}")
        parents = self.population.subset(ids)

        next_generation = self.generation + 1
        scenario = request_scenario(self.advisor, next_generation, default=self.default_scenario)
        offspring = breed_next_generation(
            parents,
            self.generation,
            scenario.env_variance,
            rng=self.rng,
            config=self.config,
        )
        stats = calculate_stats(offspring, offspring.generation)
        analysis = request_analysis(self.advisor, list(self.history) + [stats], next_generation)
        logger.debug("Bred generation %d from %d parents", next_generation, len(parents))
        return GenerationResult(offspring, stats, scenario, analysis)

    def commit(self, result: GenerationResult) -> None:
        if result.generation != self.generation + 1:
            raise ValueError(
                f"Cannot commit generation {result.generation} on top of generation {self.generation}"
            )
        self.history.append(result.stats)
        self.population = result.population
        self.scenario = result.scenario
        self.analysis = result.analysis
        logger.info(
            "Advanced to generation %d (%s, env variance %.2f)",
            result.generation,
            result.scenario.description,
            result.scenario.env_variance,
        )

    def advance(self, parent_ids: Iterable[str]) -> GenerationResult:
        result = self.breed(parent_ids)
        self.commit(result)
        return result

    def advance_selected(
        self,
        criterion: SelectionCriterion | str,
        intensity: float,
        *,
        use_breeding_value: bool = False,
    ) -> GenerationResult:
        parents = self.select(criterion, intensity, use_breeding_value=use_breeding_value)
        return self.advance(plant.id for plant in parents)
