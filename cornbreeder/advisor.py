"""Optional advisory collaborators: environmental scenarios and narration.

The engine never depends on these succeeding. ``request_scenario`` and
``request_analysis`` absorb every provider failure and return the static
fallbacks, so a breeding cycle can always complete offline.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from .config import INITIAL_ENV_VARIANCE
from .loci import Trait
from .stats import PopulationStats
from .utils import check_variance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scenario:
    description: str
    env_variance: float


DEFAULT_SCENARIO = Scenario("Normal Conditions", INITIAL_ENV_VARIANCE)
FALLBACK_ANALYSIS = "Analysis unavailable. Continue with phenotypic selection."

SCENARIOS = (
    Scenario("Normal Conditions", 1.0),
    Scenario("Ideal growing season with steady rainfall", 0.6),
    Scenario("Mild drought during flowering", 1.8),
    Scenario("Heat wave and uneven irrigation", 2.4),
    Scenario("Severe storms and waterlogged fields", 3.0),
    Scenario("Leaf blight outbreak across the trial plots", 2.2),
)


class ScenarioProvider(Protocol):
    def generate_scenario(self, generation: int) -> Scenario:
        ...


class AnalysisProvider(Protocol):
    def analyze(self, history: Sequence[PopulationStats], generation: int) -> str:
        ...


def weather_for(env_variance: float) -> str:
    if env_variance < 1.5:
        return "sunny"
    if env_variance < 2.5:
        return "cloudy"
    return "rainy"


class OfflineAdvisor:
    """Table-driven scenarios and a rule-based commentary on the stats history."""

    def __init__(self, rng: Optional[random.Random] = None, scenarios: Sequence[Scenario] = SCENARIOS) -> None:
        if not scenarios:
            raise ValueError("OfflineAdvisor needs at least one scenario")
        self.rng = rng or random.Random()
        self.scenarios = tuple(scenarios)

    def generate_scenario(self, generation: int) -> Scenario:
        return self.rng.choice(self.scenarios)

    def analyze(self, history: Sequence[PopulationStats], generation: int) -> str:
        if not history:
            return FALLBACK_ANALYSIS
        latest = history[-1]
        if len(history) == 1:
            return (
                f"F{generation}: founder population with mean heterozygosity "
                f"{latest.mean_heterozygosity:.0%}. Plenty of genetic variance to select on."
            )
        previous = history[-2]
        parts = [f"F{generation}:"]
        for trait in Trait:
            delta = latest.mean_breeding_value.get(trait) - previous.mean_breeding_value.get(trait)
            parts.append(f"{trait.value} GEBV {delta:+.2f} (h2 {latest.heritability.get(trait):.2f});")
        if latest.mean_heterozygosity < 0.15:
            parts.append("Heterozygosity is low, consider widening the parent pool.")
        elif latest.mean_breeding_value.get(Trait.RESISTANCE) < previous.mean_breeding_value.get(Trait.RESISTANCE):
            parts.append("Resistance is slipping; watch the yield/resistance linkage on chromosome 1.")
        return " ".join(parts)


def request_scenario(
    provider: Optional[ScenarioProvider],
    generation: int,
    default: Scenario = DEFAULT_SCENARIO,
) -> Scenario:
    if provider is None:
        return default
    try:
        scenario = provider.generate_scenario(generation)
        if scenario is None:
            raise ValueError("Scenario provider returned no scenario")
        check_variance(scenario.env_variance, "Scenario variance")
    except Exception:
        logger.warning("Scenario provider failed for generation %d; using defaults", generation, exc_info=True)
        return default
    return scenario


def request_analysis(
    provider: Optional[AnalysisProvider],
    history: Sequence[PopulationStats],
    generation: int,
) -> str:
    if provider is None:
        return FALLBACK_ANALYSIS
    try:
        text = provider.analyze(list(history), generation)
    except Exception:
        logger.warning("Analysis provider failed for generation %d", generation, exc_info=True)
        return FALLBACK_ANALYSIS
    return text or FALLBACK_ANALYSIS
