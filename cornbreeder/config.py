"""Engine parameters.

Every constant the breeding model depends on lives here so that callers can
override it explicitly instead of patching module globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from .loci import DEFAULT_LOCUS_MAP, LocusMap, Trait
from .utils import check_variance

POPULATION_SIZE = 50
INITIAL_ENV_VARIANCE = 1.0
FOUNDER_ALLELE_FREQUENCY = 0.5

BASE_VALUES: Dict[Trait, float] = {
    Trait.YIELD: 10.0,
    Trait.RESISTANCE: 4.0,
    Trait.HEIGHT: 8.0,
}

# Height is measured on a coarser scale, so its environmental noise is wider.
NOISE_SCALES: Dict[Trait, float] = {
    Trait.YIELD: 1.0,
    Trait.RESISTANCE: 1.0,
    Trait.HEIGHT: 1.5,
}


@dataclass(frozen=True)
class SimulationConfig:
    population_size: int = POPULATION_SIZE
    founder_allele_frequency: float = FOUNDER_ALLELE_FREQUENCY
    initial_env_variance: float = INITIAL_ENV_VARIANCE
    base_values: Dict[Trait, float] = field(default_factory=lambda: dict(BASE_VALUES))
    noise_scales: Dict[Trait, float] = field(default_factory=lambda: dict(NOISE_SCALES))
    locus_map: LocusMap = DEFAULT_LOCUS_MAP

    def __post_init__(self) -> None:
        if self.population_size < 2:
            raise ValueError("population_size must be at least 2")
        if not 0.0 <= self.founder_allele_frequency <= 1.0:
            raise ValueError("founder_allele_frequency must lie in [0, 1]")
        check_variance(self.initial_env_variance, "initial_env_variance")
        for trait in Trait:
            if trait not in self.base_values or trait not in self.noise_scales:
                raise ValueError(f"Missing base value or noise scale for trait '{trait.value}'")

    @property
    def locus_count(self) -> int:
        return self.locus_map.size


DEFAULT_CONFIG = SimulationConfig()
