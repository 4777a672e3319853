"""CornBreeder: quantitative-genetics engine for selective maize breeding."""

from .breeding import breed_next_generation
from .config import SimulationConfig
from .genome import AllelePair, Genome
from .loci import DEFAULT_LOCUS_MAP, LocusMap, Trait
from .meiosis import cross
from .phenotype import TraitValues, breeding_value, phenotype
from .population import Plant, Population, create_initial_population
from .selection import SelectionCriterion, select_parents
from .simulation import BreedingProgram, GenerationResult
from .stats import PopulationStats, StatsHistory, calculate_stats

__all__ = [
    "AllelePair",
    "BreedingProgram",
    "DEFAULT_LOCUS_MAP",
    "GenerationResult",
    "Genome",
    "LocusMap",
    "Plant",
    "Population",
    "PopulationStats",
    "SelectionCriterion",
    "SimulationConfig",
    "StatsHistory",
    "Trait",
    "TraitValues",
    "breed_next_generation",
    "breeding_value",
    "calculate_stats",
    "create_initial_population",
    "cross",
    "phenotype",
    "select_parents",
]
