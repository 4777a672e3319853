"""Per-generation population statistics and the append-only history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from .loci import Trait
from .phenotype import TraitValues
from .population import Plant, Population
from .utils import mean, pearson_correlation, variance


@dataclass(frozen=True)
class PopulationStats:
    generation: int
    size: int
    mean: TraitValues
    variance: TraitValues
    mean_breeding_value: TraitValues
    breeding_value_variance: TraitValues
    heritability: TraitValues
    mean_heterozygosity: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generation": self.generation,
            "size": self.size,
            "mean": self.mean.to_dict(),
            "variance": self.variance.to_dict(),
            "mean_breeding_value": self.mean_breeding_value.to_dict(),
            "breeding_value_variance": self.breeding_value_variance.to_dict(),
            "heritability": self.heritability.to_dict(),
            "mean_heterozygosity": self.mean_heterozygosity,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PopulationStats":
        return cls(
            generation=int(data["generation"]),
            size=int(data["size"]),
            mean=TraitValues.from_dict(data["mean"]),
            variance=TraitValues.from_dict(data["variance"]),
            mean_breeding_value=TraitValues.from_dict(data["mean_breeding_value"]),
            breeding_value_variance=TraitValues.from_dict(data["breeding_value_variance"]),
            heritability=TraitValues.from_dict(data["heritability"]),
            mean_heterozygosity=float(data["mean_heterozygosity"]),
        )


def _column(plants: Sequence[Plant], trait: Trait, *, use_breeding_value: bool) -> List[float]:
    if use_breeding_value:
        return [plant.breeding_value.get(trait) for plant in plants]
    return [plant.phenotype.get(trait) for plant in plants]


def calculate_stats(population: Population | Sequence[Plant], generation: int) -> PopulationStats:
    """Summarise one generation.

    Variances are population variances (ddof=0), so a single plant yields 0.
    Realised heritability is var(GEBV) / var(phenotype), reported as 0 when
    the phenotypic variance vanishes.
    """
    plants = list(population)
    if not plants:
        raise ValueError("Cannot compute statistics for an empty population")
    means: Dict[Trait, float] = {}
    variances: Dict[Trait, float] = {}
    bv_means: Dict[Trait, float] = {}
    bv_variances: Dict[Trait, float] = {}
    heritability: Dict[Trait, float] = {}
    for trait in Trait:
        observed = _column(plants, trait, use_breeding_value=False)
        genetic = _column(plants, trait, use_breeding_value=True)
        means[trait] = mean(observed)
        variances[trait] = variance(observed)
        bv_means[trait] = mean(genetic)
        bv_variances[trait] = variance(genetic)
        heritability[trait] = min(1.0, bv_variances[trait] / variances[trait]) if variances[trait] > 0 else 0.0
    return PopulationStats(
        generation=generation,
        size=len(plants),
        mean=TraitValues.from_mapping(means),
        variance=TraitValues.from_mapping(variances),
        mean_breeding_value=TraitValues.from_mapping(bv_means),
        breeding_value_variance=TraitValues.from_mapping(bv_variances),
        heritability=TraitValues.from_mapping(heritability),
        mean_heterozygosity=mean([plant.heterozygosity for plant in plants]),
    )


class StatsHistory:
    """Append-only record of generation statistics, ordered by generation."""

    def __init__(self, entries: Optional[Sequence[PopulationStats]] = None) -> None:
        self._entries: List[PopulationStats] = []
        for entry in entries or ():
            self.append(entry)

    def append(self, stats: PopulationStats) -> None:
        if self._entries and stats.generation <= self._entries[-1].generation:
            raise ValueError(
                f"History is ordered by generation: cannot append {stats.generation} "
                f"after {self._entries[-1].generation}"
            )
        self._entries.append(stats)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PopulationStats]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> PopulationStats:
        return self._entries[index]

    @property
    def first(self) -> PopulationStats:
        if not self._entries:
            raise ValueError("History is empty")
        return self._entries[0]

    @property
    def latest(self) -> PopulationStats:
        if not self._entries:
            raise ValueError("History is empty")
        return self._entries[-1]

    def genetic_gain(self, trait: Trait) -> float:
        """Change in mean breeding value since the first recorded generation."""
        return self.latest.mean_breeding_value.get(trait) - self.first.mean_breeding_value.get(trait)

    def to_records(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self._entries]

    @classmethod
    def from_records(cls, records: Sequence[Mapping[str, Any]]) -> "StatsHistory":
        return cls([PopulationStats.from_dict(record) for record in records])


def trait_correlation(
    population: Population | Sequence[Plant],
    trait_a: Trait,
    trait_b: Trait,
    *,
    use_breeding_value: bool = True,
) -> float:
    plants = list(population)
    return pearson_correlation(
        _column(plants, trait_a, use_breeding_value=use_breeding_value),
        _column(plants, trait_b, use_breeding_value=use_breeding_value),
    )


def locus_summary(population: Population | Sequence[Plant]) -> List[Dict[str, float]]:
    """Dominant allele frequency and heterozygosity for each locus."""
    plants = list(population)
    if not plants:
        raise ValueError("Cannot summarise an empty population")
    n_loci = len(plants[0].genome)
    summary: List[Dict[str, float]] = []
    for locus in range(n_loci):
        pairs = [plant.genome[locus] for plant in plants]
        frequency = sum(pair.dosage for pair in pairs) / (2 * len(pairs))
        observed = sum(1 for pair in pairs if pair.is_heterozygous) / len(pairs)
        summary.append(
            {
                "locus": float(locus),
                "allele_frequency": frequency,
                "observed_heterozygosity": observed,
                "expected_heterozygosity": 2 * frequency * (1 - frequency),
            }
        )
    return summary
