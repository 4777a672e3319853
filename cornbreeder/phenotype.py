"""Genotype-to-phenotype mapping and genomic breeding values (GEBV)."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from .config import DEFAULT_CONFIG, SimulationConfig
from .genome import Genome
from .loci import Trait
from .utils import check_variance


@dataclass(frozen=True)
class TraitValues:
    grain_yield: float
    resistance: float
    height: float

    def get(self, trait: Trait) -> float:
        if trait is Trait.YIELD:
            return self.grain_yield
        if trait is Trait.RESISTANCE:
            return self.resistance
        return self.height

    def to_dict(self) -> Dict[str, float]:
        return {
            Trait.YIELD.value: self.grain_yield,
            Trait.RESISTANCE.value: self.resistance,
            Trait.HEIGHT.value: self.height,
        }

    @classmethod
    def from_dict(cls, values: Mapping[str, float]) -> "TraitValues":
        try:
            return cls(
                grain_yield=float(values[Trait.YIELD.value]),
                resistance=float(values[Trait.RESISTANCE.value]),
                height=float(values[Trait.HEIGHT.value]),
            )
        except KeyError as exc:
            raise ValueError(f"Missing trait value {exc}") from None

    @classmethod
    def from_mapping(cls, values: Mapping[Trait, float]) -> "TraitValues":
        return cls(values[Trait.YIELD], values[Trait.RESISTANCE], values[Trait.HEIGHT])


def breeding_value(genome: Genome, config: Optional[SimulationConfig] = None) -> TraitValues:
    """Genotype-only trait values.

    Each locus adds ``effect * dosage`` to its own trait. Loci inside a
    pleiotropic block additionally push the partner trait by the same amount
    scaled by the block coefficient, downwards for a trade-off and upwards
    for a positive link.
    """
    config = config or DEFAULT_CONFIG
    locus_map = config.locus_map
    if len(genome) != locus_map.size:
        raise ValueError(f"Genome has {len(genome)} loci, expected {locus_map.size}")
    totals = {trait: config.base_values[trait] for trait in Trait}
    for locus, pair in enumerate(genome):
        if pair.dosage == 0:
            continue
        contribution = locus_map.effect(locus) * pair.dosage
        totals[locus_map.trait_group(locus)] += contribution
        block = locus_map.pleiotropic_relation(locus)
        if block is not None:
            totals[block.partner] += block.sign * block.coefficient * contribution
    return TraitValues.from_mapping(totals)


def environmental_deviation(
    env_variance: float,
    trait: Trait,
    rng: random.Random,
    config: Optional[SimulationConfig] = None,
) -> float:
    check_variance(env_variance)
    config = config or DEFAULT_CONFIG
    sd = math.sqrt(env_variance) * config.noise_scales[trait]
    if sd == 0:
        return 0.0
    return rng.gauss(0.0, sd)


def phenotype(
    breeding_values: TraitValues,
    env_variance: float,
    rng: Optional[random.Random] = None,
    config: Optional[SimulationConfig] = None,
) -> TraitValues:
    """Observed values: breeding value plus one environmental draw per trait."""
    rng = rng or random.Random()
    observed = {
        trait: breeding_values.get(trait) + environmental_deviation(env_variance, trait, rng, config)
        for trait in Trait
    }
    return TraitValues.from_mapping(observed)


def evaluate(
    genome: Genome,
    env_variance: float,
    rng: Optional[random.Random] = None,
    config: Optional[SimulationConfig] = None,
) -> Tuple[TraitValues, TraitValues]:
    values = breeding_value(genome, config)
    return phenotype(values, env_variance, rng, config), values
