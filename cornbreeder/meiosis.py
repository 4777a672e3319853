"""Gamete formation and crossing.

Unlinked loci assort independently. Loci inside a pleiotropic block are
inherited together: with probability ``block.linkage`` the gamete copies the
whole block from one parental strand, otherwise the block's loci segregate
like any other locus (a recombination event inside the block).
"""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Tuple, Union

from .genome import Genome
from .loci import DEFAULT_LOCUS_MAP, LocusMap
from .population import Plant

Parent = Union[Genome, Plant]

MATERNAL = 0
PATERNAL = 1


def _genome_of(parent: Parent) -> Genome:
    if isinstance(parent, Plant):
        return parent.genome
    if isinstance(parent, Genome):
        return parent
    raise ValueError(f"Expected a Genome or Plant, got {type(parent).__name__}")


def _strand_choices(rng: random.Random, locus_map: LocusMap) -> List[int]:
    fixed: Dict[int, int] = {}
    for block in locus_map.linked_blocks():
        if rng.random() < block.linkage:
            strand = rng.randrange(2)
            fixed.update((locus, strand) for locus in block.loci)
    return [fixed[locus] if locus in fixed else rng.randrange(2) for locus in range(locus_map.size)]


def form_gamete(
    genome: Genome,
    rng: Optional[random.Random] = None,
    locus_map: Optional[LocusMap] = None,
) -> Tuple[bool, ...]:
    rng = rng or random.Random()
    locus_map = locus_map or DEFAULT_LOCUS_MAP
    if len(genome) != locus_map.size:
        raise ValueError(f"Genome has {len(genome)} loci, expected {locus_map.size}")
    strands = _strand_choices(rng, locus_map)
    return tuple(
        pair.maternal if strand == MATERNAL else pair.paternal
        for pair, strand in zip(genome, strands)
    )


def cross(
    parent_a: Parent,
    parent_b: Parent,
    *,
    rng: Optional[random.Random] = None,
    locus_map: Optional[LocusMap] = None,
) -> Genome:
    """Produce one offspring genome.

    The maternal strand comes from a gamete of ``parent_a`` and the paternal
    strand from a gamete of ``parent_b``.
    """
    if parent_a is None or parent_b is None:
        raise ValueError("Both parents are required for a cross")
    genome_a = _genome_of(parent_a)
    genome_b = _genome_of(parent_b)
    if len(genome_a) != len(genome_b):
        raise ValueError(f"Parent genomes differ in locus count ({len(genome_a)} vs {len(genome_b)})")
    rng = rng or random.Random()
    locus_map = locus_map or DEFAULT_LOCUS_MAP
    maternal = form_gamete(genome_a, rng, locus_map)
    paternal = form_gamete(genome_b, rng, locus_map)
    return Genome.from_strands(maternal, paternal)
