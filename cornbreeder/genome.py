"""Diploid genome representation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Tuple


@dataclass(frozen=True)
class AllelePair:
    """Presence of the dominant allele on the maternal and paternal strand."""

    maternal: bool
    paternal: bool

    @property
    def dosage(self) -> int:
        return int(self.maternal) + int(self.paternal)

    @property
    def is_heterozygous(self) -> bool:
        return self.maternal != self.paternal

    @property
    def notation(self) -> str:
        return {2: "AA", 1: "Aa", 0: "aa"}[self.dosage]


@dataclass(frozen=True)
class Genome:
    """Ordered allele pairs, one per locus.

    Dosages are always derived from the pairs rather than stored, so the two
    views of the genotype can never disagree.
    """

    diploid: Tuple[AllelePair, ...]

    @classmethod
    def from_strands(cls, maternal: Sequence[bool], paternal: Sequence[bool]) -> "Genome":
        if len(maternal) != len(paternal):
            raise ValueError("Maternal and paternal strands must have the same length")
        return cls(tuple(AllelePair(bool(m), bool(p)) for m, p in zip(maternal, paternal)))

    @classmethod
    def from_pairs(cls, pairs: Iterable[Sequence[bool]]) -> "Genome":
        return cls(tuple(AllelePair(bool(m), bool(p)) for m, p in pairs))

    def __len__(self) -> int:
        return len(self.diploid)

    def __iter__(self) -> Iterator[AllelePair]:
        return iter(self.diploid)

    def __getitem__(self, locus: int) -> AllelePair:
        return self.diploid[locus]

    @property
    def loci(self) -> Tuple[int, ...]:
        return tuple(pair.dosage for pair in self.diploid)

    @property
    def maternal(self) -> Tuple[bool, ...]:
        return tuple(pair.maternal for pair in self.diploid)

    @property
    def paternal(self) -> Tuple[bool, ...]:
        return tuple(pair.paternal for pair in self.diploid)

    def dosage(self, locus: int) -> int:
        return self.diploid[locus].dosage

    def heterozygous_count(self) -> int:
        return sum(1 for pair in self.diploid if pair.is_heterozygous)

    def heterozygosity(self) -> float:
        if not self.diploid:
            raise ValueError("Cannot compute heterozygosity of an empty genome")
        return self.heterozygous_count() / len(self.diploid)

    def to_pairs(self) -> List[List[bool]]:
        return [[pair.maternal, pair.paternal] for pair in self.diploid]


def dosage(genome: Genome, locus: int) -> int:
    return genome.dosage(locus)


def heterozygosity(genome: Genome) -> float:
    return genome.heterozygosity()
