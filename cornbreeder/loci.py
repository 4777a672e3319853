"""Static locus map: trait groups, additive effects and pleiotropic blocks."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Trait(str, Enum):
    YIELD = "yield"
    RESISTANCE = "resistance"
    HEIGHT = "height"


TRAITS: Tuple[Trait, ...] = (Trait.YIELD, Trait.RESISTANCE, Trait.HEIGHT)


class RelationKind(str, Enum):
    TRADE_OFF = "trade_off"
    POSITIVE_LINK = "positive_link"


@dataclass(frozen=True)
class PleiotropicBlock:
    """A contiguous run of loci that also acts on a partner trait.

    ``coefficient`` scales the locus effect applied to ``partner`` (subtracted
    for trade-offs, added for positive links). ``linkage`` is the probability
    that a gamete carries the whole block from a single parental strand.
    """

    loci: Tuple[int, ...]
    kind: RelationKind
    primary: Trait
    partner: Trait
    coefficient: float
    linkage: float

    @property
    def sign(self) -> float:
        return -1.0 if self.kind is RelationKind.TRADE_OFF else 1.0

    def __contains__(self, locus: object) -> bool:
        return locus in self.loci


YIELD_LOCI: Tuple[int, ...] = tuple(range(0, 10))
RESISTANCE_LOCI: Tuple[int, ...] = tuple(range(10, 17))
HEIGHT_LOCI: Tuple[int, ...] = tuple(range(17, 24))

LOCUS_EFFECTS: Tuple[float, ...] = (
    # yield, chromosome 1
    1.6, 1.2, 1.0, 0.8, 1.4, 0.6, 1.0, 0.9, 1.5, 1.3,
    # resistance, chromosome 2
    1.2, 0.8, 1.0, 1.4, 0.6, 0.9, 1.1,
    # height, chromosome 3
    2.0, 1.6, 1.2, 1.8, 2.2, 1.4, 1.0,
)

DEFAULT_TRADE_OFF_COEFFICIENT = 0.6
DEFAULT_POSITIVE_LINK_COEFFICIENT = 0.5
DEFAULT_LINKAGE = 0.9

PLEIOTROPIC_YIELD_RESISTANCE = PleiotropicBlock(
    loci=(8, 9),
    kind=RelationKind.TRADE_OFF,
    primary=Trait.YIELD,
    partner=Trait.RESISTANCE,
    coefficient=DEFAULT_TRADE_OFF_COEFFICIENT,
    linkage=DEFAULT_LINKAGE,
)
PLEIOTROPIC_HEIGHT_YIELD = PleiotropicBlock(
    loci=(20, 21),
    kind=RelationKind.POSITIVE_LINK,
    primary=Trait.HEIGHT,
    partner=Trait.YIELD,
    coefficient=DEFAULT_POSITIVE_LINK_COEFFICIENT,
    linkage=DEFAULT_LINKAGE,
)


@dataclass(frozen=True)
class LocusMap:
    groups: Tuple[Tuple[Trait, Tuple[int, ...]], ...]
    effects: Tuple[float, ...]
    blocks: Tuple[PleiotropicBlock, ...] = ()
    _group_of: Dict[int, Trait] = field(init=False, repr=False, compare=False)
    _block_of: Dict[int, PleiotropicBlock] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        size = len(self.effects)
        if size == 0:
            raise ValueError("Locus map requires at least one locus")
        if any(effect <= 0 for effect in self.effects):
            raise ValueError("Locus effects must be positive")
        group_of: Dict[int, Trait] = {}
        for trait, loci in self.groups:
            for locus in loci:
                if locus in group_of:
                    raise ValueError(f"Locus {locus} belongs to more than one trait group")
                group_of[locus] = trait
        if set(group_of) != set(range(size)):
            raise ValueError("Every locus index must belong to exactly one trait group")
        block_of: Dict[int, PleiotropicBlock] = {}
        for block in self.blocks:
            if not block.loci:
                raise ValueError("Pleiotropic block must contain at least one locus")
            if list(block.loci) != list(range(block.loci[0], block.loci[0] + len(block.loci))):
                raise ValueError(f"Pleiotropic block {block.loci} is not contiguous")
            if any(group_of.get(locus) is not block.primary for locus in block.loci):
                raise ValueError(f"Pleiotropic block {block.loci} is not inside the {block.primary.value} group")
            if block.partner is block.primary:
                raise ValueError("Pleiotropic partner trait must differ from the primary trait")
            if block.coefficient < 0:
                raise ValueError("Pleiotropic coefficient must be non-negative")
            if not 0.0 <= block.linkage <= 1.0:
                raise ValueError("Linkage must be a probability")
            for locus in block.loci:
                if locus in block_of:
                    raise ValueError(f"Locus {locus} belongs to more than one pleiotropic block")
                block_of[locus] = block
        object.__setattr__(self, "_group_of", group_of)
        object.__setattr__(self, "_block_of", block_of)

    @property
    def size(self) -> int:
        return len(self.effects)

    def _check(self, locus: int) -> None:
        if not 0 <= locus < self.size:
            raise ValueError(f"Locus index {locus} outside 0..{self.size - 1}")

    def trait_group(self, locus: int) -> Trait:
        self._check(locus)
        return self._group_of[locus]

    def pleiotropic_relation(self, locus: int) -> Optional[PleiotropicBlock]:
        self._check(locus)
        return self._block_of.get(locus)

    def effect(self, locus: int) -> float:
        self._check(locus)
        return self.effects[locus]

    def loci_for(self, trait: Trait) -> Tuple[int, ...]:
        for group_trait, loci in self.groups:
            if group_trait is trait:
                return loci
        return ()

    def linked_blocks(self) -> Tuple[PleiotropicBlock, ...]:
        return self.blocks

    def unlinked_loci(self) -> List[int]:
        return [locus for locus in range(self.size) if locus not in self._block_of]

    def with_coefficients(
        self,
        *,
        trade_off: Optional[float] = None,
        positive_link: Optional[float] = None,
        linkage: Optional[float] = None,
    ) -> "LocusMap":
        blocks: List[PleiotropicBlock] = []
        for block in self.blocks:
            coefficient = block.coefficient
            if block.kind is RelationKind.TRADE_OFF and trade_off is not None:
                coefficient = trade_off
            elif block.kind is RelationKind.POSITIVE_LINK and positive_link is not None:
                coefficient = positive_link
            blocks.append(
                replace(
                    block,
                    coefficient=coefficient,
                    linkage=block.linkage if linkage is None else linkage,
                )
            )
        return LocusMap(self.groups, self.effects, tuple(blocks))


DEFAULT_LOCUS_MAP = LocusMap(
    groups=(
        (Trait.YIELD, YIELD_LOCI),
        (Trait.RESISTANCE, RESISTANCE_LOCI),
        (Trait.HEIGHT, HEIGHT_LOCI),
    ),
    effects=LOCUS_EFFECTS,
    blocks=(PLEIOTROPIC_YIELD_RESISTANCE, PLEIOTROPIC_HEIGHT_YIELD),
)

LOCUS_COUNT = DEFAULT_LOCUS_MAP.size


def trait_group(locus: int) -> Trait:
    return DEFAULT_LOCUS_MAP.trait_group(locus)


def pleiotropic_relation(locus: int) -> Optional[PleiotropicBlock]:
    return DEFAULT_LOCUS_MAP.pleiotropic_relation(locus)


def locus_labels(size: int = LOCUS_COUNT) -> List[str]:
    return [f"L{locus:02d}" for locus in range(size)]


def parse_trait(value: str | Trait) -> Trait:
    if isinstance(value, Trait):
        return value
    try:
        return Trait(value.lower())
    except ValueError:
        valid = ", ".join(trait.value for trait in TRAITS)
        raise ValueError(f"Unknown trait '{value}' (expected one of: {valid})") from None
