from dataclasses import replace

import pytest

from cornbreeder.loci import (
    DEFAULT_LOCUS_MAP,
    LOCUS_COUNT,
    LOCUS_EFFECTS,
    PLEIOTROPIC_HEIGHT_YIELD,
    PLEIOTROPIC_YIELD_RESISTANCE,
    LocusMap,
    RelationKind,
    Trait,
    parse_trait,
    pleiotropic_relation,
    trait_group,
)


def test_every_locus_belongs_to_exactly_one_group():
    counts = {trait: 0 for trait in Trait}
    for locus in range(LOCUS_COUNT):
        counts[trait_group(locus)] += 1
    assert LOCUS_COUNT == 24
    assert counts == {Trait.YIELD: 10, Trait.RESISTANCE: 7, Trait.HEIGHT: 7}
    assert sorted(sum((DEFAULT_LOCUS_MAP.loci_for(t) for t in Trait), ())) == list(range(LOCUS_COUNT))


def test_pleiotropic_blocks_are_inside_their_primary_group():
    trade_off = pleiotropic_relation(8)
    assert trade_off is not None
    assert trade_off.kind is RelationKind.TRADE_OFF
    assert trade_off.partner is Trait.RESISTANCE
    assert pleiotropic_relation(9) is trade_off

    link = pleiotropic_relation(21)
    assert link is not None
    assert link.kind is RelationKind.POSITIVE_LINK
    assert link.primary is Trait.HEIGHT
    assert link.partner is Trait.YIELD

    for block in DEFAULT_LOCUS_MAP.linked_blocks():
        assert all(trait_group(locus) is block.primary for locus in block.loci)
    assert pleiotropic_relation(0) is None
    assert 8 not in DEFAULT_LOCUS_MAP.unlinked_loci()
    assert len(DEFAULT_LOCUS_MAP.unlinked_loci()) == LOCUS_COUNT - 4


@pytest.mark.parametrize("locus", [-1, LOCUS_COUNT, 100])
def test_out_of_range_locus_is_rejected(locus):
    with pytest.raises(ValueError):
        trait_group(locus)
    with pytest.raises(ValueError):
        pleiotropic_relation(locus)


def test_block_outside_primary_group_is_rejected():
    misplaced = replace(PLEIOTROPIC_YIELD_RESISTANCE, loci=(10, 11))
    with pytest.raises(ValueError, match="not inside"):
        LocusMap(DEFAULT_LOCUS_MAP.groups, LOCUS_EFFECTS, (misplaced,))


def test_overlapping_groups_are_rejected():
    groups = ((Trait.YIELD, tuple(range(0, 12))), (Trait.RESISTANCE, tuple(range(10, 24))))
    with pytest.raises(ValueError, match="more than one"):
        LocusMap(groups, LOCUS_EFFECTS)


def test_block_with_same_partner_is_rejected():
    selfish = replace(PLEIOTROPIC_HEIGHT_YIELD, partner=Trait.HEIGHT)
    with pytest.raises(ValueError):
        LocusMap(DEFAULT_LOCUS_MAP.groups, LOCUS_EFFECTS, (selfish,))


def test_with_coefficients_returns_a_new_map():
    tuned = DEFAULT_LOCUS_MAP.with_coefficients(trade_off=0.9, positive_link=0.1, linkage=1.0)
    assert tuned.pleiotropic_relation(8).coefficient == 0.9
    assert tuned.pleiotropic_relation(20).coefficient == 0.1
    assert all(block.linkage == 1.0 for block in tuned.linked_blocks())
    assert DEFAULT_LOCUS_MAP.pleiotropic_relation(8).coefficient == PLEIOTROPIC_YIELD_RESISTANCE.coefficient


def test_parse_trait():
    assert parse_trait("Yield") is Trait.YIELD
    assert parse_trait(Trait.HEIGHT) is Trait.HEIGHT
    with pytest.raises(ValueError, match="Unknown trait"):
        parse_trait("sweetness")
