import random

import pytest

from cornbreeder.config import BASE_VALUES, SimulationConfig
from cornbreeder.genome import Genome
from cornbreeder.loci import DEFAULT_LOCUS_MAP, LOCUS_COUNT, RelationKind, Trait
from cornbreeder.phenotype import TraitValues, breeding_value, environmental_deviation, evaluate, phenotype


def _genome(dosages):
    return Genome.from_strands([d >= 1 for d in dosages], [d == 2 for d in dosages])


def _random_genome(rng):
    return _genome([rng.randint(0, 2) for _ in range(LOCUS_COUNT)])


def test_null_genome_has_base_breeding_values():
    values = breeding_value(_genome([0] * LOCUS_COUNT))
    assert values == TraitValues.from_mapping(BASE_VALUES)


def test_trade_off_locus_contribution():
    dosages = [0] * LOCUS_COUNT
    dosages[8] = 2
    values = breeding_value(_genome(dosages))
    assert values.grain_yield == pytest.approx(BASE_VALUES[Trait.YIELD] + 2 * 1.5)
    assert values.resistance == pytest.approx(BASE_VALUES[Trait.RESISTANCE] - 0.6 * 2 * 1.5)
    assert values.height == pytest.approx(BASE_VALUES[Trait.HEIGHT])


def test_breeding_value_ignores_environmental_variance():
    rng = random.Random(3)
    genome = _random_genome(rng)
    _, calm = evaluate(genome, 0.0, rng)
    _, stormy = evaluate(genome, 25.0, rng)
    assert calm == stormy == breeding_value(genome)


def test_phenotype_is_exact_without_environmental_variance():
    rng = random.Random(5)
    genome = _random_genome(rng)
    observed, values = evaluate(genome, 0.0, rng)
    assert observed == values


def test_phenotype_varies_with_environmental_variance():
    rng = random.Random(11)
    values = breeding_value(_random_genome(rng))
    first = phenotype(values, 2.0, rng)
    second = phenotype(values, 2.0, rng)
    assert first != second
    assert first != values


@pytest.mark.parametrize("env_variance", [-0.1, float("nan"), float("inf")])
def test_invalid_variance_is_rejected(env_variance):
    with pytest.raises(ValueError):
        environmental_deviation(env_variance, Trait.YIELD, random.Random(0))
    with pytest.raises(ValueError):
        phenotype(TraitValues(10.0, 4.0, 8.0), env_variance, random.Random(0))


def test_pleiotropic_loci_respect_relation_direction():
    rng = random.Random(21)
    for _ in range(25):
        dosages = [rng.randint(0, 2) for _ in range(LOCUS_COUNT)]
        for block in DEFAULT_LOCUS_MAP.linked_blocks():
            for locus in block.loci:
                if dosages[locus] == 2:
                    continue
                lower = breeding_value(_genome(dosages))
                raised = list(dosages)
                raised[locus] += 1
                higher = breeding_value(_genome(raised))
                primary_delta = higher.get(block.primary) - lower.get(block.primary)
                partner_delta = higher.get(block.partner) - lower.get(block.partner)
                if block.kind is RelationKind.TRADE_OFF:
                    assert not (primary_delta > 0 and partner_delta > 0)
                    assert partner_delta < 0
                else:
                    assert not (primary_delta < 0 and partner_delta < 0)
                    assert partner_delta > 0


def test_custom_coefficients_change_the_cross_trait_effect():
    config = SimulationConfig(locus_map=DEFAULT_LOCUS_MAP.with_coefficients(trade_off=0.0))
    dosages = [0] * LOCUS_COUNT
    dosages[9] = 2
    values = breeding_value(_genome(dosages), config)
    assert values.resistance == pytest.approx(BASE_VALUES[Trait.RESISTANCE])


def test_genome_of_wrong_size_is_rejected():
    with pytest.raises(ValueError):
        breeding_value(_genome([1, 1, 1]))


def test_trait_values_dict_round_trip():
    values = TraitValues(12.5, 3.25, 20.0)
    assert values.to_dict() == {"yield": 12.5, "resistance": 3.25, "height": 20.0}
    assert TraitValues.from_dict(values.to_dict()) == values
    with pytest.raises(ValueError):
        TraitValues.from_dict({"yield": 1.0})
