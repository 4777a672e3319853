import pytest

from cornbreeder.genome import Genome
from cornbreeder.loci import LOCUS_COUNT
from cornbreeder.phenotype import TraitValues
from cornbreeder.population import Plant, Population


def build_plant(plant_id, phenotype, breeding_value=None, generation=1, dosages=None):
    dosages = dosages or [1] * LOCUS_COUNT
    genome = Genome.from_strands([d >= 1 for d in dosages], [d == 2 for d in dosages])
    return Plant(
        id=plant_id,
        generation=generation,
        genome=genome,
        phenotype=TraitValues(*phenotype),
        breeding_value=TraitValues(*(breeding_value or phenotype)),
        is_heterozygous=genome.heterozygous_count() > 0,
    )


@pytest.fixture
def plant_factory():
    return build_plant


@pytest.fixture
def small_population():
    plants = (
        build_plant("p1", (12.0, 5.0, 9.0), breeding_value=(11.0, 5.0, 9.0)),
        build_plant("p2", (15.0, 3.0, 7.0), breeding_value=(12.0, 3.0, 8.0)),
        build_plant("p3", (10.0, 7.0, 12.0), breeding_value=(14.0, 6.0, 11.0)),
        build_plant("p4", (13.0, 6.0, 6.0), breeding_value=(13.0, 6.0, 6.0)),
        build_plant("p5", (9.0, 4.0, 10.0), breeding_value=(9.0, 4.0, 10.0)),
    )
    return Population(generation=1, plants=plants)
