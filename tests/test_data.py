import csv
import json
import random
from pathlib import Path

import pytest

from cornbreeder.config import SimulationConfig
from cornbreeder.data import (
    history_header,
    plant_from_record,
    plant_to_record,
    population_from_records,
    population_to_records,
    write_genotype_csv,
    write_history_csv,
    write_phenotype_csv,
)
from cornbreeder.population import create_initial_population
from cornbreeder.stats import StatsHistory, calculate_stats


@pytest.fixture
def population():
    return create_initial_population(1.2, rng=random.Random(31), config=SimulationConfig(population_size=6))


def _read_rows(path: Path):
    with open(path, newline="") as handle:
        return list(csv.reader(handle))


def test_snapshot_round_trip_preserves_every_plant(population):
    records = json.loads(json.dumps(population_to_records(population)))
    restored = population_from_records(records)
    assert restored == population
    for before, after in zip(population, restored):
        assert after.phenotype == before.phenotype
        assert after.breeding_value == before.breeding_value


def test_restore_keeps_stored_phenotype(population):
    record = plant_to_record(population[0])
    record["phenotype"] = {"yield": 1.0, "resistance": 2.0, "height": 3.0}
    restored = plant_from_record(record)
    assert restored.phenotype.to_dict() == {"yield": 1.0, "resistance": 2.0, "height": 3.0}
    assert restored.breeding_value == population[0].breeding_value


def test_incomplete_record_is_rejected(population):
    record = plant_to_record(population[0])
    del record["genome"]
    with pytest.raises(ValueError, match="genome"):
        plant_from_record(record)


def test_empty_snapshot_needs_a_generation():
    with pytest.raises(ValueError):
        population_from_records([])
    assert len(population_from_records([], generation=4)) == 0


def test_genotype_csv(tmp_path: Path, population):
    target = tmp_path / "out" / "genotype.csv"
    write_genotype_csv(population, target)
    rows = _read_rows(target)
    assert rows[0][:3] == ["id", "L00", "L01"]
    assert len(rows[0]) == 25
    assert len(rows) == len(population) + 1
    first = population[0]
    assert rows[1][0] == first.id
    assert [int(value) for value in rows[1][1:]] == list(first.genome.loci)


def test_phenotype_csv(tmp_path: Path, population):
    target = tmp_path / "phenotype.csv"
    write_phenotype_csv(population, target)
    rows = _read_rows(target)
    assert rows[0] == [
        "id",
        "generation",
        "heterozygosity",
        "yield",
        "resistance",
        "height",
        "gebv_yield",
        "gebv_resistance",
        "gebv_height",
    ]
    assert float(rows[1][3]) == pytest.approx(population[0].phenotype.grain_yield)


def test_history_csv(tmp_path: Path, population):
    history = StatsHistory([calculate_stats(population, 1), calculate_stats(population, 2)])
    target = tmp_path / "history.csv"
    write_history_csv(history, target)
    rows = _read_rows(target)
    assert rows[0] == history_header()
    assert [row[0] for row in rows[1:]] == ["1", "2"]
    assert "heritability_height" in rows[0]
