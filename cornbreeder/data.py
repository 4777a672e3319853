"""Population snapshots and CSV export.

Records carry the stored phenotype and breeding-value numbers, so rebuilding a
population from its snapshot never re-runs the genotype-to-phenotype model.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from .genome import Genome
from .loci import Trait, locus_labels
from .phenotype import TraitValues
from .population import Plant, Population
from .stats import PopulationStats


def plant_to_record(plant: Plant) -> Dict[str, Any]:
    return {
        "id": plant.id,
        "generation": plant.generation,
        "genome": plant.genome.to_pairs(),
        "phenotype": plant.phenotype.to_dict(),
        "breeding_value": plant.breeding_value.to_dict(),
        "is_heterozygous": plant.is_heterozygous,
    }


def plant_from_record(record: Mapping[str, Any]) -> Plant:
    try:
        return Plant(
            id=str(record["id"]),
            generation=int(record["generation"]),
            genome=Genome.from_pairs(record["genome"]),
            phenotype=TraitValues.from_dict(record["phenotype"]),
            breeding_value=TraitValues.from_dict(record["breeding_value"]),
            is_heterozygous=bool(record["is_heterozygous"]),
        )
    except KeyError as exc:
        raise ValueError(f"Plant record is missing field {exc}") from None


def population_to_records(population: Population) -> List[Dict[str, Any]]:
    return [plant_to_record(plant) for plant in population]


def population_from_records(records: Sequence[Mapping[str, Any]], generation: int | None = None) -> Population:
    plants = tuple(plant_from_record(record) for record in records)
    if generation is None:
        if not plants:
            raise ValueError("Cannot infer the generation of an empty snapshot")
        generation = plants[0].generation
    return Population(generation=generation, plants=plants)


def _write_csv(path: str | Path, header: List[str], rows: Iterable[List[object]]) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(header)
        writer.writerows(rows)


def write_genotype_csv(population: Population, path: str | Path) -> None:
    """One row per plant, one dosage column (0/1/2) per locus."""
    if not len(population):
        raise ValueError("Cannot export an empty population")
    header = ["id"] + locus_labels(len(population[0].genome))
    _write_csv(path, header, ([plant.id] + list(plant.genome.loci) for plant in population))


def write_phenotype_csv(population: Population, path: str | Path) -> None:
    header = ["id", "generation", "heterozygosity"]
    header += [trait.value for trait in Trait]
    header += [f"gebv_{trait.value}" for trait in Trait]
    rows = []
    for plant in population:
        row: List[object] = [plant.id, plant.generation, plant.heterozygosity]
        row += [plant.phenotype.get(trait) for trait in Trait]
        row += [plant.breeding_value.get(trait) for trait in Trait]
        rows.append(row)
    _write_csv(path, header, rows)


def history_header() -> List[str]:
    header = ["generation", "size", "mean_heterozygosity"]
    for prefix in ("mean", "variance", "mean_gebv", "gebv_variance", "heritability"):
        header += [f"{prefix}_{trait.value}" for trait in Trait]
    return header


def history_row(stats: PopulationStats) -> List[object]:
    row: List[object] = [stats.generation, stats.size, stats.mean_heterozygosity]
    for values in (
        stats.mean,
        stats.variance,
        stats.mean_breeding_value,
        stats.breeding_value_variance,
        stats.heritability,
    ):
        row += [values.get(trait) for trait in Trait]
    return row


def write_history_csv(history: Iterable[PopulationStats], path: str | Path) -> None:
    _write_csv(path, history_header(), (history_row(stats) for stats in history))
