import random
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select
from pathlib import Path
import logging

from backend.core.config import settings
from backend.models import models
from backend.analysis import gp, plots, progress
from backend.schemas import schemas

from cornbreeder.advisor import OfflineAdvisor
from cornbreeder.data import population_from_records, population_to_records
from cornbreeder.loci import Trait, parse_trait
from cornbreeder.selection import SelectionCriterion, select_parents, selection_differential
from cornbreeder.simulation import BreedingProgram, GenerationResult
from cornbreeder.stats import PopulationStats

logger = logging.getLogger(__name__)

# The live breeding session is held in process memory; only finished
# generations are archived to the database.
SESSION = {
    "program": None,
    "run_id": None,
    "selected_ids": [],
}

RESULTS_DIR = Path(settings.RESULTS_DIR)
RESULTS_DIR.mkdir(exist_ok=True)


def plant_to_schema(plant) -> schemas.PlantSchema:
    return schemas.PlantSchema(
        id=plant.id,
        generation=plant.generation,
        loci=list(plant.genome.loci),
        diploid=[schemas.AlleleSchema(maternal=pair.maternal, paternal=pair.paternal) for pair in plant.genome],
        phenotype=plant.phenotype.to_dict(),
        breeding_value=plant.breeding_value.to_dict(),
        heterozygosity=plant.heterozygosity,
        is_heterozygous=plant.is_heterozygous,
    )

def stats_to_schema(stats: PopulationStats) -> schemas.PopulationStatsSchema:
    return schemas.PopulationStatsSchema(**stats.to_dict())

def _run_dir(run_id: int) -> Path:
    run_dir = RESULTS_DIR / str(run_id)
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir

async def _archive_generation(db: AsyncSession, run_id: int, result: GenerationResult):
    record = models.GenerationRecord(
        run_id=run_id,
        generation=result.generation,
        env_variance=result.scenario.env_variance,
        scenario=result.scenario.description,
        analysis=result.analysis,
        stats=result.stats.to_dict(),
        population=population_to_records(result.population),
    )
    db.add(record)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise

async def reset_simulation(db: AsyncSession, request: schemas.ResetRequest):
    seed = request.seed if request.seed is not None else settings.RANDOM_SEED
    config = settings.simulation_config(request.population_size, request.env_variance)
    rng = random.Random(seed)
    advisor = OfflineAdvisor(random.Random(rng.random())) if settings.ADVISOR_ENABLED else None
    program = BreedingProgram(config, rng=rng, advisor=advisor)

    run = models.SimulationRun(population_size=config.population_size, seed=seed, params=request.dict())
    db.add(run)
    await db.commit()
    await db.refresh(run)

    founders = GenerationResult(program.population, program.history.latest, program.scenario, program.analysis)
    await _archive_generation(db, run.id, founders)

    SESSION["program"] = program
    SESSION["run_id"] = run.id
    SESSION["selected_ids"] = []
    logger.info(f"Started simulation run {run.id} with {config.population_size} plants (seed={seed}).")
    return _state_response(program, run.id)

async def get_session(db: AsyncSession):
    if SESSION["program"] is None:
        logger.info("No active breeding program; starting one with default settings.")
        await reset_simulation(db, schemas.ResetRequest())
    return SESSION["program"], SESSION["run_id"]

def _state_response(program: BreedingProgram, run_id: int) -> schemas.SimulationStateResponse:
    return schemas.SimulationStateResponse(
        run_id=run_id,
        generation=program.generation,
        population_size=len(program.population),
        env_variance=program.env_variance,
        scenario=program.scenario.description,
        weather=program.weather,
        analysis=program.analysis,
        stats=stats_to_schema(program.history.latest),
    )

async def get_state(db: AsyncSession):
    program, run_id = await get_session(db)
    return _state_response(program, run_id)

async def get_population(db: AsyncSession):
    program, _ = await get_session(db)
    return schemas.PopulationResponse(
        generation=program.generation,
        plants=[plant_to_schema(plant) for plant in program.population],
    )

async def get_plant(db: AsyncSession, plant_id: str):
    program, _ = await get_session(db)
    return plant_to_schema(program.population.get(plant_id))

async def auto_select(db: AsyncSession, request: schemas.AutoSelectRequest):
    program, _ = await get_session(db)
    criterion = SelectionCriterion(request.criterion)
    selected = select_parents(
        program.population, criterion, request.intensity, use_breeding_value=request.use_breeding_value
    )
    SESSION["selected_ids"] = [plant.id for plant in selected]
    differential = selection_differential(program.population, selected)
    return schemas.AutoSelectResponse(
        criterion=criterion.value,
        selected_ids=SESSION["selected_ids"],
        selection_differential={trait.value: value for trait, value in differential.items()},
    )

async def advance_generation(db: AsyncSession, request: schemas.AdvanceRequest):
    program, run_id = await get_session(db)
    # The live session only moves on once the new generation is archived.
    result = program.breed(request.parent_ids)
    await _archive_generation(db, run_id, result)
    program.commit(result)
    SESSION["selected_ids"] = []
    return schemas.AdvanceResponse(
        run_id=run_id,
        generation=result.generation,
        scenario=result.scenario.description,
        env_variance=result.scenario.env_variance,
        weather=result.weather,
        analysis=result.analysis,
        stats=stats_to_schema(result.stats),
    )

async def get_history(db: AsyncSession):
    program, run_id = await get_session(db)
    return schemas.HistoryResponse(
        run_id=run_id,
        history=[stats_to_schema(entry) for entry in program.history],
        genetic_gain={trait.value: program.history.genetic_gain(trait) for trait in Trait},
    )

async def load_archived_generation(db: AsyncSession, run_id: int, generation: int):
    stmt = select(models.GenerationRecord).where(
        models.GenerationRecord.run_id == run_id,
        models.GenerationRecord.generation == generation,
    )
    result = await db.execute(stmt)
    record = result.scalars().first()
    if record is None:
        raise KeyError(f"Generation {generation} of run {run_id} not found.")

    population = population_from_records(record.population, generation=record.generation)
    stats = PopulationStats.from_dict(record.stats)
    return schemas.ArchivedGenerationResponse(
        run_id=run_id,
        generation=record.generation,
        scenario=record.scenario,
        env_variance=record.env_variance,
        analysis=record.analysis,
        stats=stats_to_schema(stats),
        plants=[plant_to_schema(plant) for plant in population],
    )

async def run_genomic_prediction(db: AsyncSession, request: schemas.GenomicPredictionRequest):
    program, run_id = await get_session(db)
    trait = parse_trait(request.trait)
    gp_request = request.dict()
    gp_request['trait'] = trait.value

    _, cv_results, accuracy, predictions = gp.run_gp_pipeline(program.population, gp_request)
    relationship = gp.relationship_summary(gp.calculate_grm(gp.dosage_matrix(program.population)))

    run_dir = _run_dir(run_id)
    filename = f"gebv_accuracy_F{program.generation}_{trait.value}.png"
    plots.save_figure(plots.plot_prediction_accuracy(predictions, trait.value), run_dir / filename)

    return schemas.GenomicPredictionResponse(
        run_id=run_id,
        generation=program.generation,
        trait=trait.value,
        cv_results=cv_results,
        accuracy=accuracy,
        relationship=relationship,
        plots={"accuracy": f"/api/results/{run_id}/plots/{filename}"},
    )

async def run_progress_analysis(db: AsyncSession):
    program, run_id = await get_session(db)
    frame, trends = progress.run_progress_pipeline(program.history)

    run_dir = _run_dir(run_id)
    plots.save_figure(plots.plot_trait_progress(frame), run_dir / "progress.png")
    phenotypes = gp.trait_matrix(program.population)
    plot_urls = {"progress": f"/api/results/{run_id}/plots/progress.png"}
    for trait in Trait:
        filename = f"distribution_F{program.generation}_{trait.value}.png"
        fig = plots.plot_trait_distribution(phenotypes, trait.value, SESSION["selected_ids"])
        plots.save_figure(fig, run_dir / filename)
        plot_urls[f"distribution_{trait.value}"] = f"/api/results/{run_id}/plots/{filename}"

    return schemas.ProgressResponse(run_id=run_id, genetic_trend=trends, plots=plot_urls)
