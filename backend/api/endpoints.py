from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse
from sqlmodel.ext.asyncio.session import AsyncSession
import logging

from backend.db.database import get_async_session
from backend.schemas import schemas
from backend.services import simulation_service

router = APIRouter()
logger = logging.getLogger(__name__)


def _http_error(action: str, e: Exception) -> HTTPException:
    """Maps engine errors to HTTP errors: bad input 400, unknown ids 404, anything else 500."""
    if isinstance(e, ValueError):
        logger.warning(f"Rejected {action}: {e}")
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, KeyError):
        message = e.args[0] if e.args else str(e)
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)
    logger.error(f"Error during {action}: {e}", exc_info=True)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"An error occurred: {e}")

@router.post("/simulation/reset", response_model=schemas.SimulationStateResponse)
async def reset_simulation(
    request: schemas.ResetRequest,
    db: AsyncSession = Depends(get_async_session)
):
    """
    Starts a new breeding run with a freshly initialised founder population.
    """
    try:
        return await simulation_service.reset_simulation(db, request)
    except Exception as e:
        raise _http_error("simulation reset", e)

@router.get("/simulation/state", response_model=schemas.SimulationStateResponse)
async def get_state(db: AsyncSession = Depends(get_async_session)):
    try:
        return await simulation_service.get_state(db)
    except Exception as e:
        raise _http_error("state lookup", e)

@router.get("/population", response_model=schemas.PopulationResponse)
async def get_population(db: AsyncSession = Depends(get_async_session)):
    try:
        return await simulation_service.get_population(db)
    except Exception as e:
        raise _http_error("population lookup", e)

@router.get("/plants/{plant_id}", response_model=schemas.PlantSchema)
async def get_plant(plant_id: str, db: AsyncSession = Depends(get_async_session)):
    try:
        return await simulation_service.get_plant(db, plant_id)
    except Exception as e:
        raise _http_error("plant lookup", e)

@router.post("/selection/auto", response_model=schemas.AutoSelectResponse)
async def auto_select(
    request: schemas.AutoSelectRequest,
    db: AsyncSession = Depends(get_async_session)
):
    try:
        return await simulation_service.auto_select(db, request)
    except Exception as e:
        raise _http_error("auto-selection", e)

@router.post("/generations/advance", response_model=schemas.AdvanceResponse)
async def advance_generation(
    request: schemas.AdvanceRequest,
    db: AsyncSession = Depends(get_async_session)
):
    """
    Crosses the chosen parents into the next generation. At least two
    parents from the current generation are required.
    """
    try:
        return await simulation_service.advance_generation(db, request)
    except Exception as e:
        raise _http_error("generation advance", e)

@router.get("/history", response_model=schemas.HistoryResponse)
async def get_history(db: AsyncSession = Depends(get_async_session)):
    try:
        return await simulation_service.get_history(db)
    except Exception as e:
        raise _http_error("history lookup", e)

@router.get("/runs/{run_id}/generations/{generation}", response_model=schemas.ArchivedGenerationResponse)
async def get_archived_generation(
    run_id: int,
    generation: int,
    db: AsyncSession = Depends(get_async_session)
):
    try:
        return await simulation_service.load_archived_generation(db, run_id, generation)
    except Exception as e:
        raise _http_error("archive lookup", e)

@router.post("/analysis/genomic-prediction", response_model=schemas.GenomicPredictionResponse)
async def genomic_prediction(
    request: schemas.GenomicPredictionRequest,
    db: AsyncSession = Depends(get_async_session)
):
    try:
        return await simulation_service.run_genomic_prediction(db, request)
    except Exception as e:
        raise _http_error("genomic prediction", e)

@router.post("/analysis/progress", response_model=schemas.ProgressResponse)
async def progress_analysis(db: AsyncSession = Depends(get_async_session)):
    try:
        return await simulation_service.run_progress_analysis(db)
    except Exception as e:
        raise _http_error("progress analysis", e)

# Endpoint to serve result plots
@router.get("/results/{run_id}/plots/{filename}")
async def get_result_file(run_id: int, filename: str):
    file_path = simulation_service.RESULTS_DIR / str(run_id) / filename
    if not file_path.is_file() or file_path.resolve().parent != (simulation_service.RESULTS_DIR / str(run_id)).resolve():
        raise HTTPException(status_code=404, detail="File not found.")

    return FileResponse(file_path)
