from pydantic import BaseModel, Field
from typing import List, Dict, Optional

# --- Base Models ---
class AlleleSchema(BaseModel):
    maternal: bool
    paternal: bool

class PlantSchema(BaseModel):
    id: str
    generation: int
    loci: List[int]
    diploid: List[AlleleSchema]
    phenotype: Dict[str, float]
    breeding_value: Dict[str, float]
    heterozygosity: float
    is_heterozygous: bool

class PopulationStatsSchema(BaseModel):
    generation: int
    size: int
    mean: Dict[str, float]
    variance: Dict[str, float]
    mean_breeding_value: Dict[str, float]
    breeding_value_variance: Dict[str, float]
    heritability: Dict[str, float]
    mean_heterozygosity: float

# --- API Request/Response Schemas ---

# /simulation/reset
class ResetRequest(BaseModel):
    population_size: Optional[int] = Field(default=None, ge=2)
    env_variance: Optional[float] = Field(default=None, ge=0)
    seed: Optional[int] = None

# /simulation/state
class SimulationStateResponse(BaseModel):
    run_id: int
    generation: int
    population_size: int
    env_variance: float
    scenario: str
    weather: str
    analysis: str
    stats: PopulationStatsSchema

# /population
class PopulationResponse(BaseModel):
    generation: int
    plants: List[PlantSchema]

# /selection/auto
class AutoSelectRequest(BaseModel):
    criterion: str = "index" # 'yield', 'resistance', 'height', 'index'
    intensity: float = Field(default=0.2, gt=0, le=1)
    use_breeding_value: bool = False

class AutoSelectResponse(BaseModel):
    criterion: str
    selected_ids: List[str]
    selection_differential: Dict[str, float]

# /generations/advance
class AdvanceRequest(BaseModel):
    parent_ids: List[str]

class AdvanceResponse(BaseModel):
    run_id: int
    generation: int
    scenario: str
    env_variance: float
    weather: str
    analysis: str
    stats: PopulationStatsSchema

# /history
class HistoryResponse(BaseModel):
    run_id: int
    history: List[PopulationStatsSchema]
    genetic_gain: Dict[str, float]

# /runs/{run_id}/generations/{generation}
class ArchivedGenerationResponse(BaseModel):
    run_id: int
    generation: int
    scenario: str
    env_variance: float
    analysis: str
    stats: PopulationStatsSchema
    plants: List[PlantSchema]

# /analysis/genomic-prediction
class GenomicPredictionRequest(BaseModel):
    trait: str = "yield"
    k_folds: int = Field(default=5, ge=2)
    alpha: float = Field(default=1.0, gt=0)

class GenomicPredictionResponse(BaseModel):
    run_id: int
    generation: int
    trait: str
    cv_results: Dict[str, float] # r2, pearson_r, rmse
    accuracy: float # correlation of predictions with true breeding values
    relationship: Dict[str, float] # mean_relationship, max_relationship, mean_inbreeding
    plots: Dict[str, str]

# /analysis/progress
class ProgressResponse(BaseModel):
    run_id: int
    genetic_trend: Dict[str, Dict[str, float]] # {trait: {slope, intercept, r_value, p_value}}
    plots: Dict[str, str]
