from typing import Optional

from pydantic_settings import BaseSettings

from cornbreeder.config import SimulationConfig
from cornbreeder.loci import (
    DEFAULT_LINKAGE,
    DEFAULT_LOCUS_MAP,
    DEFAULT_POSITIVE_LINK_COEFFICIENT,
    DEFAULT_TRADE_OFF_COEFFICIENT,
)


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./app.db"
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    LOG_LEVEL: str = "INFO"
    RESULTS_DIR: str = "results"

    # Breeding model
    POPULATION_SIZE: int = 50
    INITIAL_ENV_VARIANCE: float = 1.0
    FOUNDER_ALLELE_FREQUENCY: float = 0.5
    TRADE_OFF_COEFFICIENT: float = DEFAULT_TRADE_OFF_COEFFICIENT
    POSITIVE_LINK_COEFFICIENT: float = DEFAULT_POSITIVE_LINK_COEFFICIENT
    LINKAGE_STRENGTH: float = DEFAULT_LINKAGE
    RANDOM_SEED: Optional[int] = None
    ADVISOR_ENABLED: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'

    def simulation_config(self, population_size: Optional[int] = None, env_variance: Optional[float] = None) -> SimulationConfig:
        locus_map = DEFAULT_LOCUS_MAP.with_coefficients(
            trade_off=self.TRADE_OFF_COEFFICIENT,
            positive_link=self.POSITIVE_LINK_COEFFICIENT,
            linkage=self.LINKAGE_STRENGTH,
        )
        return SimulationConfig(
            population_size=population_size or self.POPULATION_SIZE,
            founder_allele_frequency=self.FOUNDER_ALLELE_FREQUENCY,
            initial_env_variance=self.INITIAL_ENV_VARIANCE if env_variance is None else env_variance,
            locus_map=locus_map,
        )

settings = Settings()
