import datetime
from typing import Optional
from sqlmodel import Field, SQLModel, Relationship, JSON, Column


class SimulationRun(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    population_size: int
    seed: Optional[int] = None
    params: dict = Field(sa_column=Column(JSON))
    created_at: datetime.datetime = Field(default_factory=lambda: datetime.datetime.now(datetime.timezone.utc))

    generations: list["GenerationRecord"] = Relationship(back_populates="run")


# One archived snapshot per generation; stats and plants are stored as produced,
# never recomputed on load.
class GenerationRecord(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    run_id: int = Field(foreign_key="simulationrun.id", index=True)
    generation: int = Field(index=True)
    env_variance: float
    scenario: str
    analysis: str
    stats: dict = Field(sa_column=Column(JSON))
    population: list = Field(sa_column=Column(JSON))

    run: SimulationRun = Relationship(back_populates="generations")
