import math
import random

import pytest

from cornbreeder.advisor import (
    DEFAULT_SCENARIO,
    FALLBACK_ANALYSIS,
    SCENARIOS,
    OfflineAdvisor,
    Scenario,
    request_analysis,
    request_scenario,
    weather_for,
)
from cornbreeder.config import SimulationConfig
from cornbreeder.simulation import WELCOME_MESSAGE, BreedingProgram


class BrokenAdvisor:
    def generate_scenario(self, generation):
        raise RuntimeError("scenario service offline")

    def analyze(self, history, generation):
        raise RuntimeError("analysis service offline")


class NegativeAdvisor:
    def generate_scenario(self, generation):
        return Scenario("Impossible weather", -2.0)

    def analyze(self, history, generation):
        return ""


class FixedVarianceAdvisor:
    def __init__(self, env_variance):
        self.env_variance = env_variance

    def generate_scenario(self, generation):
        return Scenario("Sensor glitch", self.env_variance)

    def analyze(self, history, generation):
        return "ok"


@pytest.fixture
def program():
    return BreedingProgram(SimulationConfig(population_size=12), rng=random.Random(42))


def test_reset_creates_founders(program):
    assert program.generation == 1
    assert len(program.population) == 12
    assert len(program.history) == 1
    assert program.history.latest.generation == 1
    assert program.analysis == WELCOME_MESSAGE
    assert program.weather == "sunny"


def test_advance_requires_two_parents_and_keeps_state(program):
    population = program.population
    with pytest.raises(ValueError):
        program.advance([population[0].id])
    with pytest.raises(ValueError):
        program.advance([population[0].id, population[0].id])
    assert program.generation == 1
    assert program.population is population
    assert len(program.history) == 1


def test_advance_with_unknown_parent(program):
    with pytest.raises(KeyError):
        program.advance([program.population[0].id, "G1-999-zzzzzz"])
    assert program.generation == 1


def test_advance_appends_history(program):
    result = program.advance_selected("index", 0.25)
    assert result.generation == 2
    assert program.generation == 2
    assert [entry.generation for entry in program.history] == [1, 2]
    assert result.scenario.env_variance == program.config.initial_env_variance
    assert result.analysis == FALLBACK_ANALYSIS
    assert all(plant.generation == 2 for plant in program.population)

    program.advance_selected("yield", 0.25, use_breeding_value=True)
    assert [entry.generation for entry in program.history] == [1, 2, 3]


def test_failing_advisor_never_blocks_a_cycle():
    program = BreedingProgram(SimulationConfig(population_size=10), rng=random.Random(1), advisor=BrokenAdvisor())
    result = program.advance(program.population.ids[:3])
    assert result.generation == 2
    assert result.scenario.description == DEFAULT_SCENARIO.description
    assert result.analysis == FALLBACK_ANALYSIS


def test_invalid_scenario_falls_back_to_default():
    scenario = request_scenario(NegativeAdvisor(), 2)
    assert scenario == DEFAULT_SCENARIO
    assert request_analysis(NegativeAdvisor(), [], 2) == FALLBACK_ANALYSIS
    assert request_scenario(None, 2) == DEFAULT_SCENARIO


def test_offline_advisor_drives_the_environment():
    program = BreedingProgram(
        SimulationConfig(population_size=10),
        rng=random.Random(3),
        advisor=OfflineAdvisor(random.Random(3)),
    )
    result = program.advance_selected("index", 0.3)
    assert result.scenario in SCENARIOS
    assert program.env_variance == result.scenario.env_variance
    assert result.analysis.startswith("F2:")


@pytest.mark.parametrize("env_variance", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_scenario_falls_back_and_keeps_history_finite(env_variance):
    assert request_scenario(FixedVarianceAdvisor(env_variance), 2) == DEFAULT_SCENARIO

    program = BreedingProgram(
        SimulationConfig(population_size=10), rng=random.Random(6), advisor=FixedVarianceAdvisor(env_variance)
    )
    result = program.advance(program.population.ids[:3])
    assert result.scenario == program.default_scenario
    assert math.isfinite(program.env_variance)
    assert all(math.isfinite(value) for value in result.stats.mean.to_dict().values())
    assert all(math.isfinite(plant.phenotype.grain_yield) for plant in program.population)


@pytest.mark.parametrize(
    "variance, weather",
    [(0.0, "sunny"), (1.49, "sunny"), (1.5, "cloudy"), (2.49, "cloudy"), (2.5, "rainy"), (4.0, "rainy")],
)
def test_weather_bands(variance, weather):
    assert weather_for(variance) == weather


def test_seeded_programs_are_reproducible():
    first = BreedingProgram(SimulationConfig(population_size=8), rng=random.Random(5))
    second = BreedingProgram(SimulationConfig(population_size=8), rng=random.Random(5))
    assert first.advance_selected("yield", 0.25).population == second.advance_selected("yield", 0.25).population


def test_breed_leaves_program_untouched_until_commit(program):
    population = program.population
    result = program.breed(population.ids[:3])
    assert result.generation == 2
    assert program.generation == 1
    assert program.population is population
    assert len(program.history) == 1

    program.commit(result)
    assert program.generation == 2
    assert program.population is result.population
    assert program.history.latest == result.stats

    with pytest.raises(ValueError):
        program.commit(result)
    assert len(program.history) == 2
