from unittest import mock

import numpy as np
import pandas as pd
import pytest

from epidemic_sim import loaders, simulation
from epidemic_sim.disease import DiseaseStage
from epidemic_sim.roles import buildPopulation


def test_simulationDays():
    assert list(simulation.simulationDays(1.0)) == [0]
    assert list(simulation.simulationDays(3.0)) == [0, 1, 2]
    assert list(simulation.simulationDays(0.5)) == [0]
    assert list(simulation.simulationDays(0.0)) == []


def test_basicSimulation_day_zero(scenario_model, generator):
    result = simulation.basicSimulation(scenario_model, generator)

    assert list(result.columns) == simulation.SUMMARY_COLUMNS
    assert simulation.formatSummary(result) == ["0 95 5 0 0 0 0 0"]


def test_basicSimulation_no_transmission_progression(model_factory, generator):
    model = model_factory(transmissivity=0, end=10)

    result = simulation.basicSimulation(model, generator)

    expected = pd.DataFrame(
        [
            [0, 95, 5, 0, 0, 0, 0, 0],
            [1, 95, 5, 0, 0, 0, 0, 0],
            [2, 95, 0, 5, 0, 0, 0, 0],
            [3, 95, 0, 5, 0, 0, 0, 0],
            [4, 95, 0, 5, 0, 0, 0, 0],
            [5, 95, 0, 0, 5, 0, 0, 0],
            [6, 95, 0, 0, 5, 0, 0, 0],
            [7, 95, 0, 0, 5, 0, 0, 0],
            [8, 95, 0, 0, 0, 5, 0, 0],
            [9, 95, 0, 0, 0, 0, 5, 0],
        ],
        columns=simulation.SUMMARY_COLUMNS,
    )
    pd.testing.assert_frame_equal(result, expected, check_dtype=False)


def test_basicSimulation_bedridden_never_recover(model_factory, generator):
    model = model_factory(transmissivity=0, bedridden_recovery=0, end=14)

    result = simulation.basicSimulation(model, generator)
    last = result.iloc[-1]

    assert last.day == 13
    assert last.dead == 5
    assert last.recovered == 0
    assert last.bedridden == 0


def test_basicSimulation_same_seed_same_result(model_factory):
    first = simulation.basicSimulation(model_factory(transmissivity=3, end=30), np.random.default_rng(5))
    second = simulation.basicSimulation(model_factory(transmissivity=3, end=30), np.random.default_rng(5))

    pd.testing.assert_frame_equal(first, second)


def test_basicSimulation_same_model_twice(model_factory):
    model = model_factory(transmissivity=3, end=30)

    first = simulation.basicSimulation(model, np.random.default_rng(5))
    second = simulation.basicSimulation(model, np.random.default_rng(5))

    pd.testing.assert_frame_equal(first, second)


def test_zero_dwell_time_moves_next_day(generator):
    model, issues = loaders.readModel("""
        population 1; infected 1;
        place home 1 0 0;
        role solo 1 home;
        latent 1 0; asymptomatic 0.4 0; symptomatic 3 0 0; bedridden 5 0 0;
        end 5;
    """)
    assert issues == []
    population = buildPopulation(model.roles, model.stages, 1, 1, generator)
    person = population.people[0]

    stages = []
    for day in range(4):
        simulation.simulateDay(population, model.stages, day, generator)
        stages.append(person.stage)

    assert stages == [
        DiseaseStage.LATENT,
        DiseaseStage.ASYMPTOMATIC,
        DiseaseStage.SYMPTOMATIC,
        DiseaseStage.SYMPTOMATIC,
    ]


def test_no_infection_on_day_zero(model_factory, generator):
    model = model_factory(transmissivity=1e6, end=1)
    population = buildPopulation(model.roles, model.stages, model.population, model.initialInfected, generator)

    simulation.simulateDay(population, model.stages, 0, generator)

    assert population.compartments.uninfected == 95


def test_infection_schedules_latent_dwell(model_factory, generator):
    model = model_factory(median=100, scatter=0, transmissivity=1e6, end=2)
    population = buildPopulation(model.roles, model.stages, model.population, model.initialInfected, generator)

    simulation.simulateDay(population, model.stages, 1, generator)

    assert population.compartments.uninfected == 0
    assert all(person.nextTransition in (2.0, 3.0) for person in population)
    assert len(population.compartments[DiseaseStage.LATENT]) == 100


def test_advanceStage_bedridden_dies(scenario_model, generator):
    population = buildPopulation(scenario_model.roles, scenario_model.stages, 100, 5, generator)
    person = next(iter(population.compartments[DiseaseStage.LATENT]))
    compartments = population.compartments
    compartments.move(person, DiseaseStage.BEDRIDDEN)

    stage = simulation.advanceStage(person, compartments, scenario_model.stages, 4, generator)

    assert stage == DiseaseStage.DEAD
    assert person.nextTransition is None
    assert compartments.count(DiseaseStage.DEAD) == 1


def test_advanceStage_schedules_next(scenario_model, generator):
    population = buildPopulation(scenario_model.roles, scenario_model.stages, 100, 5, generator)
    person = next(iter(population.compartments[DiseaseStage.LATENT]))

    stage = simulation.advanceStage(person, population.compartments, scenario_model.stages, 2, generator)

    assert stage == DiseaseStage.ASYMPTOMATIC
    assert person.nextTransition == 5


@pytest.mark.parametrize(
    "recovery,draws,expected",
    [
        (1.0, [0.99], DiseaseStage.RECOVERED),
        (0.3, [0.2], DiseaseStage.RECOVERED),
        (0.3, [0.4, 0.005], DiseaseStage.DEAD),
        (0.3, [0.4, 0.5], DiseaseStage.BEDRIDDEN),
        (0.0, [0.0, 0.0], DiseaseStage.DEAD),
    ]
)
def test_checkBedridden(model_factory, generator, recovery, draws, expected):
    model = model_factory(bedridden_recovery=recovery)
    population = buildPopulation(model.roles, model.stages, 100, 5, generator)
    person = next(iter(population.compartments[DiseaseStage.LATENT]))
    population.compartments.move(person, DiseaseStage.BEDRIDDEN)
    gen = mock.MagicMock()
    gen.random.side_effect = draws

    assert simulation.checkBedridden(person, population.compartments, model.stages, gen) == expected
    assert gen.random.call_count == len(draws)
    assert population.compartments.count(expected) >= 1


def test_summaryRecord(scenario_model, generator):
    population = buildPopulation(scenario_model.roles, scenario_model.stages, 100, 5, generator)

    assert simulation.summaryRecord(3, population.compartments) == {
        "day": 3,
        "uninfected": 95,
        "latent": 5,
        "asymptomatic": 0,
        "symptomatic": 0,
        "bedridden": 0,
        "recovered": 0,
        "dead": 0,
    }


def test_formatSummary_column_order():
    df = pd.DataFrame([{
        "dead": 7, "recovered": 6, "bedridden": 5, "symptomatic": 4, "asymptomatic": 3, "latent": 2,
        "uninfected": 1, "day": 0,
    }])

    assert simulation.formatSummary(df) == ["0 1 2 3 4 5 6 7"]
