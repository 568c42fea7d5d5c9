"""
The simulation clock. A run goes day by day over the whole population and, for each person:

1. Uninfected people go through the infection check (except on day 0, which is the initial state). Newly infected
   people enter Latent and get their first transition scheduled.
2. Infected people whose scheduled transition is due move to the next stage and get a new dwell time. Bedridden people
   whose time runs out die.
3. Bedridden people not due for a transition may recover (with the stage's recovery probability) or, failing that, die
   with fixed odds of 1 in 99.

Each person changes stage at most once per day. A transition is due when the scheduled day is today or earlier, so a
zero-day dwell time is carried out the day after the stage was entered.

After every person was processed a summary row is recorded with the number of people in each compartment.
"""
import logging
import math
from typing import Dict, Iterable, List, NamedTuple, Union

import numpy as np  # type: ignore
import pandas as pd  # type: ignore

from epidemic_sim import distributions, infection
from epidemic_sim.common import Lazy
from epidemic_sim.disease import NEXT_STAGE, DiseaseStage, DiseaseStageTable
from epidemic_sim.places import PlaceCatalog
from epidemic_sim.population import Compartments, Person, Population
from epidemic_sim.roles import RoleCatalog, buildPopulation

logger = logging.getLogger(__name__)

BEDRIDDEN_DEATH_PROBABILITY = 1.0 / 99.0

SUMMARY_COLUMNS = ["day"] + [stage.label for stage in DiseaseStage]


class EpidemicModel(NamedTuple):
    """
    This type has all the inputs used by this model
    """
    population: int
    initialInfected: int
    days: float
    places: PlaceCatalog
    roles: RoleCatalog
    stages: DiseaseStageTable


def simulationDays(days: float) -> Iterable[int]:
    """Days simulated for a run of the given length

    >>> list(simulationDays(2.5))
    [0, 1, 2]

    :param days: number of days to simulate, fractional values run one more day
    :return: generator of day numbers, starting at 0
    """
    return range(int(math.ceil(days)))


def basicSimulation(model: EpidemicModel, generator: np.random.Generator) -> pd.DataFrame:
    """Build the population and run the simulation for the configured number of days.

    :param model: the model inputs, the place instances in its catalog are recreated by this function
    :param generator: Seeded random number generated to use in this simulation
    :return: One row per day with the number of people in each compartment
    """
    population = buildPopulation(model.roles, model.stages, model.population, model.initialInfected, generator)
    return runSimulation(population, model.stages, model.days, generator)


def runSimulation(
        population: Population,
        stages: DiseaseStageTable,
        days: float,
        generator: np.random.Generator,
) -> pd.DataFrame:
    """Run the daily clock over an existing population.

    :param population: people to simulate, modified in place
    :param stages: disease stage table
    :param days: number of days to simulate
    :param generator: Seeded random number generated to use in this simulation
    :return: One row per day with the number of people in each compartment
    """
    history = []
    for day in simulationDays(days):
        simulateDay(population, stages, day, generator)
        row = summaryRecord(day, population.compartments)
        logger.debug("Day %s. Status: %s", day, Lazy(lambda: {k: v for k, v in row.items() if k != "day"}))
        history.append(row)
    return pd.DataFrame(history, columns=SUMMARY_COLUMNS)


def simulateDay(population: Population, stages: DiseaseStageTable, day: int, generator: np.random.Generator) -> None:
    """Apply one day of infections and stage transitions to every person

    :param population: people to simulate, modified in place
    :param stages: disease stage table
    :param day: the current day
    :param generator: Seeded random number generated to use in this simulation
    """
    compartments = population.compartments
    for person in population:
        if person.stage == DiseaseStage.UNINFECTED:
            if day > 0 and infection.isInfected(person, compartments, generator):
                compartments.infect(person)
                person.nextTransition = day + stages.sampleDwellTime(DiseaseStage.LATENT, generator)
        elif person.stage.terminal:
            continue
        elif person.nextTransition <= day:
            advanceStage(person, compartments, stages, day, generator)
        elif person.stage == DiseaseStage.BEDRIDDEN:
            checkBedridden(person, compartments, stages, generator)


def advanceStage(
        person: Person,
        compartments: Compartments,
        stages: DiseaseStageTable,
        day: int,
        generator: np.random.Generator,
) -> DiseaseStage:
    """Carry out the scheduled transition of an infected person

    :param person: a person in one of the timed stages
    :param compartments: compartments, updated with the move
    :param stages: disease stage table
    :param day: the current day
    :param generator: Seeded random number generated to use in this simulation
    :return: the new stage
    """
    stage = NEXT_STAGE[person.stage]
    compartments.move(person, stage)
    if not stage.terminal:
        person.nextTransition = day + stages.sampleDwellTime(stage, generator)
    return stage


def checkBedridden(
        person: Person,
        compartments: Compartments,
        stages: DiseaseStageTable,
        generator: np.random.Generator,
) -> DiseaseStage:
    """Daily recovery or death draw for a bedridden person

    :param person: a bedridden person
    :param compartments: compartments, updated if the person recovers or dies
    :param stages: disease stage table, for the Bedridden recovery probability
    :param generator: Seeded random number generated to use in this simulation
    :return: the stage of the person after the draws
    """
    recovery = stages.lookup(DiseaseStage.BEDRIDDEN).recoveryProbability
    if distributions.uniform(generator) < recovery:
        compartments.move(person, DiseaseStage.RECOVERED)
    elif distributions.uniform(generator) < BEDRIDDEN_DEATH_PROBABILITY:
        compartments.move(person, DiseaseStage.DEAD)
    return person.stage


def summaryRecord(day: int, compartments: Compartments) -> Dict[str, int]:
    """Counts for every compartment on a given day

    :param day: the day being reported
    :param compartments: current compartments
    :return: dict with the day and one entry per stage, keyed by the stage label
    """
    record = {"day": day}
    for stage, count in compartments.counts().items():
        record[stage.label] = count
    return record


def formatSummary(history: Union[pd.DataFrame, List[Dict[str, int]]]) -> List[str]:
    """Render the daily summary as space separated lines, in the fixed column order

    >>> formatSummary([{"day": 0, "uninfected": 95, "latent": 5, "asymptomatic": 0, "symptomatic": 0,
    ...                 "bedridden": 0, "recovered": 0, "dead": 0}])
    ['0 95 5 0 0 0 0 0']

    :param history: output of :func:`runSimulation`, or a list of summary records
    :return: one line per day
    """
    df = pd.DataFrame(history, columns=SUMMARY_COLUMNS)
    return [" ".join(str(value) for value in row) for row in df.itertuples(index=False)]
