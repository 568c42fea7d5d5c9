"""
Daily infection check for uninfected people.

The chance of infection is an exponential draw with mean ``transmissivity / currently infected``, used as-is as a
probability and compared against a uniform draw at a granularity of one percent. Nothing bounds that draw to [0, 1];
anything at or above 1 always infects. Note that with this formula more people infected across the population
*lowers* the mean of the draw.
"""
import numpy as np  # type: ignore

from epidemic_sim import distributions
from epidemic_sim.disease import DiseaseStage
from epidemic_sim.population import Compartments, Person

# The uniform draw is taken as a whole percentage
CHECK_GRANULARITY = 100


def exposureProbability(transmissivity: float, currentlyInfected: int, generator: np.random.Generator) -> float:
    """Sample the probability of infection for one person for one day

    :param transmissivity: transmissivity of the person's place category
    :param currentlyInfected: number of infected people in the whole population, must be positive
    :param generator: Seeded random number generated to use in this simulation
    :return: a non-negative value, which may be above 1
    """
    meanInterval = transmissivity / currentlyInfected
    return distributions.exponential(generator, meanInterval)


def isInfected(person: Person, compartments: Compartments, generator: np.random.Generator) -> bool:
    """Decide whether an uninfected person catches the disease today.

    People whose place has nobody infected in it are never infected, and no random numbers are drawn for them.

    :param person: an uninfected person
    :param compartments: current compartments, used for the number of infected people
    :param generator: Seeded random number generated to use in this simulation
    :return: True if the person is infected
    """
    assert person.stage == DiseaseStage.UNINFECTED, f"{person} is already infected"
    currentlyInfected = compartments.currentlyInfected()
    if person.place.infected <= 0 or currentlyInfected <= 0:
        return False
    probability = exposureProbability(person.place.category.transmissivity, currentlyInfected, generator)
    return int(generator.integers(CHECK_GRANULARITY)) < probability * CHECK_GRANULARITY
