"""
Roles (e.g. student, worker) and the construction of the population from them.
"""
import logging
from typing import List, Optional

import numpy as np  # type: ignore

from epidemic_sim import distributions
from epidemic_sim.common import Issue, IssueSeverity, Lazy, log_issue
from epidemic_sim.disease import DiseaseStage, DiseaseStageTable
from epidemic_sim.places import PlaceCatalog, PlaceCategory
from epidemic_sim.population import Compartments, Person, Population

logger = logging.getLogger(__name__)


class Role:
    """
    A cohort of the population that shares one category of places

    :param name: unique name of the role
    :param weight: share of the population, relative to the other roles
    :param category: the category people in this role are assigned to, None if it could not be resolved
    """

    def __init__(self, name: str, weight: float, category: Optional[PlaceCategory]):
        self.name = name
        self.weight = weight
        self.category = category

    def __repr__(self):
        return f"Role({self.name!r}, {self.weight}, {self.category.name if self.category else None!r})"


class RoleCatalog:
    """
    All roles, in the order they were registered. The order matters when the population is built.

    :param places: the catalog role place names are resolved against
    """

    def __init__(self, places: PlaceCatalog):
        self.places = places
        self.roles: List[Role] = []
        self.totalWeight = 0.0

    def __iter__(self):
        return iter(self.roles)

    def __len__(self) -> int:
        return len(self.roles)

    def findRole(self, name: str) -> Optional[Role]:
        for role in self.roles:
            if role.name == name:
                return role
        return None

    def register(self, name: str, weight: float, categoryName: Optional[str], issues: List[Issue]) -> Optional[Role]:
        """Add a role

        An unknown category name is reported, but the role is still added. Building a population that needs people
        in such a role will fail.

        :param name: unique name of the role
        :param weight: share of the population, non-positive values are replaced by 0.0
        :param categoryName: name of a place category registered earlier
        :param issues: list of issues, new issues are appended to it
        :return: the new role, or None if the name was already taken
        """
        if self.findRole(name) is not None:
            log_issue(logger, f"{name}: role name reused?", IssueSeverity.MEDIUM, issues)
            return None

        category = None
        if categoryName is not None:
            category = self.places.findCategory(categoryName)
        if category is None:
            log_issue(logger, f"{name} {categoryName}: undefined place?", IssueSeverity.MEDIUM, issues)

        if weight <= 0.0:
            log_issue(logger, f"{name}: non-positive population fraction?", IssueSeverity.MEDIUM, issues)
            weight = 0.0

        role = Role(name, weight, category)
        self.roles.append(role)
        self.totalWeight += weight
        return role

    def roleSize(self, role: Role, totalPopulation: int) -> int:
        """Number of people in a role. Each role is rounded on its own, the error is not redistributed."""
        return distributions.roundHalfUp(role.weight / self.totalWeight * totalPopulation)


def buildPopulation(
        roles: RoleCatalog,
        stages: DiseaseStageTable,
        totalPopulation: int,
        initialInfected: int,
        generator: np.random.Generator,
) -> Population:
    """Create every person, assign them to places and pick the initially infected.

    The infected are picked in a single sweep over the people in the order they are created (role by role, in
    registration order): each person is infected with probability ``infections left / people left``. That guarantees
    exactly `initialInfected` infections when the rounded role sizes add up to `totalPopulation`.

    Initially infected people start in Latent, with their first transition scheduled from day 0. Places left over from a
    previously built population are discarded first.

    :param roles: catalog of roles, with at least one role
    :param stages: disease stages, Latent must be registered
    :param totalPopulation: the number of people to create
    :param initialInfected: how many of them start infected
    :param generator: Seeded random number generated to use in this simulation
    :return: the population
    :raises ValueError: if there are no roles, the roles have no weight, the infected count is out of range, or a role
                        without a place category would get people
    """
    if len(roles) == 0:
        raise ValueError("no roles specified")
    if roles.totalWeight <= 0.0:
        raise ValueError("roles have no population fraction")
    if not 0 <= initialInfected <= totalPopulation:
        raise ValueError(f"cannot infect {initialInfected} people out of {totalPopulation}")

    roles.places.clearInstances()
    people: List[Person] = []
    compartments = Compartments()
    peopleLeft = totalPopulation
    infectionsLeft = initialInfected
    for role in roles:
        size = roles.roleSize(role, totalPopulation)
        logger.debug("Role %s has %s people", role.name, size)
        if size > 0 and role.category is None:
            raise ValueError(f"role {role.name}: no place to put its {size} people")

        for _ in range(size):
            person = Person(role, PlaceCatalog.allocateSlot(role.category, generator))
            people.append(person)
            compartments.uninfected += 1

            if infectionsLeft > 0 and distributions.uniform(generator) < infectionsLeft / peopleLeft:
                compartments.infect(person)
                person.nextTransition = float(stages.sampleDwellTime(DiseaseStage.LATENT, generator))
                infectionsLeft -= 1
            peopleLeft -= 1

    if len(people) != totalPopulation:
        logger.info("Role sizes add up to %s people instead of %s", len(people), totalPopulation)
    logger.debug(
        "Places created: %s",
        Lazy(lambda: {category.name: len(category.instances) for category in roles.places}),
    )
    return Population(people, compartments)
