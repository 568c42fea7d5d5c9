"""
Place categories (e.g. classroom, dormitory) and the concrete places people are assigned to.

Places are created lazily while the population is built. Each category keeps one open place; when it is full a new one
is created with a log-normally sampled capacity and the old one is never filled again.
"""
import logging
from typing import Dict, List, Optional

import numpy as np  # type: ignore

from epidemic_sim import distributions
from epidemic_sim.common import Issue, IssueSeverity, log_issue

logger = logging.getLogger(__name__)


class PlaceInstance:
    """
    One concrete place.

    :param category: the category this place belongs to
    :param capacity: how many people fit in this place
    """

    def __init__(self, category: "PlaceCategory", capacity: int):
        self.category = category
        self.capacity = capacity
        self.remaining = capacity
        self.occupants = 0
        self.infected = 0

    def __repr__(self):
        return (
            f"PlaceInstance({self.category.name!r}, capacity={self.capacity}, occupants={self.occupants}, "
            f"infected={self.infected})"
        )


class PlaceCategory:
    """
    A kind of place: how big they are and how easily the disease spreads inside them
    """

    def __init__(self, name: str, median: float, scatter: float, transmissivity: float):
        self.name = name
        self.median = median
        self.scatter = scatter
        self.sigma = distributions.logNormalSigma(median, scatter)
        self.transmissivity = transmissivity
        self.instances: List[PlaceInstance] = []
        self.openInstance: Optional[PlaceInstance] = None

    def clearInstances(self) -> None:
        self.instances = []
        self.openInstance = None

    def __repr__(self):
        return f"PlaceCategory({self.name!r}, {self.median}, {self.scatter}, {self.transmissivity})"


class PlaceCatalog:
    """
    All place categories, by name
    """

    def __init__(self):
        self._categories: Dict[str, PlaceCategory] = {}

    def __iter__(self):
        return iter(self._categories.values())

    def __len__(self) -> int:
        return len(self._categories)

    def register(
            self,
            name: str,
            median: float,
            scatter: float,
            transmissivity: float,
            issues: List[Issue],
    ) -> Optional[PlaceCategory]:
        """Add a place category

        :param name: unique name of the category
        :param median: median size of the places, non-positive values are replaced by 1.0
        :param scatter: scatter of the sizes, negative values are replaced by 0.0
        :param transmissivity: how easily the disease spreads, negative values are replaced by 0.0
        :param issues: list of issues, new issues are appended to it
        :return: the new category, or None if the name was already taken
        """
        describe = f"place {name} {median} {scatter}"
        if name in self._categories:
            log_issue(logger, f"{describe}: duplicate name", IssueSeverity.MEDIUM, issues)
            return None
        if median <= 0.0:
            log_issue(logger, f"{describe}: non-positive median?", IssueSeverity.MEDIUM, issues)
            median = 1.0
        if scatter < 0.0:
            log_issue(logger, f"{describe}: negative scatter?", IssueSeverity.MEDIUM, issues)
            scatter = 0.0
        if transmissivity < 0.0:
            log_issue(logger, f"{describe}: negative transmissivity?", IssueSeverity.MEDIUM, issues)
            transmissivity = 0.0

        category = PlaceCategory(name, median, scatter, transmissivity)
        self._categories[name] = category
        return category

    def findCategory(self, name: str) -> Optional[PlaceCategory]:
        """Category with that name, or None if there is none"""
        return self._categories.get(name)

    def clearInstances(self) -> None:
        """Forget the places created by a previous population, so a new one starts with empty places"""
        for category in self:
            category.clearInstances()

    @staticmethod
    def allocateSlot(category: PlaceCategory, generator: np.random.Generator) -> PlaceInstance:
        """Find room for one more person in a place of this category, creating a new place if the open one is full.

        A sampled capacity that rounds to zero is raised to one, so every place created holds at least the person that
        caused its creation.

        :param category: category to allocate from
        :param generator: Seeded random number generated to use in this simulation
        :return: the place the person was assigned to
        """
        place = category.openInstance
        if place is None or place.remaining <= 0:
            capacity = distributions.roundHalfUp(distributions.logNormal(generator, category.median, category.sigma))
            place = PlaceInstance(category, max(capacity, 1))
            category.instances.append(place)
            category.openInstance = place
            logger.debug("New %s with capacity %s", category.name, place.capacity)
        place.remaining -= 1
        place.occupants += 1
        return place
