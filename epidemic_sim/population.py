"""
People and the aggregate counts of people in each disease stage.
"""
from typing import TYPE_CHECKING, Dict, List, Optional, Set

from epidemic_sim.disease import COMPARTMENT_STAGES, INFECTED_STAGES, DiseaseStage
from epidemic_sim.places import PlaceInstance

if TYPE_CHECKING:
    from epidemic_sim.roles import Role


class Person:
    """
    Someone in the population. The role and the place are fixed when the person is created.

    :param role: the role this person belongs to
    :param place: the place this person occupies
    """

    def __init__(self, role: "Role", place: PlaceInstance):
        self.role = role
        self.place = place
        self.stage = DiseaseStage.UNINFECTED
        self.nextTransition: Optional[float] = None

    def __repr__(self):
        return f"Person({self.role.name!r}, {self.stage.label}, nextTransition={self.nextTransition})"


class Compartments:
    """
    How many people are uninfected, and who is in every other stage.

    All stage changes should go through :meth:`infect` and :meth:`move` so the counts and the per place infected
    estimates stay in sync with the stage stored in each person.
    """

    def __init__(self, uninfected: int = 0):
        self.uninfected = uninfected
        self.members: Dict[DiseaseStage, Set[Person]] = {stage: set() for stage in COMPARTMENT_STAGES}

    def __getitem__(self, stage: DiseaseStage) -> Set[Person]:
        return self.members[stage]

    def count(self, stage: DiseaseStage) -> int:
        if stage == DiseaseStage.UNINFECTED:
            return self.uninfected
        return len(self.members[stage])

    def counts(self) -> Dict[DiseaseStage, int]:
        """Number of people in each stage, Uninfected first"""
        return {stage: self.count(stage) for stage in DiseaseStage}

    def total(self) -> int:
        return self.uninfected + sum(len(members) for members in self.members.values())

    def currentlyInfected(self) -> int:
        """Number of people in one of the infected (non terminal) stages"""
        return sum(len(self.members[stage]) for stage in INFECTED_STAGES)

    def infect(self, person: Person) -> None:
        """Move an uninfected person into Latent"""
        assert person.stage == DiseaseStage.UNINFECTED, f"{person} is already infected"
        self.uninfected -= 1
        person.stage = DiseaseStage.LATENT
        self.members[DiseaseStage.LATENT].add(person)
        person.place.infected += 1

    def move(self, person: Person, stage: DiseaseStage) -> None:
        """Move an infected person to another stage

        :param person: someone who is neither uninfected nor in a terminal stage
        :param stage: the new stage
        """
        assert person.stage in INFECTED_STAGES, f"{person} cannot change stage"
        self.members[person.stage].remove(person)
        self.members[stage].add(person)
        person.stage = stage
        if stage.terminal:
            person.place.infected -= 1
            person.nextTransition = None


class Population:
    """
    Every person of a run, in creation order, and the compartments they are counted in
    """

    def __init__(self, people: List[Person], compartments: Compartments):
        self.people = people
        self.compartments = compartments

    def __len__(self) -> int:
        return len(self.people)

    def __iter__(self):
        return iter(self.people)
