"""
Disease stages and the table of their dwell time distributions.

Every infected person goes through the stages in a fixed order::

    Uninfected -> Latent -> Asymptomatic -> Symptomatic -> Bedridden -> Dead

with Recovered reachable from Bedridden through a daily recovery draw. Recovered and Dead are terminal.
"""
import logging
from enum import Enum
from typing import Dict, List, NamedTuple, Optional

import numpy as np  # type: ignore

from epidemic_sim import distributions
from epidemic_sim.common import Issue, IssueSeverity, log_issue

logger = logging.getLogger(__name__)


class DiseaseStage(Enum):
    """
    Stages of the illness, in the order they are reported
    """
    UNINFECTED = 0
    LATENT = 1
    ASYMPTOMATIC = 2
    SYMPTOMATIC = 3
    BEDRIDDEN = 4
    RECOVERED = 5
    DEAD = 6

    @property
    def label(self) -> str:
        return self.name.lower()

    @property
    def terminal(self) -> bool:
        return self in (DiseaseStage.RECOVERED, DiseaseStage.DEAD)


# Stages with a dwell time, i.e. the ones a person leaves on schedule
TIMED_STAGES = [DiseaseStage.LATENT, DiseaseStage.ASYMPTOMATIC, DiseaseStage.SYMPTOMATIC, DiseaseStage.BEDRIDDEN]

# Stages counted as currently infected
INFECTED_STAGES = TIMED_STAGES

# Every stage except Uninfected, in report order
COMPARTMENT_STAGES = TIMED_STAGES + [DiseaseStage.RECOVERED, DiseaseStage.DEAD]

# Where a person goes when the scheduled transition of a stage is due
NEXT_STAGE: Dict[DiseaseStage, DiseaseStage] = {
    DiseaseStage.UNINFECTED: DiseaseStage.LATENT,
    DiseaseStage.LATENT: DiseaseStage.ASYMPTOMATIC,
    DiseaseStage.ASYMPTOMATIC: DiseaseStage.SYMPTOMATIC,
    DiseaseStage.SYMPTOMATIC: DiseaseStage.BEDRIDDEN,
    DiseaseStage.BEDRIDDEN: DiseaseStage.DEAD,
}


class StageParameters(NamedTuple):
    """
    Dwell time distribution of a stage, plus the daily recovery probability (only used for Bedridden)
    """
    stage: DiseaseStage
    median: float
    scatter: float
    sigma: float
    recoveryProbability: float = 0.0


class DiseaseStageTable:
    """
    Catalog of the timed disease stages. Stages are registered once, duplicates are reported and ignored.
    """

    def __init__(self):
        self._stages: Dict[DiseaseStage, StageParameters] = {}

    def __contains__(self, stage: DiseaseStage) -> bool:
        return stage in self._stages

    def __len__(self) -> int:
        return len(self._stages)

    def register(
            self,
            stage: DiseaseStage,
            median: float,
            scatter: float,
            issues: List[Issue],
            recoveryProbability: Optional[float] = None,
    ) -> StageParameters:
        """Add the dwell time distribution of a stage to the table

        :param stage: the stage, must be one of the timed stages
        :param median: median number of days spent in the stage, non-positive values are replaced by 1.0
        :param scatter: scatter of the dwell time, negative values are replaced by 0.0
        :param issues: list of issues, new issues are appended to it
        :param recoveryProbability: daily chance of recovering while in this stage, kept within [0, 1]
        :return: the parameters in the table for that stage (the earlier ones if this was a duplicate)
        """
        if stage not in TIMED_STAGES:
            raise ValueError(f"{stage.label} does not have a dwell time")

        describe = f"{stage.label} {median} {scatter}"
        if stage in self._stages:
            log_issue(logger, f"{describe}: duplicate disease stage", IssueSeverity.MEDIUM, issues)
            return self._stages[stage]

        if median <= 0.0:
            log_issue(logger, f"{describe}: non-positive median?", IssueSeverity.MEDIUM, issues)
            median = 1.0
        if scatter < 0.0:
            log_issue(logger, f"{describe}: negative scatter?", IssueSeverity.MEDIUM, issues)
            scatter = 0.0
        if recoveryProbability is None:
            recoveryProbability = 0.0
        elif not 0.0 <= recoveryProbability <= 1.0:
            log_issue(
                logger,
                f"{describe}: recovery probability {recoveryProbability} not within [0, 1]",
                IssueSeverity.MEDIUM,
                issues,
            )
            recoveryProbability = min(max(recoveryProbability, 0.0), 1.0)

        parameters = StageParameters(
            stage=stage,
            median=median,
            scatter=scatter,
            sigma=distributions.logNormalSigma(median, scatter),
            recoveryProbability=recoveryProbability,
        )
        self._stages[stage] = parameters
        return parameters

    def lookup(self, stage: DiseaseStage) -> StageParameters:
        """Sampling parameters of a stage

        :param stage: a registered stage
        :return: the stage parameters
        :raises KeyError: if the stage was never registered
        """
        return self._stages[stage]

    def completeWithDefaults(self, issues: List[Issue]) -> None:
        """Register every timed stage that is still missing with median 1.0 and no scatter

        :param issues: list of issues, a warning is appended per missing stage
        """
        for stage in TIMED_STAGES:
            if stage not in self._stages:
                log_issue(logger, f"{stage.label}: disease stage not specified", IssueSeverity.MEDIUM, issues)
                self._stages[stage] = StageParameters(stage=stage, median=1.0, scatter=0.0, sigma=0.0)

    def sampleDwellTime(self, stage: DiseaseStage, generator: np.random.Generator) -> int:
        """Number of days a person entering `stage` will stay there.

        The result can be zero, there is no floor.

        :param stage: the stage being entered
        :param generator: Seeded random number generated to use in this simulation
        :return: a whole number of days
        """
        parameters = self.lookup(stage)
        return distributions.roundHalfUp(distributions.logNormal(generator, parameters.median, parameters.sigma))
