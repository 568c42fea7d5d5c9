"""This module contains functions and classes to read and check the model configuration.

The configuration is a sequence of clauses, each one starting with a keyword and ending with a semicolon::

    population 100;
    infected 5;
    place classroom 10 2 0.1;
    role student 1 classroom;
    latent 2 0;
    asymptomatic 3 0;
    symptomatic 3 0 0;
    bedridden 5 0 1.0;
    end 30;

Clauses can come in any order, except that roles must come after the places they use. Problems in the input are
reported as issues and replaced by default values, so a run is always possible once the text was read.
"""
import logging
import re
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from epidemic_sim.common import Issue, IssueSeverity, log_issue
from epidemic_sim.disease import DiseaseStage, DiseaseStageTable
from epidemic_sim.places import PlaceCatalog
from epidemic_sim.roles import RoleCatalog
from epidemic_sim.simulation import EpidemicModel

logger = logging.getLogger(__name__)

Describe = Callable[[], str]

SEMICOLON = ";"
TOKEN_PATTERN = re.compile(r";|[^\s;]+")
NAME_PATTERN = re.compile(r"[A-Za-z][0-9A-Za-z]*")
INT_PATTERN = re.compile(r"-?[0-9]+")
FLOAT_PATTERN = re.compile(r"-?(([0-9]+\.[0-9]*)|(\.[0-9]+)|([0-9]+))")

DEFAULT_NAME = "???"
DEFAULT_FLOAT = 9.9999

# keyword -> (stage, does the clause carry a recovery probability)
STAGE_KEYWORDS = {
    "latent": (DiseaseStage.LATENT, False),
    "asymptomatic": (DiseaseStage.ASYMPTOMATIC, False),
    "symptomatic": (DiseaseStage.SYMPTOMATIC, True),
    "bedridden": (DiseaseStage.BEDRIDDEN, True),
}


def tokenize(text: str) -> List[str]:
    """Split the configuration text into words and semicolons

    >>> tokenize("place a 1 2 3;end 4 ;")
    ['place', 'a', '1', '2', '3', ';', 'end', '4', ';']
    """
    return TOKEN_PATTERN.findall(text)


class TokenStream:
    """
    Reads typed values out of a list of tokens. Every read takes a default to return and a function describing the
    value being read, which is only called if something is wrong.

    :param tokens: output of :func:`tokenize`
    :param issues: list of issues, problems found are appended to it
    """

    def __init__(self, tokens: List[str], issues: List[Issue]):
        self.tokens = tokens
        self.position = 0
        self.issues = issues

    def hasNext(self) -> bool:
        return self.position < len(self.tokens)

    def peek(self) -> Optional[str]:
        return self.tokens[self.position] if self.hasNext() else None

    def warn(self, description: str) -> None:
        log_issue(logger, description, IssueSeverity.MEDIUM, self.issues)

    def _nextMatching(self, pattern, kind: str, describe: Describe, skip: bool = True) -> Optional[str]:
        """Next token if it matches `pattern`. A token that does not match is consumed (with a warning) only if `skip`
        is set, otherwise it is left for the next read."""
        token = self.peek()
        if token is None or token == SEMICOLON:
            self.warn(describe())
            return None
        if pattern.fullmatch(token) is None:
            if skip:
                self.position += 1
                self.warn(f"{describe()}: {kind} expected, skipping {token}")
            else:
                self.warn(describe())
            return None
        self.position += 1
        return token

    def nextName(self, default: str, describe: Describe) -> str:
        token = self._nextMatching(NAME_PATTERN, "name", describe)
        return default if token is None else token

    def nextInt(self, default: int, describe: Describe) -> int:
        token = self._nextMatching(INT_PATTERN, "int", describe)
        return default if token is None else int(token)

    def nextFloat(self, default: float, describe: Describe) -> float:
        token = self._nextMatching(FLOAT_PATTERN, "float", describe, skip=False)
        return default if token is None else float(token)

    def tryLiteral(self) -> bool:
        """Consume a semicolon if it is the next token

        :return: True if there was a semicolon
        """
        if self.peek() == SEMICOLON:
            self.position += 1
            return True
        return False

    def expectLiteral(self, describe: Describe) -> None:
        if not self.tryLiteral():
            self.warn(describe())

    def skipClause(self) -> List[str]:
        """Skip everything up to and including the next semicolon

        :return: the skipped tokens, without the semicolon
        """
        skipped = []
        while self.hasNext() and not self.tryLiteral():
            skipped.append(self.tokens[self.position])
            self.position += 1
        return skipped


class _Scalars:
    def __init__(self):
        self.population: Optional[int] = None
        self.infected: Optional[int] = None
        self.days: Optional[float] = None


def _readScalar(stream: TokenStream, scalars: _Scalars, keyword: str) -> None:
    attribute = {"population": "population", "infected": "infected", "end": "days"}[keyword]
    if keyword == "end":
        value: Union[int, float] = stream.nextFloat(1.0, lambda: f"{keyword}: missing number")
    else:
        value = stream.nextInt(1, lambda: f"{keyword}: missing integer")
    stream.expectLiteral(lambda: f"{keyword} {value}: missing ;")

    if getattr(scalars, attribute) is not None:
        stream.warn(f"{keyword} specified more than once")
        return
    if value <= 0:
        stream.warn(f"{keyword} {value}: not positive")
        value = 1
    setattr(scalars, attribute, value)


def _readPlace(stream: TokenStream, places: PlaceCatalog) -> None:
    name = stream.nextName(DEFAULT_NAME, lambda: "place with no name")
    median = stream.nextFloat(DEFAULT_FLOAT, lambda: f"place {name}: not followed by median")
    scatter = stream.nextFloat(DEFAULT_FLOAT, lambda: f"place {name} {median}: not followed by scatter")
    transmissivity = stream.nextFloat(
        DEFAULT_FLOAT,
        lambda: f"place {name} {median} {scatter}: not followed by transmissivity",
    )
    stream.expectLiteral(lambda: f"place {name} {median} {scatter} {transmissivity}: missing semicolon")
    places.register(name, median, scatter, transmissivity, stream.issues)


def _readRole(stream: TokenStream, roles: RoleCatalog) -> None:
    name = stream.nextName(DEFAULT_NAME, lambda: "role with no name")
    fraction = stream.nextFloat(DEFAULT_FLOAT, lambda: f"role {name}: not followed by fraction")

    placeNames = []
    terminated = False
    while stream.hasNext():
        if stream.tryLiteral():
            terminated = True
            break
        placeNames.append(stream.nextName(DEFAULT_NAME, lambda: f"role {name}: place name expected"))
    if not terminated:
        stream.warn(f"{name}: missing semicolon?")

    chosen = next((placeName for placeName in placeNames if roles.places.findCategory(placeName) is not None), None)
    if chosen is None and placeNames:
        chosen = placeNames[0]
    for placeName in placeNames:
        if placeName == chosen:
            continue
        if roles.places.findCategory(placeName) is None:
            stream.warn(f"{name} {placeName}: undefined place?")
        else:
            logger.info("role %s: only place %s is used, ignoring %s", name, chosen, placeName)
    roles.register(name, fraction, chosen, stream.issues)


def _readStage(stream: TokenStream, stages: DiseaseStageTable, keyword: str) -> None:
    stage, hasRecovery = STAGE_KEYWORDS[keyword]
    median = stream.nextFloat(DEFAULT_FLOAT, lambda: f"{keyword}: not followed by median")
    scatter = stream.nextFloat(DEFAULT_FLOAT, lambda: f"{keyword} {median}: not followed by scatter")
    recovery = None
    if hasRecovery:
        recovery = stream.nextFloat(
            0.0,
            lambda: f"{keyword} {median} {scatter}: not followed by probability of recovery",
        )
    stream.expectLiteral(lambda: f"{keyword} {median} {scatter}: missing semicolon")
    stages.register(stage, median, scatter, stream.issues, recoveryProbability=recovery)


def readModel(text: str) -> Tuple[EpidemicModel, List[Issue]]:
    """Read the model configuration.

    :param text: the configuration text
    :return: the model and the issues found while reading it
    """
    issues: List[Issue] = []
    stream = TokenStream(tokenize(text), issues)
    scalars = _Scalars()
    places = PlaceCatalog()
    roles = RoleCatalog(places)
    stages = DiseaseStageTable()

    while stream.hasNext():
        if stream.tryLiteral():
            continue
        keyword = stream.nextName(DEFAULT_NAME, lambda: "keyword expected")
        if keyword in ("population", "infected", "end"):
            _readScalar(stream, scalars, keyword)
        elif keyword == "place":
            _readPlace(stream, places)
        elif keyword == "role":
            _readRole(stream, roles)
        elif keyword in STAGE_KEYWORDS:
            _readStage(stream, stages, keyword)
        else:
            skipped = stream.skipClause()
            if keyword != DEFAULT_NAME:
                stream.warn(f"{keyword}: unknown keyword, skipping {' '.join(skipped)}".rstrip())

    if scalars.population is None:
        stream.warn("population not specified")
        scalars.population = 1
    if scalars.infected is None:
        stream.warn("infected not specified")
        scalars.infected = 0
    elif scalars.infected > scalars.population:
        stream.warn(f"infected {scalars.infected}: larger than population {scalars.population}")
        scalars.infected = 1
    if scalars.days is None:
        stream.warn("end not specified")
        scalars.days = 1.0
    stages.completeWithDefaults(issues)

    model = EpidemicModel(
        population=scalars.population,
        initialInfected=scalars.infected,
        days=float(scalars.days),
        places=places,
        roles=roles,
        stages=stages,
    )
    return model, issues


def readModelFile(path: Union[str, Path]) -> Tuple[EpidemicModel, List[Issue]]:
    """Read the model configuration from a file

    :param path: path to the configuration file
    :return: the model and the issues found while reading it
    :raises OSError: if the file cannot be read
    :raises UnicodeDecodeError: if the file is not text
    """
    with open(path, encoding="utf8") as fp:
        return readModel(fp.read())
