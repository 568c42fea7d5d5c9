# Pylint is complaining about duplicated lines, but they are all imports
# pylint: disable=duplicate-code
import matplotlib
import numpy as np
import pytest

from epidemic_sim import loaders

matplotlib.use("Agg")


SCENARIO = """
population 100;
infected 5;
place classroom 10 2 0.1;
role student 1 classroom;
latent 2 0;
asymptomatic 3 0;
symptomatic 3 0 0;
bedridden 5 0 1.0;
end 1;
"""


def make_config(population=100, infected=5, median=10, scatter=2, transmissivity=0.1, bedridden_recovery=1.0, end=1):
    """Scenario configuration with some values replaced"""
    return f"""
population {population};
infected {infected};
place classroom {median} {scatter} {transmissivity};
role student 1 classroom;
latent 2 0;
asymptomatic 3 0;
symptomatic 3 0 0;
bedridden 5 0 {bedridden_recovery};
end {end};
"""


@pytest.fixture
def scenario_config():
    yield SCENARIO


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "scenario.txt"
    path.write_text(SCENARIO)
    yield path


@pytest.fixture
def scenario_model():
    model, issues = loaders.readModel(SCENARIO)
    assert issues == []
    yield model


@pytest.fixture
def model_factory():
    def factory(**kwargs):
        model, issues = loaders.readModel(make_config(**kwargs))
        assert issues == []
        return model
    yield factory


@pytest.fixture
def generator():
    yield np.random.default_rng(42)
