import math

import pytest

from epidemic_sim.disease import (
    COMPARTMENT_STAGES,
    NEXT_STAGE,
    TIMED_STAGES,
    DiseaseStage,
    DiseaseStageTable,
)


def test_stage_order():
    assert [stage.label for stage in DiseaseStage] == [
        "uninfected", "latent", "asymptomatic", "symptomatic", "bedridden", "recovered", "dead",
    ]
    assert COMPARTMENT_STAGES == list(DiseaseStage)[1:]


def test_terminal_stages():
    assert [stage for stage in DiseaseStage if stage.terminal] == [DiseaseStage.RECOVERED, DiseaseStage.DEAD]


def test_next_stage_never_skips():
    for stage in TIMED_STAGES[:-1]:
        assert NEXT_STAGE[stage].value == stage.value + 1
    assert NEXT_STAGE[DiseaseStage.BEDRIDDEN] == DiseaseStage.DEAD
    assert DiseaseStage.RECOVERED not in NEXT_STAGE
    assert DiseaseStage.DEAD not in NEXT_STAGE


def test_register():
    issues = []
    table = DiseaseStageTable()
    params = table.register(DiseaseStage.LATENT, 10.0, 2.0, issues)

    assert issues == []
    assert table.lookup(DiseaseStage.LATENT) == params
    assert params.median == 10.0
    assert params.scatter == 2.0
    assert params.sigma == pytest.approx(math.log(12.0 / 10.0))
    assert params.recoveryProbability == 0.0


@pytest.mark.parametrize("median", [0.0, -3.0])
def test_register_non_positive_median(median):
    issues = []
    params = DiseaseStageTable().register(DiseaseStage.LATENT, median, 0.0, issues)

    assert params.median == 1.0
    assert len(issues) == 1
    assert "non-positive median" in issues[0].description


def test_register_negative_scatter():
    issues = []
    params = DiseaseStageTable().register(DiseaseStage.LATENT, 3.0, -1.0, issues)

    assert params.scatter == 0.0
    assert params.sigma == 0.0
    assert len(issues) == 1
    assert "negative scatter" in issues[0].description


def test_register_duplicate_first_wins():
    issues = []
    table = DiseaseStageTable()
    table.register(DiseaseStage.BEDRIDDEN, 5.0, 0.0, issues, recoveryProbability=0.5)
    table.register(DiseaseStage.BEDRIDDEN, 9.0, 1.0, issues, recoveryProbability=0.1)

    assert len(issues) == 1
    assert "duplicate" in issues[0].description
    assert table.lookup(DiseaseStage.BEDRIDDEN).median == 5.0
    assert table.lookup(DiseaseStage.BEDRIDDEN).recoveryProbability == 0.5


@pytest.mark.parametrize("probability,expected", [(-0.5, 0.0), (1.5, 1.0)])
def test_register_recovery_out_of_range(probability, expected):
    issues = []
    params = DiseaseStageTable().register(DiseaseStage.BEDRIDDEN, 5.0, 0.0, issues, recoveryProbability=probability)

    assert params.recoveryProbability == expected
    assert len(issues) == 1


@pytest.mark.parametrize("stage", [DiseaseStage.UNINFECTED, DiseaseStage.RECOVERED, DiseaseStage.DEAD])
def test_register_untimed_stage(stage):
    with pytest.raises(ValueError):
        DiseaseStageTable().register(stage, 1.0, 0.0, [])


def test_lookup_missing():
    with pytest.raises(KeyError):
        DiseaseStageTable().lookup(DiseaseStage.LATENT)


def test_completeWithDefaults():
    issues = []
    table = DiseaseStageTable()
    table.register(DiseaseStage.LATENT, 4.0, 0.0, issues)
    table.completeWithDefaults(issues)

    assert len(table) == 4
    assert len(issues) == 3
    assert table.lookup(DiseaseStage.LATENT).median == 4.0
    assert table.lookup(DiseaseStage.BEDRIDDEN).median == 1.0
    assert table.lookup(DiseaseStage.BEDRIDDEN).recoveryProbability == 0.0


@pytest.mark.parametrize("median,expected", [(2.0, 2), (2.5, 3), (0.4, 0)])
def test_sampleDwellTime_no_scatter(generator, median, expected):
    table = DiseaseStageTable()
    table.register(DiseaseStage.ASYMPTOMATIC, median, 0.0, [])

    assert table.sampleDwellTime(DiseaseStage.ASYMPTOMATIC, generator) == expected


def test_sampleDwellTime_with_scatter(generator):
    table = DiseaseStageTable()
    table.register(DiseaseStage.SYMPTOMATIC, 5.0, 5.0, [])
    samples = [table.sampleDwellTime(DiseaseStage.SYMPTOMATIC, generator) for _ in range(500)]

    assert all(isinstance(sample, int) and sample >= 0 for sample in samples)
    assert len(set(samples)) > 1
