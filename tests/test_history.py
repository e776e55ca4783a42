import dataclasses

import pytest

from weldmaster.services.weld_engine import (
    Parameters,
    PassHistory,
    ProcessType,
    UndefinedMetricError,
)


def _commit(history, heat_input=0.5, length=100.0):
    params = Parameters(process=ProcessType.TIG, voltage=12, current=90, length=length)
    return history.commit(params, 30.0, heat_input)


def test_commit_inserts_at_head_with_snapshot():
    history = PassHistory()
    first = _commit(history, heat_input=0.1)
    second = _commit(history, heat_input=0.2)

    assert history.all() == (second, first)
    assert second.process is ProcessType.TIG
    assert second.k_factor == ProcessType.TIG.efficiency
    assert second.elapsed_time == 30.0


def test_commit_copies_parameters():
    history = PassHistory()
    params = Parameters(voltage=20, current=150, length=100)
    welding_pass = history.commit(params, 10.0, 0.24)
    params.voltage = 99
    assert welding_pass.voltage == 20


def test_commit_requires_defined_heat_input():
    history = PassHistory()
    with pytest.raises(UndefinedMetricError):
        history.commit(Parameters(), 0.0, None)
    assert len(history) == 0


def test_n_commits_reverse_order_unique_ids():
    history = PassHistory()
    committed = [_commit(history, heat_input=i / 10) for i in range(1, 6)]
    assert list(history.all()) == list(reversed(committed))
    assert len({p.id for p in history}) == 5


def test_passes_are_immutable():
    history = PassHistory()
    welding_pass = _commit(history)
    with pytest.raises(dataclasses.FrozenInstanceError):
        welding_pass.heat_input = 1.0


def test_remove_keeps_relative_order():
    history = PassHistory()
    a, b, c, d = (_commit(history, heat_input=x) for x in (0.1, 0.2, 0.3, 0.4))
    assert history.remove(b.id)
    assert history.all() == (d, c, a)


def test_remove_unknown_id_is_no_op():
    history = PassHistory()
    _commit(history)
    assert not history.remove("does-not-exist")
    assert len(history) == 1


def test_all_is_a_read_only_copy():
    history = PassHistory()
    _commit(history)
    snapshot = history.all()
    _commit(history)
    assert len(snapshot) == 1
    assert isinstance(snapshot, tuple)
