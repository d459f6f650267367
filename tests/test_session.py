"""Tests for the session state holder."""

from resource_sampler.session import Session


def test_empty_session():
    session = Session()
    assert session.series("cpu-seconds") == []
    assert session.previous("cpu-seconds") == 0.0
    assert session.names() == []


def test_record_delta_appends_in_order():
    session = Session()
    for v in (3.0, 1.0, 2.0):
        session.record_delta("receive-bytes", v)
    assert session.series("receive-bytes") == [3.0, 1.0, 2.0]
    assert session.names() == ["receive-bytes"]


def test_series_returns_copy():
    session = Session()
    session.record_delta("receive-bytes", 1.0)
    session.series("receive-bytes").append(99.0)
    assert session.series("receive-bytes") == [1.0]


def test_update_cumulative_overwrites():
    session = Session()
    session.update_cumulative("cpu-seconds", 10.0)
    session.update_cumulative("cpu-seconds", 12.5)
    assert session.previous("cpu-seconds") == 12.5
    # cumulative updates never touch the series
    assert session.series("cpu-seconds") == []
