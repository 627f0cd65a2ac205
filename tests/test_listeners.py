import threading

import pytest

from salvo.errors import ActionError
from salvo.listeners import StdoutListener
from salvo.models import Sampler, TimedOutcome

from fakes import SleepAction

SAMPLER = Sampler(name="probe", action=SleepAction())


def test_record_prints_duration(capsys):
    listener = StdoutListener()
    listener.record(SAMPLER, TimedOutcome(duration=0.1014))
    assert capsys.readouterr().out == "101.4ms\n"


def test_exit_prints_summary(capsys):
    listener = StdoutListener(echo_samples=False)
    listener.record(SAMPLER, TimedOutcome(duration=0.5))
    listener.record(SAMPLER, TimedOutcome(duration=0.25, error=ActionError("status code 500")))
    summary = listener.exit()

    out = capsys.readouterr().out.splitlines()
    assert out == ["error_count: 1", "min: 250.0ms", "max: 500.0ms", "avg: 375"]
    assert summary.count == 2


def test_exit_without_samples_does_not_divide(capsys):
    summary = StdoutListener().exit()
    assert summary.empty
    assert "avg: n/a (no samples)" in capsys.readouterr().out


def test_exit_twice_raises():
    listener = StdoutListener()
    listener.exit()
    with pytest.raises(RuntimeError):
        listener.exit()


def test_record_after_exit_raises():
    listener = StdoutListener()
    listener.exit()
    with pytest.raises(RuntimeError):
        listener.record(SAMPLER, TimedOutcome(duration=0.1))


def test_concurrent_records_are_not_lost(capsys):
    listener = StdoutListener(echo_samples=False)

    def hammer():
        for _ in range(500):
            listener.record(SAMPLER, TimedOutcome(duration=0.001))

    threads = [threading.Thread(target=hammer) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(listener.entries) == 4000
    assert listener.exit().count == 4000


def test_metrics_callback_called_on_exit():
    seen = []
    listener = StdoutListener(metrics_callback=seen.append, echo_samples=False)
    listener.record(SAMPLER, TimedOutcome(duration=0.5))
    listener.exit()
    assert seen[0]["count"] == 1
