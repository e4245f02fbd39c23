from unittest import mock

import pytest

from metiskit.timing import CpuTimer, Timers


def test_timer_accumulates_process_time():
    timer = CpuTimer()
    with mock.patch("time.process_time", side_effect=[1.0, 3.5, 10.0, 11.0]):
        timer.start()
        timer.stop()
        timer.start()
        timer.stop()
    assert timer.seconds == pytest.approx(3.5)
    assert not timer.running


def test_timer_real_clock_non_negative():
    timer = CpuTimer()
    with timer:
        sum(range(1000))
    assert timer.seconds >= 0.0


def test_timer_clear_resets():
    timer = CpuTimer(seconds=5.0)
    timer.start()
    timer.clear()
    assert timer.seconds == 0.0
    assert not timer.running


def test_stop_without_start_raises():
    with pytest.raises(RuntimeError):
        CpuTimer().stop()


def test_double_start_raises():
    timer = CpuTimer()
    timer.start()
    with pytest.raises(RuntimeError):
        timer.start()


def test_clear_all_resets_every_timer():
    timers = Timers()
    timers.total.seconds = 2.0
    timers.aux3.seconds = 1.0
    timers.clear_all()
    assert timers.total.seconds == 0.0
    assert timers.aux3.seconds == 0.0


def test_report_layout():
    timers = Timers()
    timers.total.seconds = 1.5
    text = timers.report()
    assert text.startswith("\nTiming Information ---")
    assert "\n Multilevel: \t\t   1.500" in text
    assert text.endswith("********************************************************************\n")
    assert "Aux1" not in text


def test_report_lists_phases_in_order():
    text = Timers().report()
    labels = ["Multilevel", "Coarsening", "Matching", "Contract", "Initial Partition",
              "Uncoarsening", "Refinement", "Projection", "Splitting"]
    positions = [text.index(label) for label in labels]
    assert positions == sorted(positions)