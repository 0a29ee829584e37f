import logging

import pytest
from PyQt6.QtWidgets import QApplication

from sta_viewer.core import toolkit
from sta_viewer.core.toolkit import LoopState, Toolkit


def test_init_is_guarded_against_double_init(app):
    assert toolkit.init([]) is app
    assert app is QApplication.instance()
    assert Toolkit().initialized


def test_last_window_closing_does_not_end_the_loop(app):
    assert app.quitOnLastWindowClosed() is False


def test_run_requires_init():
    toolkit.shutdown()
    with pytest.raises(RuntimeError):
        toolkit.run()


def test_quit_before_run_is_a_no_op(app, caplog):
    caplog.set_level(logging.DEBUG, logger="Toolkit")
    toolkit.quit()
    assert toolkit.state() is LoopState.IDLE
    assert "quit() ignored" in caplog.text


def test_quit_stops_running_loop(run_loop):
    seen = []
    code = run_loop(lambda: seen.append(toolkit.state()), toolkit.quit)
    assert code == 0
    assert seen == [LoopState.RUNNING]
    assert toolkit.state() is LoopState.STOPPED


def test_loop_runs_at_most_once_per_init(run_loop):
    assert run_loop(toolkit.quit) == 0
    with pytest.raises(RuntimeError):
        toolkit.run()


def test_shutdown_then_init_allows_another_run(run_loop):
    assert run_loop(toolkit.quit) == 0
    toolkit.shutdown()
    assert toolkit.state() is LoopState.IDLE
    toolkit.init([])
    assert run_loop(toolkit.quit) == 0
