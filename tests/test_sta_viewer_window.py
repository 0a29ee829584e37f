import logging

import pytest

from sta_viewer.apps.sta_viewer_window import StaViewerWindow
from sta_viewer.core import toolkit
from sta_viewer.core.toolkit import LoopState
from sta_viewer.core.version import PROG_PATH, TEXT_DOMAIN


@pytest.fixture
def window(app):
    win = StaViewerWindow(PROG_PATH, None, TEXT_DOMAIN)
    win.show()
    yield win
    win.widget.hide()


def test_bundled_resource_binds_both_actions(window):
    assert window.handlers == {
        "on_window1_destroy_event": window.on_window1_destroy_event,
        "on_toolbutton1_clicked": window.on_toolbutton1_clicked,
    }
    assert window.widget.windowTitle() == "STA Viewer"


def test_closing_window_stops_loop(window, run_loop):
    code = run_loop(window.widget.close)
    assert code == 0
    assert toolkit.state() is LoopState.STOPPED


def test_close_is_idempotent_while_running(window, run_loop, caplog):
    caplog.set_level(logging.DEBUG, logger="Toolkit")
    code = run_loop(window.widget.close, lambda: window.on_window1_destroy_event(window.widget, None))
    assert code == 0
    assert toolkit.state() is LoopState.STOPPED
    assert "quit() ignored" in caplog.text


def test_quit_button_stops_loop(window, run_loop):
    code = run_loop(window.get_widget("toolbutton1").trigger)
    assert code == 0
    assert toolkit.state() is LoopState.STOPPED


def test_close_after_button_is_a_no_op(window, run_loop, caplog):
    assert run_loop(window.get_widget("toolbutton1").trigger) == 0

    caplog.set_level(logging.DEBUG, logger="Toolkit")
    window.widget.close()
    assert toolkit.state() is LoopState.STOPPED
    assert "quit() ignored, event loop is stopped." in caplog.text
