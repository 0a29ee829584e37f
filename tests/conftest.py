import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtCore import QTimer

from sta_viewer.core import toolkit

UI_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<ui version="4.0">
 <class>window1</class>
 <widget class="ClosableMainWindow" name="window1">
  <property name="windowTitle">
   <string>{title}</string>
  </property>
  <widget class="QWidget" name="centralwidget">
   <widget class="QPushButton" name="button2">
    <property name="text">
     <string>Refresh</string>
    </property>
   </widget>
  </widget>
  <widget class="QToolBar" name="toolbar1">
   <addaction name="toolbutton1"/>
  </widget>
  <action name="toolbutton1">
   <property name="text">
    <string>Quit</string>
   </property>
  </action>
 </widget>
 <customwidgets>
  <customwidget>
   <class>ClosableMainWindow</class>
   <extends>QMainWindow</extends>
   <header>sta_viewer/ui/closable_window.h</header>
  </customwidget>
 </customwidgets>
 <connections>
{connections}
 </connections>
</ui>
"""

CONNECTION = """  <connection>
   <sender>{sender}</sender>
   <signal>{signal}</signal>
   <receiver>{receiver}</receiver>
   <slot>{slot}</slot>
  </connection>"""

DEFAULT_CONNECTIONS = [
    ("window1", "closeRequested(QCloseEvent*)", "on_window1_destroy_event()"),
    ("toolbutton1", "triggered(bool)", "on_toolbutton1_clicked()"),
    ("button2", "clicked()", "on_button2_clicked()"),
]


def make_ui(connections=None, title="STA Viewer"):
    """Build a UI definition string. connections are (sender, signal, slot[, receiver])."""
    rows = []
    for conn in DEFAULT_CONNECTIONS if connections is None else connections:
        sender, signal, slot = conn[:3]
        receiver = conn[3] if len(conn) > 3 else "window1"
        rows.append(CONNECTION.format(sender=sender, signal=signal, receiver=receiver, slot=slot))
    return UI_TEMPLATE.format(title=title, connections="\n".join(rows))


@pytest.fixture
def app():
    application = toolkit.init([])
    yield application
    toolkit.shutdown()


@pytest.fixture
def run_loop(app):
    """Start the event loop and perform actions once it is running.

    A guard timer ends a loop nobody stopped with exit code 99.
    """
    def run(*actions, timeout_ms=5000):
        def fire():
            for action in actions:
                action()

        starter = QTimer()
        starter.setSingleShot(True)
        starter.timeout.connect(fire)
        guard = QTimer()
        guard.setSingleShot(True)
        guard.timeout.connect(lambda: app.exit(99))

        starter.start(0)
        guard.start(timeout_ms)
        try:
            return toolkit.run()
        finally:
            starter.stop()
            guard.stop()

    return run


@pytest.fixture
def ui_file(tmp_path):
    path = tmp_path / "window.ui"
    path.write_text(make_ui(), encoding="utf-8")
    return str(path)


@pytest.fixture(autouse=True)
def english_config(tmp_path, monkeypatch):
    """Pin the catalog language so results do not depend on the host locale."""
    from sta_viewer.core import lang_manager

    config = tmp_path / "config" / "window.json"
    config.parent.mkdir(parents=True, exist_ok=True)
    config.write_text('{"language": "en"}', encoding="utf-8")
    monkeypatch.setattr(lang_manager, "DEFAULT_CONFIG_PATH", str(config))
    yield str(config)
    for domain in list(lang_manager._installed):
        lang_manager.remove_text_domain(domain)
