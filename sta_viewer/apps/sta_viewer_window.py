"""STA Viewer main window: closing the window or pressing Quit ends the application."""

from typing import Protocol

from sta_viewer.core import toolkit
from sta_viewer.components.template_window import TemplateWindow


class ViewerActions(Protocol):
    def on_window1_destroy_event(self, widget, event) -> None: ...

    def on_toolbutton1_clicked(self, widget, checked: bool = False) -> None: ...


class StaViewerWindow(TemplateWindow):
    def signal_handlers(self):
        handlers = super().signal_handlers()
        handlers.update({
            "on_window1_destroy_event": self.on_window1_destroy_event,
            "on_toolbutton1_clicked": self.on_toolbutton1_clicked,
        })
        return handlers

    def on_window1_destroy_event(self, widget, event) -> None:
        self.logger.debug("Window closed, stopping event loop.")
        toolkit.quit()

    def on_toolbutton1_clicked(self, widget, checked: bool = False) -> None:
        self.logger.debug("Quit pressed, stopping event loop.")
        toolkit.quit()
