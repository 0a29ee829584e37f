"""
Base window controller for UI definitions.

Every handler the UI definition declares is bound to an entry of the
controller's handler table. Subclasses fill the table through
signal_handlers(); declared handlers without an entry fall back to
default_handler(), which only reports that the handler is missing.
"""

import sys
import signal
import logging
import functools
from typing import Callable, Dict, Optional

from sta_viewer.core import toolkit
from sta_viewer.core.lang_manager import bind_text_domain
from sta_viewer.core.ui_resource import LoadMode, UiResource, find_object


class TemplateWindow:
    def __init__(self, path_or_data, root: Optional[str] = None, domain: Optional[str] = None,
                 localedir: Optional[str] = None, load_mode: LoadMode = LoadMode.FILE):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.resource = UiResource(path_or_data, root, domain, localedir, load_mode)

        # The catalog must be installed before uic translates the document
        self.lang = bind_text_domain(domain, localedir) if domain else None

        self.ui = self.resource.load()
        self.widget = self.ui.widget

        self._handlers: Dict[str, Callable] = {}
        table = self.signal_handlers()
        for binding in self.ui.bindings:
            name = binding.declaration.handler
            handler = self._handlers.get(name)
            if handler is None:
                handler = table.get(name) or functools.partial(self.default_handler, name)
                self._handlers[name] = handler
            binding.signal.connect(self._dispatch_to(handler, binding.sender))

        self.logger.debug(f"Bound {len(self._handlers)} handler(s) from {self.resource.source}")

    @staticmethod
    def _dispatch_to(handler: Callable, sender) -> Callable:
        def dispatch(*args):
            handler(sender, *args)
        return dispatch

    def signal_handlers(self) -> Dict[str, Callable]:
        """Handler name -> callable. Subclasses extend the base table."""
        return {}

    def default_handler(self, signal_name: str, widget, *args) -> None:
        self.logger.info(f"{signal_name}() is not implemented yet.")

    @property
    def handlers(self) -> Dict[str, Callable]:
        return dict(self._handlers)

    def get_widget(self, name: str):
        return find_object(self.ui.tree, name)

    def show(self) -> None:
        self.widget.show()


# Main program
if __name__ == "__main__":
    from sta_viewer.core.version import PROG_PATH, TEXT_DOMAIN

    logging.basicConfig(level=logging.INFO)
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    toolkit.init()
    TemplateWindow(PROG_PATH, None, TEXT_DOMAIN).show()
    sys.exit(toolkit.run())
