"""
Process-wide GUI toolkit state.

One QApplication exists per process. init()/shutdown() bracket its use and
run()/quit() drive the event loop, which runs at most once per init().
"""

import sys
import logging
from enum import Enum
from PyQt6.QtWidgets import QApplication


class LoopState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class Toolkit:
    """Singleton owner of the QApplication and the event loop state."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self.logger = logging.getLogger("Toolkit")
        self.app = None
        self.state = LoopState.IDLE

    @property
    def initialized(self) -> bool:
        return self.app is not None

    def init(self, argv=None) -> QApplication:
        """Create (or adopt) the QApplication. Repeated calls return the same one."""
        if self.app is not None:
            self.logger.debug("init() called twice; keeping the existing QApplication.")
            return self.app

        app = QApplication.instance()
        if app is None:
            app = QApplication(list(argv) if argv is not None else sys.argv)
        # Only the window handlers end the loop
        app.setQuitOnLastWindowClosed(False)

        self.app = app
        self.state = LoopState.IDLE
        self.logger.info("GUI toolkit initialized.")
        return app

    def run(self) -> int:
        if self.app is None:
            raise RuntimeError("Toolkit.init() must be called before run().")
        if self.state is not LoopState.IDLE:
            raise RuntimeError(f"Event loop cannot start from state '{self.state.value}'.")

        self.state = LoopState.RUNNING
        self.logger.debug("Entering event loop.")
        try:
            code = self.app.exec()
        finally:
            self.state = LoopState.STOPPED
        self.logger.info(f"Event loop exited with code {code}.")
        return code

    def quit(self) -> None:
        """Stop the running loop. A no-op when the loop is not running."""
        if self.state is not LoopState.RUNNING:
            self.logger.debug(f"quit() ignored, event loop is {self.state.value}.")
            return
        self.state = LoopState.STOPPED
        self.app.exit(0)

    def shutdown(self) -> None:
        if self.app is None:
            return
        if self.state is LoopState.RUNNING:
            self.quit()
        # The QApplication itself lives until interpreter exit; Qt does not
        # support recreating it in the same process.
        self.app.processEvents()
        self.app = None
        self.state = LoopState.IDLE
        self.logger.info("GUI toolkit shut down.")


def init(argv=None) -> QApplication:
    return Toolkit().init(argv)


def shutdown() -> None:
    Toolkit().shutdown()


def run() -> int:
    return Toolkit().run()


def quit() -> None:
    Toolkit().quit()


def state() -> LoopState:
    return Toolkit().state
