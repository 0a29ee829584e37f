"""
Main window that reports close requests as a signal.

QMainWindow only exposes closing through closeEvent(). UI definitions promote
their top-level window to this class so that the close can be bound to a
handler like any other widget signal.
"""

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QMainWindow


class ClosableMainWindow(QMainWindow):
    closeRequested = pyqtSignal(object)  # QCloseEvent

    def closeEvent(self, event):
        self.closeRequested.emit(event)
        super().closeEvent(event)
