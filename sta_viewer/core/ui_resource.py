"""
UI definition resources.

A resource is a Qt Designer .ui document, read from a file or from an
in-memory string. Connections whose receiver is the form itself are handler
declarations: the slot names the handler that the window controller provides.
They are taken out of the document before uic builds the widgets, so uic never
looks the handlers up itself. All other connections are left to uic.
"""

import io
import os
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from xml.etree import ElementTree

from PyQt6 import uic
from PyQt6.QtCore import QObject, pyqtBoundSignal

from sta_viewer.core.errors import ResourceLoadError

logger = logging.getLogger("UiResource")


class LoadMode(Enum):
    FILE = "file"
    BUFFER = "buffer"


@dataclass(frozen=True)
class HandlerDeclaration:
    sender: str
    signal: str
    handler: str


@dataclass(frozen=True)
class SignalBinding:
    declaration: HandlerDeclaration
    sender: QObject
    signal: pyqtBoundSignal


@dataclass(frozen=True)
class LoadedUi:
    tree: QObject  # top-level widget of the document
    widget: QObject  # requested root, or the top-level widget
    bindings: tuple


def find_object(tree: QObject, name: str) -> Optional[QObject]:
    if tree.objectName() == name:
        return tree
    return tree.findChild(QObject, name)


def _strip_signature(text: Optional[str]) -> str:
    return (text or "").split("(", 1)[0].strip()


@dataclass(frozen=True)
class UiResource:
    path_or_data: Union[str, bytes]
    root: Optional[str] = None
    domain: Optional[str] = None
    localedir: Optional[str] = None
    load_mode: LoadMode = LoadMode.FILE

    @property
    def source(self) -> str:
        if self.load_mode is LoadMode.FILE:
            return os.fsdecode(self.path_or_data)
        return "<buffer>"

    def read(self) -> bytes:
        if self.load_mode is LoadMode.BUFFER:
            data = self.path_or_data
            return data.encode("utf-8") if isinstance(data, str) else bytes(data)
        try:
            with open(self.path_or_data, "rb") as f:
                return f.read()
        except OSError as e:
            raise ResourceLoadError(self.source, f"cannot read UI definition: {e.strerror or e}") from e

    def parse(self):
        """Return (document, handler declarations) with the declarations removed from the document."""
        try:
            doc = ElementTree.fromstring(self.read())
        except ElementTree.ParseError as e:
            raise ResourceLoadError(self.source, f"malformed UI definition: {e}") from e

        if doc.tag != "ui":
            raise ResourceLoadError(self.source, f"expected a <ui> document, found <{doc.tag}>")
        top = doc.find("widget")
        if top is None or not top.get("name"):
            raise ResourceLoadError(self.source, "UI definition has no named top-level widget")
        form_name = top.get("name")

        declarations = []
        connections = doc.find("connections")
        if connections is not None:
            for conn in list(connections):
                if conn.findtext("receiver") != form_name:
                    continue
                decl = HandlerDeclaration(
                    sender=(conn.findtext("sender") or "").strip(),
                    signal=_strip_signature(conn.findtext("signal")),
                    handler=_strip_signature(conn.findtext("slot")),
                )
                if not (decl.sender and decl.signal and decl.handler):
                    raise ResourceLoadError(self.source, f"incomplete connection {decl}")
                declarations.append(decl)
                connections.remove(conn)
        return doc, declarations

    def load(self) -> LoadedUi:
        doc, declarations = self.parse()
        buffer = io.BytesIO(ElementTree.tostring(doc, encoding="utf-8"))
        try:
            tree = uic.loadUi(buffer)
        except Exception as e:
            raise ResourceLoadError(self.source, f"cannot build widgets: {e}") from e

        widget = tree
        if self.root is not None:
            widget = find_object(tree, self.root)
            if widget is None:
                raise ResourceLoadError(self.source, f"root widget '{self.root}' not found")

        bindings = []
        for decl in declarations:
            if find_object(tree, decl.sender) is None:
                raise ResourceLoadError(self.source, f"handler {decl.handler}: unknown sender '{decl.sender}'")
            sender = find_object(widget, decl.sender)
            if sender is None:
                logger.debug(f"Skipping {decl.handler}: '{decl.sender}' is outside root '{self.root}'")
                continue
            signal = getattr(sender, decl.signal, None)
            if not isinstance(signal, pyqtBoundSignal):
                raise ResourceLoadError(
                    self.source,
                    f"handler {decl.handler}: '{decl.sender}' has no signal '{decl.signal}'",
                )
            bindings.append(SignalBinding(decl, sender, signal))

        logger.debug(f"Loaded {self.source}: {len(bindings)} handler(s) declared")
        return LoadedUi(tree=tree, widget=widget, bindings=tuple(bindings))
