"""Error types raised while building a window from a UI definition."""


class ResourceLoadError(Exception):
    """The UI definition could not be read, parsed or built into widgets."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message
