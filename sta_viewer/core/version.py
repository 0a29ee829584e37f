"""
STA Viewer - Version Constants
This file contains version information and the hardcoded program settings.
Update VERSION_PATCH when code changes are made.
"""

import os

APP_NAME = "STA Viewer"
VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0
VERSION = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"
VERSION_STRING = f"{APP_NAME} v{VERSION}"

# Set values as your own application.
PROG_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "resource", "sta-viewer.ui")
PROG_NAME = APP_NAME
TEXT_DOMAIN = "sta-viewer"
