import sys
import signal
import logging

from sta_viewer.main_setup import setup_error_handling
from sta_viewer.core import toolkit
from sta_viewer.core.errors import ResourceLoadError
from sta_viewer.core.version import PROG_NAME, PROG_PATH, TEXT_DOMAIN, VERSION_STRING
from sta_viewer.apps.sta_viewer_window import StaViewerWindow


def main() -> int:
    setup_error_handling()
    # Let Ctrl+C end the Qt loop
    signal.signal(signal.SIGINT, signal.SIG_DFL)

    app = toolkit.init()
    app.setApplicationDisplayName(PROG_NAME)
    try:
        try:
            window = StaViewerWindow(PROG_PATH, None, TEXT_DOMAIN)
        except ResourceLoadError as e:
            logging.error(f"Cannot start {VERSION_STRING}: {e}")
            return 1

        window.show()
        logging.info(f"Launched {VERSION_STRING}.")
        return toolkit.run()
    except Exception:
        logging.error("Fatal error in main loop", exc_info=True)
        return 1
    finally:
        toolkit.shutdown()


if __name__ == "__main__":
    sys.exit(main())
