"""Entry point — glues pystray (daemon thread) with tkinter (main thread)."""

import ctypes
import logging
import os
import sys
import threading

from calendar_window import DatePickerWindow
from icon_gen import create_icon_image
from settings import load_settings
from tray_icon import create_tray

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False) -> None:
    """Set up root logging once; ``MINI_DATE_PICKER_DEBUG=1`` forces DEBUG."""
    env_debug = os.getenv("MINI_DATE_PICKER_DEBUG", "").lower() in ("1", "true", "yes")
    level = logging.DEBUG if (debug or env_debug) else logging.INFO
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if not root_logger.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def main() -> None:
    configure_logging(load_settings()["debug"])

    # DPI awareness so positions / fonts are crisp on Hi-DPI monitors
    if sys.platform == "win32":
        try:
            ctypes.windll.shcore.SetProcessDpiAwareness(1)
        except (AttributeError, OSError) as exc:
            logger.debug("DPI awareness unavailable: %s", exc)

    picker_win = DatePickerWindow()

    # Callbacks marshalled onto the tkinter main thread
    def on_show() -> None:
        picker_win.root.after(0, picker_win.toggle)

    def on_exit() -> None:
        def _quit() -> None:
            tray.stop()
            picker_win.root.destroy()
        picker_win.root.after(0, _quit)

    def on_settings() -> None:
        picker_win.root.after(0, picker_win.open_settings)

    def on_today() -> None:
        picker_win.root.after(0, picker_win.go_today)

    icon_image = create_icon_image()
    tray = create_tray(icon_image, on_show, on_exit,
                       on_settings=on_settings, on_today=on_today)

    # Run pystray in a daemon thread so it doesn't block tkinter
    tray_thread = threading.Thread(target=tray.run, daemon=True)
    tray_thread.start()
    logger.info("Mini Date Picker started")

    # tkinter main loop on the main thread
    picker_win.root.mainloop()


if __name__ == "__main__":
    main()
