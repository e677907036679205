"""Entry point — glues pystray (daemon thread) with tkinter (main thread)."""

import ctypes
import logging
import os
import threading

from calendar_engine import CalendarEngine
from calendar_window import DatePickerWindow
from icon_gen import create_icon_image
from tray_icon import create_tray


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("MINI_DATE_PICKER_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # DPI awareness so fonts are crisp on Hi-DPI Windows monitors
    try:
        ctypes.windll.shcore.SetProcessDpiAwareness(1)
    except (AttributeError, OSError):
        pass

    # Engine calls happen on the tkinter thread only
    engine = CalendarEngine()
    picker = DatePickerWindow(engine)

    def on_show() -> None:
        picker.root.after(0, picker.toggle)

    def on_exit() -> None:
        def _quit() -> None:
            tray.stop()
            picker.root.destroy()
        picker.root.after(0, _quit)

    def on_settings() -> None:
        picker.root.after(0, picker.open_settings)

    icon_image = create_icon_image(engine.today.day)
    tray = create_tray(icon_image, engine.today, on_show, on_exit,
                       on_settings=on_settings)

    # Run pystray in a daemon thread so it doesn't block tkinter
    tray_thread = threading.Thread(target=tray.run, daemon=True)
    tray_thread.start()

    picker.root.mainloop()


if __name__ == "__main__":
    main()
