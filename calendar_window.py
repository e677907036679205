"""Date-picker window (tkinter) driven by a CalendarEngine."""

from datetime import date
from tkinter import font as tkfont
import logging
import tkinter as tk

from calendar_engine import CalendarEngine
from calendar_logic import (
    MONDAY,
    SUNDAY,
    DayCell,
    day_of_year,
    iso_week_numbers,
    weekday_headers,
)
from settings import load_settings, save_settings

log = logging.getLogger("mini_date_picker.calendar_window")

MAX_WEEKS = 6

# Colours
LIGHT = {
    "bg": "white", "header_bg": "#F3F3F3", "fg": "black", "dim_fg": "#AAAAAA",
    "weekend_fg": "#CC0000", "accent": "#0078D4", "sel_fg": "white",
    "wn_fg": "#888888", "footer_fg": "#555555",
}
DARK = {
    "bg": "#202020", "header_bg": "#2B2B2B", "fg": "#E6E6E6", "dim_fg": "#666666",
    "weekend_fg": "#FF6B6B", "accent": "#3A96DD", "sel_fg": "white",
    "wn_fg": "#999999", "footer_fg": "#AAAAAA",
}


class DatePickerWindow:
    """Single-month date picker; renders whatever grid the engine publishes."""

    def __init__(self, engine: CalendarEngine, settings_path: str | None = None) -> None:
        self.engine = engine
        self._settings_path = settings_path

        self.root = tk.Tk()
        self.root.title(self._title())
        self.root.resizable(False, False)
        self.root.attributes("-topmost", True)

        settings = load_settings(settings_path)
        self._dark: bool = settings["dark_mode"]
        self._show_weeks: bool = settings["show_week_numbers"]
        self._saved_x: int | None = settings["window_x"]
        self._saved_y: int | None = settings["window_y"]
        self._palette = DARK if self._dark else LIGHT

        self._setup_fonts()

        # Widget-to-identity mapping, refilled on every grid change
        self._cell_identities: dict[int, str] = {}
        # (widget, bg role, fg role) for palette switches
        self._themed: list[tuple[tk.Widget, str, str | None]] = []

        _tmp = tk.Label(self.root, text="00", font=self.font_normal, width=3)
        _tmp.update_idletasks()
        self._cell_w = _tmp.winfo_reqwidth()
        self._cell_h = _tmp.winfo_reqheight()
        _tmp.destroy()

        engine.configure(label_format=settings["label_format"],
                         first_weekday=settings["first_weekday"])
        self._build_shell()

        engine.add_grid_listener(self._on_grid_changed)
        engine.add_selection_listener(self._on_date_selected)

        self.root.bind("<Escape>", self._on_escape)
        self.root.protocol("WM_DELETE_WINDOW", self.hide)
        self.root.withdraw()

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def _setup_fonts(self) -> None:
        families = tkfont.families(self.root)
        base = "Segoe UI" if "Segoe UI" in families else "TkDefaultFont"
        self.font_normal = tkfont.Font(family=base, size=9)
        self.font_bold = tkfont.Font(family=base, size=9, weight="bold")
        self.font_header = tkfont.Font(family=base, size=10, weight="bold")
        self.font_nav = tkfont.Font(family=base, size=12, weight="bold")
        self.font_wn = tkfont.Font(family=base, size=8)

    def _title(self) -> str:
        return f"Mini Date Picker  Day: {day_of_year(self.engine.today)}"

    def _themed_widget(self, widget: tk.Widget, bg: str, fg: str | None = None) -> tk.Widget:
        self._themed.append((widget, bg, fg))
        return widget

    # ------------------------------------------------------------------
    # Build shell (once) — nav bar + pooled day grid + footer
    # ------------------------------------------------------------------
    def _build_shell(self) -> None:
        p = self._palette
        self.root.configure(bg=p["bg"])

        outer = self._themed_widget(tk.Frame(self.root, bg=p["bg"]), "bg")
        outer.pack(padx=6, pady=4)

        # Navigation row: ◀◀  ◀  2022.05  Today  ▶  ▶▶
        nav = self._themed_widget(tk.Frame(outer, bg=p["bg"]), "bg")
        nav.pack(fill="x", pady=(0, 2))

        def _nav_button(text: str, command, side: str, font=None, fg: str = "fg") -> None:
            btn = tk.Label(nav, text=text, font=font or self.font_nav,
                           bg=p["bg"], fg=p[fg], cursor="hand2")
            btn.pack(side=side, padx=6)
            btn.bind("<Button-1>", lambda _e: command())
            self._themed_widget(btn, "bg", fg)

        _nav_button("\u25C0\u25C0", self.engine.go_to_previous_year, "left")
        _nav_button("\u25C0", self.engine.go_to_previous_month, "left")
        _nav_button("\u25B6\u25B6", self.engine.go_to_next_year, "right")
        _nav_button("\u25B6", self.engine.go_to_next_month, "right")
        _nav_button("Today", self.engine.go_to_today, "right",
                    font=self.font_bold, fg="accent")

        self.header = tk.Label(nav, font=self.font_header, bg=p["header_bg"], fg=p["fg"])
        self.header.pack(side="left", expand=True, fill="x")
        self._themed_widget(self.header, "header_bg", "fg")

        grid = self._themed_widget(tk.Frame(outer, bg=p["bg"]), "bg")
        grid.pack()

        self.wk_header = tk.Label(grid, text="Wk", font=self.font_bold,
                                  bg=p["bg"], fg=p["wn_fg"], width=3)
        self.wk_header.grid(row=0, column=0)
        self._themed_widget(self.wk_header, "bg", "wn_fg")

        self.day_headers: list[tk.Label] = []
        for col in range(7):
            lbl = tk.Label(grid, font=self.font_bold, width=3)
            lbl.grid(row=0, column=col + 1)
            self.day_headers.append(lbl)
        self._apply_day_headers()

        self.week_nums: list[tk.Label] = []
        self.day_cells: list[tk.Canvas] = []
        for r in range(MAX_WEEKS):
            wn = tk.Label(grid, font=self.font_wn, bg=p["bg"], fg=p["wn_fg"], width=3)
            wn.grid(row=r + 1, column=0)
            self._themed_widget(wn, "bg", "wn_fg")
            self.week_nums.append(wn)
            for c in range(7):
                cell = tk.Canvas(grid, width=self._cell_w, height=self._cell_h,
                                 bg=p["bg"], highlightthickness=0, borderwidth=0)
                cell.grid(row=r + 1, column=c + 1)
                cell.bind("<ButtonPress-1>", self._on_press)
                self.day_cells.append(cell)

        self._apply_week_visibility()

        self._footer_label = tk.Label(outer, font=self.font_normal,
                                      bg=p["bg"], fg=p["footer_fg"])
        self._footer_label.pack(pady=(4, 0))
        self._themed_widget(self._footer_label, "bg", "footer_fg")

    def _apply_day_headers(self) -> None:
        p = self._palette
        for lbl, abbr in zip(self.day_headers, weekday_headers(self.engine.first_weekday)):
            fg = p["weekend_fg"] if abbr in ("Sat", "Sun") else p["fg"]
            lbl.configure(text=abbr, bg=p["bg"], fg=fg)

    def _apply_week_visibility(self) -> None:
        for lbl in [self.wk_header, *self.week_nums]:
            if self._show_weeks:
                lbl.grid()
            else:
                lbl.grid_remove()

    def _apply_palette(self) -> None:
        p = self._palette
        self.root.configure(bg=p["bg"])
        for widget, bg, fg in self._themed:
            widget.configure(bg=p[bg])
            if fg is not None:
                widget.configure(fg=p[fg])
        self._apply_day_headers()
        self._on_grid_changed(self.engine.label, self.engine.cells)

    # ------------------------------------------------------------------
    # Engine listeners
    # ------------------------------------------------------------------
    def _on_grid_changed(self, label: str, cells: tuple[DayCell, ...]) -> None:
        """Reconfigure the pooled canvases — no widget creation."""
        self._cell_identities.clear()
        self.header.configure(text=label)

        weeks = iso_week_numbers(cells)
        for r in range(MAX_WEEKS):
            self.week_nums[r].configure(text=weeks[r] if r < len(weeks) else "")

        for i, canvas in enumerate(self.day_cells):
            if i < len(cells):
                cell = cells[i]
                bg, fg = self._cell_colors(cell)
                self._draw_cell(canvas, str(cell.day), bg, fg,
                                self.font_bold if cell.is_today else self.font_normal,
                                underline=cell.is_today, cursor="hand2")
                self._cell_identities[id(canvas)] = cell.identity
            else:
                self._draw_cell(canvas, "", self._palette["bg"], self._palette["fg"],
                                self.font_normal)

        self._footer_label.configure(text=self._footer_text())

    def _on_date_selected(self, d: date) -> None:
        log.info("Date picked: %s", d.isoformat())

    # ------------------------------------------------------------------
    # Day colour logic
    # ------------------------------------------------------------------
    def _cell_colors(self, cell: DayCell) -> tuple[str, str]:
        p = self._palette
        if cell.is_selected:
            return p["accent"], p["sel_fg"]
        if not cell.is_current_month:
            return p["bg"], p["dim_fg"]
        if cell.is_weekend:
            return p["bg"], p["weekend_fg"]
        return p["bg"], p["fg"]

    def _draw_cell(self, canvas: tk.Canvas, text: str, bg: str, fg: str,
                   font, underline: bool = False, cursor: str = "") -> None:
        canvas.delete("all")
        w = canvas.winfo_width()
        h = canvas.winfo_height()
        if w <= 1:
            w = int(canvas["width"]) + 2
        if h <= 1:
            h = int(canvas["height"]) + 2

        canvas.configure(bg=bg, cursor=cursor)
        if text:
            canvas.create_text(w // 2, h // 2, text=text, fill=fg, font=font)
        if underline:
            canvas.create_rectangle(w // 4, h - 3, w - w // 4, h - 1, fill=fg, outline="")

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def _on_press(self, event: tk.Event) -> None:
        identity = self._cell_identities.get(id(event.widget))
        if identity:
            self.engine.select_cell(identity)

    def _on_escape(self, _event: tk.Event) -> None:
        if self.engine.selected_date is not None:
            self.engine.clear_selection()
        else:
            self.hide()

    def _footer_text(self) -> str:
        today_str = f"Today: {self.engine.today.strftime('%d.%m.%Y')}"
        selected = self.engine.selected_date
        if selected is None:
            return today_str
        return f"Selected: {selected.strftime('%d.%m.%Y')}     {today_str}"

    # ------------------------------------------------------------------
    # Settings dialog
    # ------------------------------------------------------------------
    def open_settings(self) -> None:
        dlg = tk.Toplevel(self.root)
        dlg.title("Settings")
        dlg.resizable(False, False)
        dlg.attributes("-topmost", True)
        dlg.grab_set()

        frame = tk.Frame(dlg, padx=12, pady=8)
        frame.pack()

        tk.Label(frame, text="Header format:", font=self.font_normal).grid(
            row=0, column=0, sticky="w", pady=4,
        )
        fmt_entry = tk.Entry(frame, width=12, font=self.font_normal)
        fmt_entry.insert(0, self.engine.label_format)
        fmt_entry.grid(row=0, column=1, padx=(8, 0), pady=4)

        dark_var = tk.BooleanVar(value=self._dark)
        tk.Checkbutton(
            frame, text="Dark mode", variable=dark_var, font=self.font_normal,
        ).grid(row=1, column=0, columnspan=2, sticky="w", pady=4)

        weeks_var = tk.BooleanVar(value=self._show_weeks)
        tk.Checkbutton(
            frame, text="Show week numbers", variable=weeks_var, font=self.font_normal,
        ).grid(row=2, column=0, columnspan=2, sticky="w", pady=4)

        sunday_var = tk.BooleanVar(value=self.engine.first_weekday == SUNDAY)
        tk.Checkbutton(
            frame, text="Week starts on Sunday (classic 35-cell layout)",
            variable=sunday_var, font=self.font_normal,
        ).grid(row=3, column=0, columnspan=2, sticky="w", pady=4)

        btn_frame = tk.Frame(frame)
        btn_frame.grid(row=4, column=0, columnspan=2, pady=(8, 0))

        def on_ok() -> None:
            label_format = fmt_entry.get().strip()
            if not label_format:
                return
            try:
                self.engine.today.strftime(label_format)
            except ValueError:
                log.warning("Rejected header format %r", label_format)
                return
            first_weekday = SUNDAY if sunday_var.get() else MONDAY

            settings = load_settings(self._settings_path)
            settings["label_format"] = label_format
            settings["dark_mode"] = dark_var.get()
            settings["show_week_numbers"] = weeks_var.get()
            settings["first_weekday"] = first_weekday
            save_settings(settings, self._settings_path)

            self._dark = dark_var.get()
            self._show_weeks = weeks_var.get()
            self._palette = DARK if self._dark else LIGHT
            dlg.destroy()
            self.engine.configure(label_format=label_format, first_weekday=first_weekday)
            self._apply_week_visibility()
            self._apply_palette()

        tk.Button(btn_frame, text="OK", width=8, command=on_ok).pack(
            side="left", padx=4,
        )
        tk.Button(btn_frame, text="Cancel", width=8, command=dlg.destroy).pack(
            side="left", padx=4,
        )

    # ------------------------------------------------------------------
    # Persist window position
    # ------------------------------------------------------------------
    def _persist_position(self) -> None:
        settings = load_settings(self._settings_path)
        settings["window_x"] = self._saved_x
        settings["window_y"] = self._saved_y
        save_settings(settings, self._settings_path)

    # ------------------------------------------------------------------
    # Show / Hide / Toggle
    # ------------------------------------------------------------------
    def toggle(self) -> None:
        if self.root.state() == "withdrawn" or not self.root.winfo_viewable():
            self.show()
        else:
            self.hide()

    def show(self) -> None:
        self.root.title(self._title())
        self.engine.go_to_today()
        self.root.deiconify()
        self._position_window()
        self.root.lift()
        self.root.focus_force()

    def hide(self) -> None:
        if self.root.state() != "withdrawn":
            self._saved_x = self.root.winfo_x()
            self._saved_y = self.root.winfo_y()
        if self._saved_x is not None and self._saved_y is not None:
            self._persist_position()
        self.root.withdraw()

    # ------------------------------------------------------------------
    # Position: last saved spot, else bottom-right of the screen
    # ------------------------------------------------------------------
    def _position_window(self) -> None:
        self.root.update_idletasks()
        if self._saved_x is not None and self._saved_y is not None:
            self.root.geometry(f"+{self._saved_x}+{self._saved_y}")
            return
        win_w = self.root.winfo_reqwidth()
        win_h = self.root.winfo_reqheight()
        # Leave room for a taskbar/dock
        x = self.root.winfo_screenwidth() - win_w - 12
        y = self.root.winfo_screenheight() - win_h - 60
        self.root.geometry(f"+{x}+{y}")
