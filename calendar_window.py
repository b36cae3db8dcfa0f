"""Date-picker window (tkinter) positioned above the taskbar."""

import logging
from datetime import date
from tkinter import font as tkfont
from tkinter import messagebox
import tkinter as tk

from calendar_logic import GRID_COLS, GRID_ROWS, DatePickerError, format_date, parse_date
from date_picker import (
    MONTH_CHANGED,
    YEAR_CHANGED,
    CellStyle,
    DatePicker,
    Notification,
    header_title,
)
from settings import load_settings, save_settings

logger = logging.getLogger(__name__)

# Colours
ACCENT = "#A0144F"
RANGE_BG = "#EBCBD8"
HEADER_BG = "#F3F3F3"
GRID_BG = "white"
FADE_FG = "#BBBBBB"
ACCENT_FG = "#FFFFFF"

# Which step the header arrows take in each view
_ARROW_STEPS = {
    "calendar": ("prev_month", "next_month"),
    "month_list": ("prev_year", "next_year"),
    "year_list": ("prev_decade", "next_decade"),
    "decade_list": ("prev_decade", "next_decade"),
}

# Clicking the header title zooms out one level
_ZOOM_OUT = {
    "calendar": "month_list",
    "month_list": "year_list",
    "year_list": "decade_list",
    "decade_list": "decade_list",
}


class _DayPanel:
    """Pre-allocated widget pool for the day view (week labels + 6 weeks)."""

    __slots__ = ("frame", "week_labels", "day_cells")

    def __init__(self, parent: tk.Frame, fonts: dict, on_click) -> None:
        self.frame = tk.Frame(parent, bg=GRID_BG)

        self.week_labels: list[tk.Label] = []
        for col in range(GRID_COLS):
            lbl = tk.Label(
                self.frame, font=fonts["bold"], bg=GRID_BG, fg="#333333", width=3,
            )
            lbl.grid(row=0, column=col)
            self.week_labels.append(lbl)

        self.day_cells: list[list[tk.Canvas]] = []
        for r in range(GRID_ROWS):
            row_cells: list[tk.Canvas] = []
            for c in range(GRID_COLS):
                cell = tk.Canvas(
                    self.frame, width=fonts["cell_w"], height=fonts["cell_h"],
                    bg=GRID_BG, highlightthickness=0, borderwidth=0,
                )
                cell.grid(row=r + 1, column=c)
                cell.bind("<Button-1>", on_click)
                row_cells.append(cell)
            self.day_cells.append(row_cells)


class DatePickerWindow:
    """Single-month date picker with month, year and decade views."""

    def __init__(self) -> None:
        self.root = tk.Tk()
        self.root.title("Mini Date Picker")
        self.root.resizable(False, False)
        self.root.configure(bg=GRID_BG)
        self.root.attributes("-topmost", True)

        self._setup_fonts()

        self._settings = load_settings()
        self.picker = DatePicker.from_settings(self._settings)
        self.view = "calendar"

        # Widget-to-cell mapping (filled during _render_days)
        self._widget_cells: dict[int, tuple[int, int]] = {}

        _tmp = tk.Label(self.root, text="00", font=self.font_normal, width=3)
        _tmp.update_idletasks()
        self._panel_fonts = {
            "bold": self.font_bold, "normal": self.font_normal,
            "cell_w": _tmp.winfo_reqwidth(), "cell_h": _tmp.winfo_reqheight(),
        }
        _tmp.destroy()

        self._build_shell()
        self._refresh([Notification(MONTH_CHANGED, self.picker.on_screen_state[1]),
                       Notification(YEAR_CHANGED, self.picker.on_screen_state[0])])

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
        self.font_footer = tkfont.Font(family=base, size=9)

    # ------------------------------------------------------------------
    # Build shell (once) — nav bar + view area + footer
    # ------------------------------------------------------------------
    def _build_shell(self) -> None:
        self._outer = tk.Frame(self.root, bg=GRID_BG)
        self._outer.pack(padx=6, pady=4)

        # Navigation row: ◀  Title  ▶
        nav = tk.Frame(self._outer, bg=HEADER_BG)
        nav.pack(fill="x", pady=(0, 2))

        btn_prev = tk.Label(
            nav, text="◀", font=self.font_nav, bg=HEADER_BG, cursor="hand2"
        )
        btn_prev.pack(side="left", padx=6)
        btn_prev.bind("<Button-1>", lambda _e: self._step(0))

        btn_next = tk.Label(
            nav, text="▶", font=self.font_nav, bg=HEADER_BG, cursor="hand2"
        )
        btn_next.pack(side="right", padx=6)
        btn_next.bind("<Button-1>", lambda _e: self._step(1))

        self._title_label = tk.Label(
            nav, font=self.font_header, bg=HEADER_BG, fg="#333333", cursor="hand2",
        )
        self._title_label.pack(side="left", expand=True)
        self._title_label.bind("<Button-1>", lambda _e: self._zoom_out())

        self._views_frame = tk.Frame(self._outer, bg=GRID_BG)
        self._views_frame.pack()

        self._day_panel = _DayPanel(self._views_frame, self._panel_fonts, self._on_cell_click)
        self._list_frame = tk.Frame(self._views_frame, bg=GRID_BG)

        footer = tk.Frame(self._outer, bg=GRID_BG)
        footer.pack(fill="x", pady=(4, 0))
        btn_today = tk.Label(
            footer, text="Today", font=self.font_bold, bg=GRID_BG, fg=ACCENT,
            cursor="hand2",
        )
        btn_today.pack(side="left", padx=6)
        btn_today.bind("<Button-1>", lambda _e: self.go_today())

        self._footer_label = tk.Label(
            footer, font=self.font_footer, bg=GRID_BG, fg="#555555",
        )
        self._footer_label.pack(side="right", padx=6)

    # ------------------------------------------------------------------
    # Refresh after a command
    # ------------------------------------------------------------------
    def _refresh(self, notifications: list[Notification]) -> None:
        for note in notifications:
            logger.debug("notification %s=%s", note.kind, note.value)
        self._title_label.configure(text=header_title(self.picker, self.view))

        if self.view == "calendar":
            self._list_frame.pack_forget()
            self._day_panel.frame.pack()
            self._render_days()
        else:
            self._day_panel.frame.pack_forget()
            self._list_frame.pack()
            self._render_list()
        self._footer_label.configure(text=self._footer_text())

    def _render_days(self) -> None:
        self._widget_cells.clear()
        panel = self._day_panel
        labels = self.picker.weekday_labels(short=self._settings["short_week_label"])
        for col, label in enumerate(labels):
            panel.week_labels[col].configure(text=label)

        grid = self.picker.grid
        hide_faded = self.picker.options.only_show_current_month_days
        for r in range(GRID_ROWS):
            for c in range(GRID_COLS):
                canvas = panel.day_cells[r][c]
                if r >= len(grid):
                    canvas.delete("all")
                    canvas.configure(cursor="")
                    continue
                cell = grid[r][c]
                style = self.picker.cell_style(cell)
                text = "" if hide_faded and style is CellStyle.FADE else str(cell.day)
                self._draw_cell(canvas, text, style)
                self._widget_cells[id(canvas)] = (r, c)

    def _render_list(self) -> None:
        for child in self._list_frame.winfo_children():
            child.destroy()

        names = self.picker.system.month_names
        if self.view == "month_list":
            entries = [(names[m - 1][:3], m) for m in self.picker.month_choices()]
            command = self._on_month_chosen
        elif self.view == "year_list":
            entries = [(str(y), y) for y in self.picker.year_choices()]
            command = self._on_year_chosen
        else:
            entries = [(f"{start}-{start + 9}", target)
                       for start, target in self.picker.decade_choices()]
            command = self._on_decade_chosen

        for i, (text, value) in enumerate(entries):
            btn = tk.Label(
                self._list_frame, text=text, font=self.font_normal, bg=GRID_BG,
                width=9, pady=6, cursor="hand2",
            )
            btn.grid(row=i // 3, column=i % 3, padx=2, pady=2)
            btn.bind("<Button-1>", lambda _e, v=value: command(v))

    # ------------------------------------------------------------------
    # Canvas cell drawing
    # ------------------------------------------------------------------
    def _draw_cell(self, cell: tk.Canvas, text: str, style: CellStyle) -> None:
        cell.delete("all")
        w = cell.winfo_width()
        h = cell.winfo_height()
        if w <= 1:
            w = int(cell["width"]) + 2
        if h <= 1:
            h = int(cell["height"]) + 2

        fg = "black"
        font = self.font_normal
        cell.configure(bg=GRID_BG)
        if style is CellStyle.FADE:
            fg = FADE_FG
        elif style is CellStyle.IN_RANGE:
            cell.configure(bg=RANGE_BG)
        elif style in (CellStyle.EDGE_START, CellStyle.EDGE_END):
            # Rounded cap: half-cell band towards the range, disc on the day
            x0 = w // 2 if style is CellStyle.EDGE_START else 0
            cell.create_rectangle(x0, 0, x0 + w // 2, h, fill=RANGE_BG, outline="")
            cell.create_oval(1, 1, w - 1, h - 1, fill=ACCENT, outline="")
            fg = ACCENT_FG
        elif style is CellStyle.SELECTED:
            cell.create_oval(1, 1, w - 1, h - 1, fill=ACCENT, outline="")
            fg = ACCENT_FG
        elif style is CellStyle.TODAY:
            cell.create_oval(1, 1, w - 1, h - 1, outline=ACCENT)
            fg = ACCENT
            font = self.font_bold

        if text:
            cell.create_text(w // 2, h // 2, text=text, fill=fg, font=font)
        cell.configure(cursor="" if style is CellStyle.FADE else "hand2")

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def _on_cell_click(self, event: tk.Event) -> None:
        pos = self._widget_cells.get(id(event.widget))
        if pos is None:
            return
        r, c = pos
        d = self.picker.cell_date(self.picker.grid[r][c])
        if d is None:
            return
        self.picker.on_day_clicked(d)
        self._render_days()
        self._footer_label.configure(text=self._footer_text())

    def _step(self, direction: int) -> None:
        name = _ARROW_STEPS[self.view][direction]
        self._refresh(getattr(self.picker, name)())

    def _zoom_out(self) -> None:
        self.view = _ZOOM_OUT[self.view]
        self._refresh([])

    def _on_month_chosen(self, month: int) -> None:
        self.view = "calendar"
        self._refresh(self.picker.go_to_month(month))

    def _on_year_chosen(self, year: int) -> None:
        self.view = "month_list"
        self._refresh(self.picker.go_to_year(year))

    def _on_decade_chosen(self, start_year: int) -> None:
        self.view = "year_list"
        self._refresh(self.picker.go_to_decade(start_year))

    def go_today(self) -> None:
        self.view = "calendar"
        self._refresh(self.picker.reset())

    def _on_escape(self, _event: tk.Event) -> None:
        if self.picker.selection or self.picker.highlighted:
            self.picker.clear_selection()
            self._render_days()
            self._footer_label.configure(text=self._footer_text())
        else:
            self.hide()

    # ------------------------------------------------------------------
    # Footer text
    # ------------------------------------------------------------------
    def _footer_text(self) -> str:
        active = f"Today: {format_date(self.picker.active_date, '/')}"
        selected = self.picker.selection
        if len(selected) != 2:
            return active
        lo, hi = (date(*d) for d in selected)
        total_days = (hi - lo).days + 1
        return f"{format_date(selected[0], '/')} → {format_date(selected[1], '/')}:  {total_days} days"

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

        entries: dict[str, tk.Entry] = {}
        for row, (key, text) in enumerate((("min_date", "Minimum date:"),
                                           ("max_date", "Maximum date:"))):
            tk.Label(frame, text=text, font=self.font_normal).grid(
                row=row, column=0, sticky="w", pady=4,
            )
            entry = tk.Entry(frame, width=12, font=self.font_normal)
            entry.insert(0, str(self._settings[key]))
            entry.grid(row=row, column=1, padx=(8, 0), pady=4)
            entries[key] = entry

        check_vars: dict[str, tk.BooleanVar] = {}
        toggles = (
            ("range_picker", "Select a date range"),
            ("only_show_current_month_days", "Only show days of the current month"),
            ("hide_last_faded_row", "Hide trailing faded rows"),
            ("highlight_today", "Highlight today"),
            ("short_week_label", "Short weekday labels"),
        )
        for i, (key, text) in enumerate(toggles):
            var = tk.BooleanVar(value=self._settings[key])
            check_vars[key] = var
            tk.Checkbutton(
                frame, text=text, variable=var, font=self.font_normal, anchor="w",
            ).grid(row=2 + i, column=0, columnspan=2, sticky="w")

        monday_first = tk.BooleanVar(value=self._settings["first_weekday"] == 0)
        tk.Checkbutton(
            frame, text="Week starts on Monday", variable=monday_first,
            font=self.font_normal, anchor="w",
        ).grid(row=2 + len(toggles), column=0, columnspan=2, sticky="w")

        btn_frame = tk.Frame(frame)
        btn_frame.grid(row=3 + len(toggles), column=0, columnspan=2, pady=(8, 0))

        def on_ok() -> None:
            new_settings = dict(self._settings)
            for key, entry in entries.items():
                value = entry.get().strip()
                try:
                    parse_date(value)
                except DatePickerError as exc:
                    messagebox.showerror("Settings", str(exc), parent=dlg)
                    return
                new_settings[key] = value
            for key, var in check_vars.items():
                new_settings[key] = var.get()
            new_settings["first_weekday"] = 0 if monday_first.get() else 6

            try:
                picker = DatePicker.from_settings(new_settings)
            except DatePickerError as exc:
                messagebox.showerror("Settings", str(exc), parent=dlg)
                return

            save_settings(new_settings)
            self._settings = new_settings
            self.picker = picker
            dlg.destroy()
            self.view = "calendar"
            self._refresh([Notification(MONTH_CHANGED, picker.on_screen_state[1]),
                           Notification(YEAR_CHANGED, picker.on_screen_state[0])])

        tk.Button(btn_frame, text="OK", width=8, command=on_ok).pack(
            side="left", padx=4,
        )
        tk.Button(btn_frame, text="Cancel", width=8, command=dlg.destroy).pack(
            side="left", padx=4,
        )

    # ------------------------------------------------------------------
    # Show / Hide / Toggle
    # ------------------------------------------------------------------
    def toggle(self) -> None:
        if self.root.state() == "withdrawn" or not self.root.winfo_viewable():
            self.show()
        else:
            self.hide()

    def show(self) -> None:
        self.view = "calendar"
        self._refresh(self.picker.reset())
        self.root.deiconify()
        self._position_window()
        self.root.lift()
        self.root.focus_force()

    def hide(self) -> None:
        self.root.withdraw()

    # ------------------------------------------------------------------
    # Position bottom-right, clear of the taskbar
    # ------------------------------------------------------------------
    def _position_window(self) -> None:
        self.root.update_idletasks()
        win_w = self.root.winfo_reqwidth()
        win_h = self.root.winfo_reqheight()
        x = self.root.winfo_screenwidth() - win_w - 12
        y = self.root.winfo_screenheight() - win_h - 60
        self.root.geometry(f"+{x}+{y}")
