import tkinter as tk
from tkinter import ttk

PADX = 5
PADY = 5
STICKY = "w"


def place(widget, row=None, column=None, **grid_opts):
    """Grid `widget` at (row, column) with the shared padding defaults."""
    if row is None or column is None:
        return widget
    grid_opts.setdefault("padx", PADX)
    grid_opts.setdefault("pady", PADY)
    grid_opts.setdefault("sticky", STICKY)
    widget.grid(row=row, column=column, **grid_opts)
    return widget


def make_label(parent, text=None, textvariable=None, font=None, row=None, column=None, **kwargs):
    lbl = ttk.Label(parent, text=text, textvariable=textvariable)
    if font:
        lbl.configure(font=font)
    return place(lbl, row, column, **kwargs)


def make_button(parent, text, command=None, state="normal", row=None, column=None, **kwargs):
    btn = ttk.Button(parent, text=text, command=command, state=state)
    return place(btn, row, column, **kwargs)


def make_combobox(parent, values, textvariable=None, width=40, row=None, column=None, **kwargs):
    combo = ttk.Combobox(parent, textvariable=textvariable, values=values,
                         state="readonly", width=width)
    return place(combo, row, column, **kwargs)


def make_progressbar(parent, variable, maximum=100, length=300, row=None, column=None, **kwargs):
    bar = ttk.Progressbar(parent, variable=variable, maximum=maximum, length=length)
    return place(bar, row, column, **kwargs)


def make_canvas(parent, width=800, height=200, background="#111827", row=None, column=None, **kwargs):
    canvas = tk.Canvas(parent, width=width, height=height,
                       background=background, highlightthickness=0)
    return place(canvas, row, column, **kwargs)


def make_log_box(parent, height=8, width=70, row=None, column=None, **kwargs):
    """Read-only text box; use append_log() to write to it."""
    box = tk.Text(parent, height=height, width=width, state="disabled", wrap="word")
    return place(box, row, column, **kwargs)


def append_log(box, message: str):
    box.config(state="normal")
    box.insert("end", message + "\n")
    box.see("end")
    box.config(state="disabled")


def configure_grid(frame, rows=(), cols=(), weight=1):
    for r in rows:
        frame.rowconfigure(r, weight=weight)
    for c in cols:
        frame.columnconfigure(c, weight=weight)


def make_frame_grid(parent, rows=(), cols=(), weight=1):
    """Frame whose listed rows/columns stretch with the window."""
    frm = ttk.Frame(parent)
    configure_grid(frm, rows=rows, cols=cols, weight=weight)
    return frm
