import os
import time
import tkinter as tk
from tkinter import messagebox

from Core.scheduler import FrameScheduler, DEFAULT_INTERVAL_MS
from Core.session import SessionTracker, SessionLogger
from gui.base_widgets import (
    make_label,
    make_button,
    make_combobox,
    make_progressbar,
    make_canvas,
    make_log_box,
    append_log,
    make_frame_grid,
)
from gui.pitch_history import PitchHistory

CANVAS_WIDTH = 800
CANVAS_HEIGHT = 200
LINE_COLOR = "#38bdf8"
MARKER_COLOR = "#e879f9"


class PitchTab:
    def __init__(self, notebook, engine, devices, session_logger=None,
                 record_dir="recordings", interval_ms=DEFAULT_INTERVAL_MS):
        self.engine = engine
        self.devices = devices
        self.record_dir = record_dir
        self.frame = make_frame_grid(notebook, rows=(5,), cols=(1,))

        self.history = PitchHistory()
        self.session = SessionTracker()
        self.session_logger = session_logger or SessionLogger()
        self.session_logger.log_callback = self.log
        self.scheduler = FrameScheduler(
            self.engine.analyze_frame, interval_ms,
            after=self.frame.after, after_cancel=self.frame.after_cancel,
        )
        self.engine.add_listener(self.session.on_pitch_detected)
        self.engine.add_listener(self.on_pitch)

        # ----------------------------
        # Device selection
        # ----------------------------
        make_label(self.frame, text="Input Device:", row=0, column=0, sticky="e")
        self.in_var = tk.StringVar()
        self.in_combo = make_combobox(
            self.frame, textvariable=self.in_var,
            values=[f"[{d['index']}] {d['name']}" for d in devices],
            width=50, row=0, column=1, sticky="we"
        )
        if devices:
            self.in_combo.current(0)

        # ----------------------------
        # Mic level / readout
        # ----------------------------
        make_label(self.frame, text="Mic Level:", row=1, column=0, sticky="e")
        self.level = tk.DoubleVar()
        make_progressbar(self.frame, variable=self.level, row=1, column=1, sticky="we")

        make_label(self.frame, text="Frequency:", row=2, column=0, sticky="e")
        self.freq_var = tk.StringVar(value="-- Hz")
        make_label(self.frame, textvariable=self.freq_var, font=("Courier", 14),
                   row=2, column=1)

        make_label(self.frame, text="Note:", row=3, column=0, sticky="e")
        self.note_var = tk.StringVar(value="--")
        make_label(self.frame, textvariable=self.note_var, font=("Courier", 20, "bold"),
                   row=3, column=1)

        # ----------------------------
        # Graph
        # ----------------------------
        self.status_var = tk.StringVar(value="Start recording to see pitch visualization")
        make_label(self.frame, textvariable=self.status_var, row=4, column=1)
        self.canvas = make_canvas(self.frame, width=CANVAS_WIDTH, height=CANVAS_HEIGHT,
                                  row=5, column=0, columnspan=2, sticky="nsew")

        # ----------------------------
        # Start/Stop buttons
        # ----------------------------
        self.start_btn = make_button(self.frame, "Start Recording", command=self.start_recording,
                                     row=6, column=0, sticky="we")
        self.stop_btn = make_button(self.frame, "Stop", command=self.stop_recording,
                                    state="disabled", row=6, column=1, sticky="w")

        # ----------------------------
        # Log box
        # ----------------------------
        make_label(self.frame, text="Log:", row=7, column=0, sticky="ne")
        self.log_box = make_log_box(self.frame, row=7, column=1, sticky="nsew")

        self.engine.set_log_callback(self.log)

    # ----------------------------
    # Recording controls
    # ----------------------------
    def start_recording(self):
        i_idx = self.in_combo.current()
        if i_idx == -1:
            messagebox.showerror("Error", "Select an input device.")
            return
        try:
            self.engine.start_stream(self.devices[i_idx]["index"])
        except Exception as e:
            messagebox.showerror("Error", f"Could not start audio:\n{e}")
            return

        self.history.clear()
        self.session.start_recording()
        self.engine.start_recording()
        self.scheduler.start()
        self.status_var.set("")
        self.start_btn.config(state="disabled")
        self.stop_btn.config(state="normal")
        self.update_level_bar()

    def stop_recording(self):
        self.scheduler.stop()
        self.engine.stop_recording()
        session = self.session.stop_recording()
        self.engine.stop_stream()

        ok, message = self.session_logger.log_session(session)
        if not ok:
            self.log(f"[PitchTab] Failed to log recording session: {message}")
        self.save_recording(session.session_id)

        self.history.clear()
        self.canvas.delete("all")
        self.level.set(0)
        self.status_var.set("Recording stopped")
        self.start_btn.config(state="normal")
        self.stop_btn.config(state="disabled")

    def save_recording(self, session_id):
        if self.engine.recorder.num_samples == 0:
            return
        path = os.path.join(self.record_dir, f"{session_id}.wav")
        try:
            self.engine.recorder.save(path)
            self.log(f"[PitchTab] Audio saved to {path}")
        except (OSError, RuntimeError, ValueError) as e:
            messagebox.showerror("Error", f"Could not save recording:\n{e}")

    # ----------------------------
    # UI updates
    # ----------------------------
    def on_pitch(self, frequency, note):
        if frequency > 0:
            self.freq_var.set(f"{frequency:.2f} Hz")
            self.note_var.set(note)
        if self.session.is_recording and frequency > 0:
            self.history.push(frequency, time.time())
            self.draw_pitch_graph(frequency)
            self.status_var.set(f"Collecting data: {len(self.history)} points")

    def update_level_bar(self):
        if self.engine.running:
            self.level.set(self.engine.current_level)
            self.frame.after(50, self.update_level_bar)
        else:
            self.level.set(0)

    def canvas_size(self):
        # winfo_* report 1x1 until the canvas is mapped; use the configured size then
        if self.canvas.winfo_ismapped():
            return max(self.canvas.winfo_width(), 2), max(self.canvas.winfo_height(), 2)
        return int(self.canvas["width"]), int(self.canvas["height"])

    def draw_pitch_graph(self, current_freq):
        width, height = self.canvas_size()
        points, min_freq, freq_range = self.history.scale_points(width, height)
        if not points:
            return

        self.canvas.delete("all")
        flat = [c for p in points for c in p]
        self.canvas.create_line(*flat, fill=LINE_COLOR, width=3,
                                capstyle="round", joinstyle="round")

        # dashed marker at the current frequency
        y = self.history.scale_y(current_freq, height, min_freq, freq_range)
        self.canvas.create_line(0, y, width, y, fill=MARKER_COLOR, dash=(5, 5))

    # ----------------------------
    # Logging
    # ----------------------------
    def log(self, message: str):
        """Append a log message to the log box."""
        append_log(self.log_box, message)
