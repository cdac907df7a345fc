import tkinter as tk
from tkinter import ttk

from Core.audio_engine import AudioEngine
from Core.session import SessionLogger
from gui.tabs.pitch_tab import PitchTab
from gui.tabs.about_tab import AboutTab


class PitchApp:
    def __init__(self, root: tk.Tk, engine: AudioEngine, session_logger: SessionLogger,
                 record_dir="recordings", interval_ms=16):
        self.root = root
        self.root.title("Voice Pitch Monitor")

        # ----------------------------
        # Shared audio engine instance
        # ----------------------------
        self.engine = engine

        # ----------------------------
        # Notebook for tabs
        # ----------------------------
        notebook = ttk.Notebook(root)
        notebook.pack(fill="both", expand=True)

        self.pitch_tab = PitchTab(notebook, self.engine, self.engine.input_devices(),
                                  session_logger=session_logger, record_dir=record_dir,
                                  interval_ms=interval_ms)
        self.about_tab = AboutTab(notebook, self.engine)

        notebook.add(self.pitch_tab.frame, text="Pitch")
        notebook.add(self.about_tab.frame, text="About")

        # ----------------------------
        # Handle closing the app
        # ----------------------------
        root.protocol("WM_DELETE_WINDOW", self.on_close)

    def on_close(self):
        # finish an open take so its session log and WAV are written
        if self.pitch_tab.session.is_recording:
            self.pitch_tab.stop_recording()
        self.pitch_tab.scheduler.stop()
        self.engine.terminate()
        self.root.destroy()
