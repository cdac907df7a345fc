import tkinter as tk
from tkinter import ttk

from pitch_detection.estimator import MIN_SAMPLES, PEAK_THRESHOLD


class AboutTab:
    def __init__(self, notebook, engine):
        self.frame = ttk.Frame(notebook)
        text = tk.Text(self.frame, wrap="word", width=60, height=15)
        text.insert(tk.END,
            "Voice Pitch Monitor 1.0\n\n"
            "Sing or speak into the microphone: the fundamental frequency of\n"
            "each frame is estimated by autocorrelation and shown with the\n"
            "nearest note name (C0 to B8).\n\n"
            f"Sample rate     : {engine.rate} Hz\n"
            f"Block size      : {engine.block_size} samples\n"
            f"Minimum block   : {MIN_SAMPLES} samples\n"
            f"Peak threshold  : {PEAK_THRESHOLD} (absolute)\n\n"
            "Quiet input may fall under the peak threshold and show no pitch."
        )
        text.config(state="disabled")
        text.pack(expand=True, fill="both")
