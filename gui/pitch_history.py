from collections import deque

HISTORY_SIZE = 100   # ~2-3 seconds of frames


class PitchHistory:
    """Rolling window of recent pitches for the graph. Oldest point drops out first."""

    def __init__(self, capacity=HISTORY_SIZE):
        self.points = deque(maxlen=capacity)

    def __len__(self):
        return len(self.points)

    @property
    def capacity(self):
        return self.points.maxlen

    def push(self, frequency: float, time: float):
        if frequency > 0:
            self.points.append((frequency, time))

    def clear(self):
        self.points.clear()

    def frequencies(self):
        return [f for f, _ in self.points]

    def scale_y(self, frequency, height, min_freq, freq_range):
        # inverted: larger frequency -> smaller y, 10% margin top and bottom
        norm = (frequency - min_freq) / freq_range
        return height - (norm * (height * 0.8) + height * 0.1)

    def scale_points(self, width, height):
        """
        Map history to canvas coordinates.

        Returns (points, min_freq, freq_range); points is empty with
        fewer than two entries.
        """
        freqs = self.frequencies()
        if len(freqs) < 2:
            return [], 0.0, 0.0
        min_freq, max_freq = min(freqs), max(freqs)
        freq_range = (max_freq - min_freq) or 100.0
        last = len(freqs) - 1
        points = [
            (i / last * width, self.scale_y(f, height, min_freq, freq_range))
            for i, f in enumerate(freqs)
        ]
        return points, min_freq, freq_range
