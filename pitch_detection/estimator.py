# pitch_detection/estimator.py
import numpy as np
from scipy.signal import correlate

MIN_SAMPLES = 1024      # below this the lag search is unreliable
PEAK_THRESHOLD = 0.1    # absolute, not normalized to block energy
LAG_DIVISOR = 20        # lags below N // 20 are skipped


def autocorrelation(x: np.ndarray) -> np.ndarray:
    """
    Autocorrelation for non-negative lags.

    R[lag] = sum_{i=0}^{N-lag-1} x[i] * x[i + lag], lag in [0, N).
    Computed directly (O(N^2)), so keep blocks around 2048 samples.
    """
    corr = correlate(x, x, mode="full", method="direct")
    return corr[len(x) - 1:]


def estimate(samples, sample_rate: float) -> float:
    """
    Estimate the fundamental frequency of one sample block.

    Parameters
    ----------
    samples : array-like
        Mono block of float samples in [-1, 1].
    sample_rate : float
        Sampling rate of the block in Hz.

    Returns
    -------
    float
        Frequency in Hz, or 0.0 when no pitch can be found
        (too few samples, silence, no periodic peak).
    """
    x = np.asarray(samples, dtype=np.float64).ravel()
    n = len(x)
    if n < MIN_SAMPLES:
        return 0.0

    corr = autocorrelation(x)

    # --- Global peak after the near-zero-lag region ---
    start = n // LAG_DIVISOR
    peak_lag = start + int(np.argmax(corr[start:]))
    peak_value = corr[peak_lag]

    if peak_lag <= 0 or not peak_value > PEAK_THRESHOLD:
        return 0.0

    return float(sample_rate) / peak_lag
