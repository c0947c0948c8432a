import numpy as np


def phase_increments(signal):
    """Instantaneous phase step between consecutive samples (rad)."""
    signal = np.asarray(signal)
    if signal.size < 2:
        return np.zeros(0)
    return np.angle(signal[1:] * np.conj(signal[:-1]))


def mean_frequency(signal, sample_rate):
    """Average frequency (Hz) of a signal from its phase increments."""
    steps = phase_increments(signal)
    if steps.size == 0:
        return 0.0
    return float(np.mean(steps) * sample_rate / (2 * np.pi))


def frequency_error(estimated_hz, true_hz):
    """Absolute estimation error in Hz."""
    return abs(float(estimated_hz) - float(true_hz))


def bin_width(sample_rate, num_samples):
    """FFT bin spacing for a stream of `num_samples` after power-of-two padding."""
    fft_size = 1 << (int(num_samples) - 1).bit_length()
    return sample_rate / fft_size


def settling_index(trace, target, tolerance):
    """
    First index after which the trace stays within +/- tolerance of target.
    Returns len(trace) when it never settles.
    """
    trace = np.asarray(trace, dtype=np.float64)
    outside = np.nonzero(np.abs(trace - target) > tolerance)[0]
    if outside.size == 0:
        return 0
    return int(outside[-1] + 1)
