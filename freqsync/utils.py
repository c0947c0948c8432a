import numbers

import numpy as np

from .errors import EmptyInputError, InvalidParameterError


def as_stream(samples):
    """Coerce samples to a 1-D complex array (I/Q pairs accepted as [2, N] or [N, 2])."""
    x = np.asarray(samples)
    if x.ndim == 2 and not np.iscomplexobj(x):
        if x.shape[0] == 2:            # [2, N] -> rows = I,Q
            x = x[0, :] + 1j * x[1, :]
        elif x.shape[1] == 2:          # [N, 2] -> cols = I,Q
            x = x[:, 0] + 1j * x[:, 1]
    x = x.ravel()
    if not np.iscomplexobj(x):
        x = x.astype(np.complex128)
    return x


def require_samples(samples):
    if len(samples) == 0:
        raise EmptyInputError("stream has no samples")


def check_sample_rate(sample_rate):
    if not np.isfinite(sample_rate) or sample_rate <= 0:
        raise InvalidParameterError(f"sample_rate must be positive and finite, got {sample_rate!r}")


def check_modulation_order(modulation_order):
    if isinstance(modulation_order, bool) or not isinstance(modulation_order, numbers.Integral):
        raise InvalidParameterError(f"modulation_order must be an integer, got {modulation_order!r}")
    if modulation_order < 1:
        raise InvalidParameterError(f"modulation_order must be >= 1, got {modulation_order}")


def check_gain(name, value):
    if not np.isfinite(value) or value < 0:
        raise InvalidParameterError(f"{name} must be non-negative and finite, got {value!r}")


def next_power_of_two(n):
    """Smallest power of two >= n."""
    if n < 1:
        raise InvalidParameterError(f"length must be >= 1, got {n}")
    return 1 << (int(n) - 1).bit_length()


def zero_pad(samples, length):
    """Return a new array of `length` samples, zero-filled past the input."""
    out = np.zeros(length, dtype=samples.dtype)
    out[:len(samples)] = samples
    return out


def bin_to_frequency(index, fft_size, sample_rate):
    """
    Map a natural-order FFT bin to a signed frequency in Hz.
    Bins at or above the Nyquist bin wrap to negative frequencies.
    """
    if index < fft_size / 2:
        return index * sample_rate / fft_size
    return (index - fft_size) * sample_rate / fft_size


def generate_test_signal(num_symbols=1000, samples_per_symbol=4, modulation_order=2,
                         freq_offset=0.0, sample_rate=1.0, phase_offset=0.0,
                         snr_db=None, rng=None):
    """
    Generate an M-PSK burst with a known carrier offset for development.

    Args:
        num_symbols: number of random symbols
        samples_per_symbol: rectangular pulse length
        modulation_order: M of M-PSK (1 gives an unmodulated carrier)
        freq_offset: carrier offset (Hz)
        sample_rate: sample rate (Hz)
        phase_offset: constant carrier phase (rad)
        snr_db: AWGN level, None for a clean signal
        rng: numpy Generator (default: fresh unseeded generator)
    Returns: dict with 'rx_samples', 'symbols', 'freq_offset', 'sample_rate'
    """
    rng = np.random.default_rng() if rng is None else rng

    # Random symbol indices -> unit-circle PSK points
    idx = rng.integers(0, modulation_order, num_symbols)
    symbols = np.exp(1j * 2 * np.pi * idx / modulation_order)

    # Upsample
    baseband = np.repeat(symbols, samples_per_symbol)

    # Carrier offset
    n = np.arange(len(baseband))
    rx = baseband * np.exp(1j * (2 * np.pi * freq_offset * n / sample_rate + phase_offset))

    # Add noise
    if snr_db is not None:
        noise_power = 1.0 / (10**(snr_db/10))
        noise = np.sqrt(noise_power/2) * (rng.standard_normal(len(rx)) + 1j*rng.standard_normal(len(rx)))
        rx = rx + noise

    return {
        'rx_samples': rx,
        'symbols': symbols,
        'freq_offset': freq_offset,
        'sample_rate': sample_rate,
        'modulation_order': modulation_order,
    }
