# freqsync/freq_offset.py
import logging
from dataclasses import dataclass

import numpy as np

from .errors import NumericalDegenerateError
from .transform import numpy_fft
from .utils import (as_stream, bin_to_frequency, check_modulation_order,
                    check_sample_rate, next_power_of_two, require_samples, zero_pad)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrequencyEstimate:
    offset_hz: float   # recovered carrier offset
    bin_index: int     # winning bin of the M-th power spectrum
    fft_size: int      # padded transform length P
    tone_hz: float     # unwrapped frequency of the M-th power tone
    sample_rate: float

    @property
    def bin_width(self):
        """Spacing of the transform bins in Hz."""
        return self.sample_rate / self.fft_size


class CoarseFrequencyEstimator:
    """
    Blind coarse carrier offset estimation for M-fold symmetric PSK.
    Raising the signal to the M-th power strips the modulation and leaves a
    tone at M times the carrier offset; the FFT peak of that tone gives the
    estimate.
    """
    def __init__(self, modulation_order=2, transform=None):
        """
        Args:
            modulation_order: exponent of the nonlinearity, the phase symmetry
                of the constellation (1 = bare carrier, 2 = BPSK, 4 = QPSK)
            transform: forward DFT engine, see freqsync.transform
        """
        check_modulation_order(modulation_order)
        self.modulation_order = int(modulation_order)
        self.transform = numpy_fft if transform is None else transform

    def spectrum(self, samples):
        """Padded M-th power spectrum (complex, natural bin order)."""
        x = as_stream(samples)
        require_samples(x)
        powered = x.astype(np.complex128) ** self.modulation_order
        fft_size = next_power_of_two(len(powered))
        padded = zero_pad(powered, fft_size)
        reals = np.ascontiguousarray(padded.real, dtype=np.float64)
        imags = np.ascontiguousarray(padded.imag, dtype=np.float64)
        self.transform(reals, imags)
        return reals + 1j * imags

    def estimate(self, samples, fs):
        """
        Estimate the carrier offset.
        Args:
            samples: complex baseband array
            fs: sample rate (Hz)
        Returns: FrequencyEstimate
        """
        check_sample_rate(fs)
        spectrum = self.spectrum(samples)
        fft_size = len(spectrum)
        mag = np.abs(spectrum)
        # argmax keeps the first occurrence, so ties go to the lowest bin
        idx = int(np.argmax(mag))
        if not mag[idx] > 0:
            raise NumericalDegenerateError("magnitude spectrum has no peak (all-zero input?)")
        tone = bin_to_frequency(idx, fft_size, fs)
        offset = tone / self.modulation_order
        logger.debug("Offset bin %d of %d - tone %.3f Hz, offset %.3f Hz", idx, fft_size, tone, offset)
        return FrequencyEstimate(offset_hz=float(offset), bin_index=idx,
                                 fft_size=fft_size, tone_hz=float(tone),
                                 sample_rate=float(fs))

    def correct(self, samples, freq_offset, fs):
        """
        Apply frequency correction.
        Args:
            samples: complex baseband array
            freq_offset: carrier offset to remove (Hz)
            fs: sample rate
        Returns: corrected samples (new array)
        """
        check_sample_rate(fs)
        x = as_stream(samples)
        n = np.arange(len(x))
        correction = np.exp(-1j * 2 * np.pi * freq_offset * n / fs)
        return x * correction

    def estimate_and_correct(self, samples, fs):
        estimate = self.estimate(samples, fs)
        return self.correct(samples, estimate.offset_hz, fs), estimate


def coarse_frequency_correction(stream, sample_rate, modulation_order, transform=None):
    """
    Remove a coarse carrier offset from `stream`.
    Returns: (corrected_stream, frequency_offset_hz, bin_index)
    """
    estimator = CoarseFrequencyEstimator(modulation_order, transform=transform)
    corrected, estimate = estimator.estimate_and_correct(stream, sample_rate)
    return corrected, estimate.offset_hz, estimate.bin_index
