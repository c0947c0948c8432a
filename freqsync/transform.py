"""
Forward DFT engines for the coarse estimator.

An engine is any callable ``transform(reals, imags)`` that overwrites two
equal-length float arrays (power-of-two length) with the real and imaginary
parts of the forward DFT, in natural (non bit-reversed) bin order.
"""

import numpy as np
import scipy.fft

from .errors import InvalidParameterError


def check_transform_input(reals, imags):
    n = len(reals)
    if len(imags) != n:
        raise InvalidParameterError(f"real/imag length mismatch: {n} != {len(imags)}")
    if n < 1 or n & (n - 1):
        raise InvalidParameterError(f"transform length must be a power of two, got {n}")


def numpy_fft(reals, imags):
    """Default engine, backed by numpy.fft."""
    check_transform_input(reals, imags)
    spectrum = np.fft.fft(reals + 1j * imags)
    reals[:] = spectrum.real
    imags[:] = spectrum.imag


def scipy_fft(reals, imags, workers=None):
    """scipy.fft engine; `workers` lets pocketfft split large transforms across threads."""
    check_transform_input(reals, imags)
    spectrum = scipy.fft.fft(reals + 1j * imags, workers=workers)
    reals[:] = spectrum.real
    imags[:] = spectrum.imag


def direct_dft(reals, imags):
    """O(N^2) reference DFT straight from the definition. Only for small test vectors."""
    check_transform_input(reals, imags)
    n = len(reals)
    k = np.arange(n)
    twiddle = np.exp(-2j * np.pi * np.outer(k, k) / n)
    spectrum = twiddle @ (reals + 1j * imags)
    reals[:] = spectrum.real
    imags[:] = spectrum.imag
