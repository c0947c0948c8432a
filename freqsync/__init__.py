"""
Carrier frequency/phase synchronization for complex baseband streams.
FFT-based coarse offset removal plus a Costas tracking loop.
"""

from .errors import (FrequencySyncError, EmptyInputError, InvalidParameterError,
                     NumericalDegenerateError)
from .freq_offset import CoarseFrequencyEstimator, FrequencyEstimate, coarse_frequency_correction
from .synchronization import CostasLoop, LoopState, costas_loop, costas_step, loop_gains
from .pipeline import SyncResult, synchronize
from .transform import direct_dft, numpy_fft, scipy_fft

__all__ = [
    'FrequencySyncError', 'EmptyInputError', 'InvalidParameterError', 'NumericalDegenerateError',
    'CoarseFrequencyEstimator', 'FrequencyEstimate', 'coarse_frequency_correction',
    'CostasLoop', 'LoopState', 'costas_loop', 'costas_step', 'loop_gains',
    'SyncResult', 'synchronize',
    'direct_dft', 'numpy_fft', 'scipy_fft',
]
