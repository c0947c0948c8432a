# freqsync/pipeline.py
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .errors import InvalidParameterError
from .freq_offset import CoarseFrequencyEstimator, FrequencyEstimate
from .synchronization import CostasLoop
from .utils import as_stream, check_sample_rate

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    corrected: np.ndarray
    frequency_trace: np.ndarray
    coarse_estimate: Optional[FrequencyEstimate]
    residual_hz: float  # loop frequency averaged over the last quarter of the trace

    @property
    def total_offset_hz(self):
        """Coarse estimate plus the residual the Costas loop settled on."""
        coarse = self.coarse_estimate.offset_hz if self.coarse_estimate is not None else 0.0
        return coarse + self.residual_hz


def synchronize(stream, sample_rate, modulation_order=2, alpha=0.132, beta=0.00932,
                coarse=True, transform=None, acquire_len=0,
                acquire_bw=None, track_bw=None):
    """
    Coarse correction followed by Costas refinement.

    Args:
        stream: complex baseband samples
        sample_rate: Hz
        modulation_order: exponent of the coarse estimator nonlinearity
        alpha, beta: Costas gains, used unless acquire_bw/track_bw are both given
        coarse: skip the FFT stage when False
        transform: forward DFT engine for the coarse stage
        acquire_len: leading samples tracked by the wide acquire loop
        acquire_bw, track_bw: normalized loop bandwidths for acquire->track
    Returns: SyncResult
    """
    check_sample_rate(sample_rate)
    if (acquire_bw is None) != (track_bw is None):
        raise InvalidParameterError("acquire_bw and track_bw must be given together")
    x = as_stream(stream)

    estimate = None
    if coarse:
        estimator = CoarseFrequencyEstimator(modulation_order, transform=transform)
        x, estimate = estimator.estimate_and_correct(x, sample_rate)
        logger.info("Coarse offset %.2f Hz (bin %d/%d)", estimate.offset_hz,
                    estimate.bin_index, estimate.fft_size)

    if acquire_bw is not None and track_bw is not None:
        acquire_len = min(max(0, int(acquire_len)), len(x))
        acq_loop = CostasLoop.from_bandwidth(acquire_bw, sample_rate)
        acq_out, acq_trace = acq_loop.recover(x[:acquire_len])

        track_loop = CostasLoop.from_bandwidth(track_bw, sample_rate)
        track_loop.import_state(acq_loop)
        trk_out, trk_trace = track_loop.recover(x[acquire_len:])

        corrected = np.concatenate([acq_out, trk_out])
        trace = np.concatenate([acq_trace, trk_trace])
    else:
        corrected, trace = CostasLoop(alpha, beta, sample_rate).recover(x)

    residual = float(np.mean(trace[-max(1, len(trace) // 4):])) if len(trace) else 0.0
    logger.info("Costas residual %.2f Hz over %d samples", residual, len(trace))

    return SyncResult(corrected=corrected, frequency_trace=trace,
                      coarse_estimate=estimate, residual_hz=residual)
