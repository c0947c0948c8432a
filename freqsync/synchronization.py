# freqsync/synchronization.py
import logging
from dataclasses import dataclass, replace

import numpy as np

from .utils import as_stream, check_gain, check_sample_rate

logger = logging.getLogger(__name__)

TWO_PI = 2 * np.pi


@dataclass(frozen=True)
class LoopState:
    phase: float = 0.0      # NCO phase, rad, kept in [0, 2pi)
    frequency: float = 0.0  # integrator, rad/sample


def loop_gains(loop_bandwidth, damping=1.0 / np.sqrt(2.0)):
    """PI gains (alpha, beta) of a second-order loop from its normalized bandwidth."""
    norm_bw = float(loop_bandwidth)
    denom = 1 + 2 * damping * norm_bw + norm_bw**2
    alpha = (4 * damping * norm_bw) / denom
    beta = (4 * norm_bw**2) / denom
    return alpha, beta


def wrap_phase(phase):
    """Reduce phase into [0, 2pi)."""
    phase %= TWO_PI
    # a tiny negative input can round up to exactly 2pi
    if phase >= TWO_PI:
        phase = 0.0
    return phase


def costas_step(state, sample, alpha, beta):
    """
    One transition of the Costas loop.
    Returns: (next LoopState, de-rotated sample, phase error)
    """
    # De-rotate the sample by the current NCO phase
    y = sample * np.exp(-1j * state.phase)

    # Costas error for two-fold symmetric (BPSK) constellations
    error = float(np.real(y) * np.imag(y))

    # PI controller
    frequency = state.frequency + beta * error
    phase = wrap_phase(state.phase + frequency + alpha * error)
    return LoopState(phase=phase, frequency=frequency), y, error


class CostasLoop:
    """
    Second-order Costas loop tracking residual carrier phase and frequency.
    State is carried across recover() calls, so a burst can be fed in blocks
    or handed from a wide acquire loop to a narrow track loop.
    """
    def __init__(self, alpha, beta, sample_rate=1.0):
        check_gain("alpha", alpha)
        check_gain("beta", beta)
        check_sample_rate(sample_rate)
        self.alpha = float(alpha)
        self.beta = float(beta)
        self.sample_rate = float(sample_rate)
        self.reset()

    @classmethod
    def from_bandwidth(cls, loop_bandwidth, sample_rate=1.0, damping=1.0 / np.sqrt(2.0)):
        alpha, beta = loop_gains(loop_bandwidth, damping)
        return cls(alpha, beta, sample_rate)

    def reset(self):
        self.state = LoopState()

    def import_state(self, other):
        """Copy NCO state from another CostasLoop (acquire->track)."""
        if isinstance(other, CostasLoop):
            self.state = replace(other.state)

    def recover(self, signal):
        """
        Track the whole block, left to right.
        Returns: (corrected samples, frequency trace in Hz)
        """
        x = as_stream(signal)
        out = np.zeros(len(x), dtype=np.result_type(x.dtype, np.complex64))
        freq_log = np.zeros(len(x), dtype=np.float64)
        to_hz = self.sample_rate / TWO_PI

        state = self.state
        for i in range(len(x)):
            state, out[i], _ = costas_step(state, x[i], self.alpha, self.beta)
            # angular rate per sample -> Hz
            freq_log[i] = state.frequency * to_hz
        self.state = state

        if len(x):
            logger.debug("Costas loop: %d samples, final freq %.3f Hz, phase %.4f rad",
                         len(x), freq_log[-1], state.phase)
        return out, freq_log


def costas_loop(stream, sample_rate, alpha, beta):
    """
    Run a fresh Costas loop over `stream`.
    Returns: (corrected_stream, frequency_trace); both empty for an empty stream.
    """
    return CostasLoop(alpha, beta, sample_rate).recover(stream)
