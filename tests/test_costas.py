# tests/test_costas.py
import numpy as np
import pytest

from freqsync import CostasLoop, InvalidParameterError, LoopState, costas_loop, costas_step, loop_gains
from freqsync.synchronization import TWO_PI, wrap_phase
from freqsync.utils import generate_test_signal
from evaluation.metrics import settling_index

ALPHA = 0.132
BETA = 0.00932


def bpsk(freq_offset, fs, num_symbols=1000, snr_db=None, seed=0):
    rng = np.random.default_rng(seed)
    data = generate_test_signal(num_symbols=num_symbols, samples_per_symbol=8, modulation_order=2,
                                freq_offset=freq_offset, sample_rate=fs, phase_offset=0.3,
                                snr_db=snr_db, rng=rng)
    return data['rx_samples']


def test_single_transition():
    state = LoopState()
    new_state, y, error = costas_step(state, 1 + 1j, ALPHA, BETA)
    assert y == 1 + 1j
    assert error == pytest.approx(1.0)
    assert new_state.frequency == pytest.approx(BETA)
    assert new_state.phase == pytest.approx(BETA + ALPHA)
    # input state untouched
    assert state == LoopState(0.0, 0.0)


def test_first_trace_entry():
    fs = 1000.0
    out, trace = costas_loop(np.array([1 + 1j]), fs, ALPHA, BETA)
    np.testing.assert_allclose(out, [1 + 1j])
    assert trace[0] == pytest.approx(BETA * fs / (2 * np.pi))


def test_wrap_phase():
    assert wrap_phase(0.0) == 0.0
    assert wrap_phase(TWO_PI) == 0.0
    assert wrap_phase(-0.1) == pytest.approx(TWO_PI - 0.1)
    assert wrap_phase(7.0) == pytest.approx(7.0 - TWO_PI)
    tiny = wrap_phase(-1e-18)
    assert 0.0 <= tiny < TWO_PI


@pytest.mark.parametrize("alpha,beta", [(ALPHA, BETA), (1.5, 0.5), (0.0, 0.0)])
def test_phase_stays_bounded(alpha, beta):
    rng = np.random.default_rng(5)
    x = 3 * (rng.standard_normal(2000) + 1j * rng.standard_normal(2000))
    state = LoopState()
    for sample in x:
        state, _, _ = costas_step(state, sample, alpha, beta)
        assert 0.0 <= state.phase < TWO_PI


def test_convergence_clean_bpsk():
    fs, f0 = 1e6, 1000.0
    _, trace = costas_loop(bpsk(f0, fs), fs, ALPHA, BETA)
    assert len(trace) == 8000
    settled = settling_index(trace, f0, 0.02 * f0)
    assert settled <= 20 / BETA
    assert np.mean(trace[-2000:]) == pytest.approx(f0, rel=1e-3)


def test_convergence_noisy_bpsk():
    fs, f0 = 1e5, 500.0
    _, trace = costas_loop(bpsk(f0, fs, snr_db=20, seed=2), fs, ALPHA, BETA)
    assert np.mean(trace[-4000:]) == pytest.approx(f0, rel=0.05)


def test_corrected_symbols_lie_on_real_axis():
    fs = 1e6
    out, _ = costas_loop(bpsk(2000.0, fs), fs, ALPHA, BETA)
    tail = out[-1000:]
    # BPSK after lock: imaginary part vanishes, up to the 180 degree ambiguity
    assert np.max(np.abs(np.imag(tail))) < 0.05
    np.testing.assert_allclose(np.abs(np.real(tail)), 1.0, atol=0.05)


def test_empty_stream_is_noop():
    out, trace = costas_loop(np.array([], dtype=np.complex64), 1e6, ALPHA, BETA)
    assert out.size == 0
    assert trace.size == 0


def test_output_dtype_and_copy():
    x = bpsk(500.0, 1e6, num_symbols=16).astype(np.complex64)
    original = x.copy()
    out, trace = costas_loop(x, 1e6, ALPHA, BETA)
    assert out.dtype == np.complex64
    assert trace.dtype == np.float64
    assert out is not x
    np.testing.assert_array_equal(x, original)


@pytest.mark.parametrize("alpha,beta,fs", [(-0.1, BETA, 1.0), (ALPHA, float("nan"), 1.0),
                                           (float("inf"), BETA, 1.0), (ALPHA, BETA, 0.0)])
def test_invalid_parameters(alpha, beta, fs):
    with pytest.raises(InvalidParameterError):
        costas_loop(np.ones(4, dtype=complex), fs, alpha, beta)


def test_loop_gains():
    bw = 0.02
    zeta = 1 / np.sqrt(2)
    denom = 1 + 2 * zeta * bw + bw**2
    alpha, beta = loop_gains(bw)
    assert alpha == pytest.approx(4 * zeta * bw / denom)
    assert beta == pytest.approx(4 * bw**2 / denom)
    loop = CostasLoop.from_bandwidth(bw, sample_rate=10.0)
    assert (loop.alpha, loop.beta) == pytest.approx((alpha, beta))


def test_block_processing_matches_one_shot():
    fs = 1e6
    x = bpsk(3000.0, fs, num_symbols=200)
    one_shot, trace = costas_loop(x, fs, ALPHA, BETA)

    loop = CostasLoop(ALPHA, BETA, fs)
    first, t1 = loop.recover(x[:700])
    second, t2 = loop.recover(x[700:])
    np.testing.assert_allclose(np.concatenate([first, second]), one_shot)
    np.testing.assert_allclose(np.concatenate([t1, t2]), trace)


def test_import_state_and_reset():
    fs = 1e6
    acq = CostasLoop.from_bandwidth(0.05, fs)
    acq.recover(bpsk(1000.0, fs, num_symbols=100))
    assert acq.state != LoopState()

    trk = CostasLoop.from_bandwidth(0.005, fs)
    trk.import_state(acq)
    assert trk.state == acq.state

    trk.import_state("not a loop")
    assert trk.state == acq.state

    trk.reset()
    assert trk.state == LoopState()
