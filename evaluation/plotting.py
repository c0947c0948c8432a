import matplotlib.pyplot as plt
import numpy as np


def plot_constellation(signal, title="Constellation Diagram", show=True):
    """Plot constellation diagram."""

    fig = plt.figure(figsize=(8, 6))
    plt.scatter(np.real(signal), np.imag(signal), alpha=0.6, s=5)
    plt.xlabel('In-Phase')
    plt.ylabel('Quadrature')
    plt.title(title)
    plt.grid(True)
    plt.axis('equal')
    if show:
        plt.show()
    return fig


def plot_frequency_trace(freq_trace, sample_rate, true_offset=None,
                         title="Costas Loop Frequency", show=True):
    """Plot the Costas loop frequency estimate over time."""

    fig = plt.figure(figsize=(10, 6))

    t = np.arange(len(freq_trace)) / sample_rate
    plt.plot(t, freq_trace, 'b-', label='Loop estimate')

    if true_offset is not None:
        plt.axhline(true_offset, color='r', linestyle='--', label='True offset')

    plt.xlabel('Time (s)')
    plt.ylabel('Frequency (Hz)')
    plt.title(title)
    plt.grid(True)
    plt.legend()
    if show:
        plt.show()
    return fig


def plot_power_spectrum(signal, sample_rate, modulation_order=1,
                        title="M-th Power Spectrum", show=True):
    """Plot the spectrum of signal**modulation_order, DC centred."""

    fig = plt.figure(figsize=(10, 6))

    powered = np.asarray(signal) ** modulation_order
    freqs = np.fft.fftshift(np.fft.fftfreq(len(powered), 1/sample_rate))
    spectrum = np.fft.fftshift(np.fft.fft(powered))

    plt.plot(freqs, 20*np.log10(np.abs(spectrum) + 1e-12))
    plt.xlabel('Frequency (Hz)')
    plt.ylabel('Power (dB)')
    plt.title(title)
    plt.grid(True)
    if show:
        plt.show()
    return fig
