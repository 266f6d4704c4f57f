#!/usr/bin/env python3
"""
Verification tools for designed coefficients.
"""

import numpy as np
from scipy import signal
import matplotlib.pyplot as plt
from typing import Dict, Any, Optional


def check_symmetry(taps: np.ndarray) -> float:
    """Largest difference between ``taps[i]`` and ``taps[N-1-i]``."""
    taps = np.asarray(taps, dtype=np.float64)
    if len(taps) < 2:
        return 0.0
    return float(np.max(np.abs(taps - taps[::-1])))


def verify_filter_response(
    coefficients: np.ndarray,
    sample_rate: float = 48000,
    pass_frequency: Optional[float] = None,
    stop_frequency: Optional[float] = None,
    plot: bool = False
) -> Dict[str, Any]:
    """
    Measure a filter's magnitude response.

    Parameters
    ----------
    coefficients : np.ndarray
        Filter coefficients
    sample_rate : float
        Sample rate in Hz
    pass_frequency : float, optional
        Passband edge; the passband is taken as 0..pass_frequency
    stop_frequency : float, optional
        Stopband edge; the stopband is taken as stop_frequency..Nyquist
    plot : bool
        Whether to plot the magnitude response

    Returns
    -------
    dict
        Gains in dB at DC and Nyquist, and (when edges are given) passband
        ripple and stopband attenuation relative to the passband peak
    """
    coefficients = np.asarray(coefficients, dtype=np.float64)
    freq, h = signal.freqz(coefficients, worN=8192, fs=sample_rate)
    mag_db = 20 * np.log10(np.abs(h) + 1e-300)

    # Response at Nyquist is the alternating sum of the taps
    alternating = np.where(np.arange(len(coefficients)) % 2, -1.0, 1.0)
    nyquist = abs(float(np.dot(coefficients, alternating)))

    results = {
        'dc_gain_db': float(mag_db[0]),
        'nyquist_gain_db': float(20 * np.log10(nyquist + 1e-300)),
        'peak_gain_db': float(np.max(mag_db)),
        'symmetry_error': check_symmetry(coefficients),
    }

    reference_db = results['peak_gain_db']

    if pass_frequency is not None:
        passband = mag_db[freq <= pass_frequency]
        if len(passband):
            results['passband_ripple_db'] = float(np.ptp(passband))
            reference_db = float(np.max(passband))

    if stop_frequency is not None:
        stopband = mag_db[freq >= stop_frequency]
        if len(stopband):
            results['stopband_atten_db'] = float(reference_db - np.max(stopband))

    if plot:
        fig, ax = plt.subplots(figsize=(10, 6))
        ax.plot(freq / 1000, mag_db)
        if pass_frequency is not None:
            ax.axvline(pass_frequency / 1000, color='g', linestyle='--',
                       label=f'Pass: {pass_frequency:.0f} Hz')
        if stop_frequency is not None:
            ax.axvline(stop_frequency / 1000, color='r', linestyle='--',
                       label=f'Stop: {stop_frequency:.0f} Hz')
        if pass_frequency is not None or stop_frequency is not None:
            ax.legend()
        ax.set_xlabel('Frequency (kHz)')
        ax.set_ylabel('Magnitude (dB)')
        ax.set_title(f'Frequency Response ({len(coefficients)} taps)')
        ax.grid(True, alpha=0.3)
        ax.set_ylim(max(-150, float(np.min(mag_db)) - 5), 5)
        plt.tight_layout()
        plt.show()

    return results
