#!/usr/bin/env python3
"""
CIC droop-compensation ("cleanup") filter.

A cascaded integrator-comb decimator rolls off across its passband like
sin(x)/x. The cleanup filter runs after it at the output rate and lifts the
upper passband by the inverse amount, so the cascade is flat again.
"""

import logging
import numpy as np
from typing import Optional, Union

from .exceptions import InvalidSpecification
from .sinc_gen import get_tap_count, normalize, round_half_up, synthesize_taps
from .transform import InverseTransform
from .window import WindowType

# Transition width assumed above the pass frequency when estimating taps
CIC_TRANSITION_HZ = 1500


def get_cic_response_array(sample_rate: float, frequency: float, length: int) -> np.ndarray:
    """
    Droop-compensated response for ``length`` DFT points (``2 * length`` buffer).

    Bin 0 is unity; bins 1..binCount and their mirrors carry
    ``1 + (sinc(1/length) - sinc(k/length))`` with ``sinc(z) = sin(z)/z``.
    When binCount passes ``length / 2`` the two runs overlap; each shared bin
    takes the larger of its two indices, so bins 1..length-1 stay even.
    """
    response = np.zeros(2 * length, dtype=np.float64)
    response[0] = 1.0

    bin_count = round_half_up(frequency / sample_rate * 2.0 * length)
    bin_count = max(0, min(bin_count, length))

    unity_response = np.sin(1.0 / length) / (1.0 / length)

    k = np.arange(1, bin_count + 1)
    touched = np.union1d(k, length - k)

    # Bin p is written by step p (from the low end) and step length - p (as a
    # mirror); where both happen the later step wins, which keeps it even.
    mirror = length - touched
    source = np.maximum(np.where(touched <= bin_count, touched, 0),
                        np.where((mirror >= 1) & (mirror <= bin_count), mirror, 0))

    z = source / length
    response[touched] = 1.0 + (unity_response - np.sin(z) / z)

    return response


def get_cic_cleanup_filter(
    output_sample_rate: int,
    pass_frequency: float,
    attenuation_db: float,
    window: Union[str, WindowType] = WindowType.HAMMING,
    transform: Optional[InverseTransform] = None,
    log: Optional[logging.Logger] = None
) -> np.ndarray:
    """
    Odd-length, unity-gain CIC compensation filter.

    Parameters
    ----------
    output_sample_rate : int
        Rate at the CIC output, in Hz
    pass_frequency : float
        Upper edge of the band to flatten, in Hz
    attenuation_db : float
        Stopband attenuation target used to size the filter
    window : WindowType or str
        Accepted for symmetry with the sinc designs; not applied, since the
        taper would undo the passband lift
    transform : InverseTransform, optional
        Inverse DFT backend

    Returns
    -------
    np.ndarray
        Mirror-symmetric taps whose absolute values sum to 1
    """
    if log is None:
        log = logging.getLogger(__name__)

    if output_sample_rate is None or output_sample_rate <= 0:
        raise InvalidSpecification(f"Sample rate must be positive, got {output_sample_rate}")
    if attenuation_db is None or attenuation_db <= 0:
        raise InvalidSpecification(f"Attenuation must be positive, got {attenuation_db}")

    stop_frequency = None if pass_frequency is None else pass_frequency + CIC_TRANSITION_HZ
    if pass_frequency is None or pass_frequency < 0 or stop_frequency > output_sample_rate / 2:
        raise InvalidSpecification(
            f"CIC cleanup pass frequency [{pass_frequency}] plus {CIC_TRANSITION_HZ} Hz "
            f"must not exceed half [{output_sample_rate / 2}] of the sample rate")

    taps = get_tap_count(output_sample_rate, pass_frequency, stop_frequency, attenuation_db)

    # Make tap count odd
    if taps % 2 == 0:
        taps += 1

    log.info("CIC cleanup: %d taps, pass %.1f Hz at %d Hz (window %s not applied)",
             taps, pass_frequency, output_sample_rate, WindowType.from_name(window).value)

    response = get_cic_response_array(output_sample_rate, pass_frequency, taps)
    coefficients = synthesize_taps(response, taps, taps, taps // 2, transform)

    return normalize(coefficients, log)
