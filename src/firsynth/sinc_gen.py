#!/usr/bin/env python3
"""
Windowed-Sinc Coefficient Synthesis via Inverse DFT
===================================================

Builds the desired (brick-wall) frequency response of an ideal band-limited
filter, runs it through an unscaled inverse DFT, and folds the resulting bins
into a centred, mirror-symmetric tap sequence:

- Bin 0 of the inverse transform becomes the centre tap
- Bin k (stored at offset 2k of the interleaved result) feeds taps mid ± k
- The taper is applied afterwards and the taps are normalised to unity gain

The inverse transform of a real, even-symmetric spectrum is itself real and
even-symmetric, so one value per mirrored pair is enough.
"""

import logging
import math
import numpy as np
from typing import Optional, Union

from .exceptions import InvalidSpecification
from .transform import InverseTransform, ScipyInverseTransform
from .window import DefaultWindower, Windower, WindowType

# Lyons' constant for ~0.1 dB passband ripple
TAP_COUNT_FACTOR = 22.0


def round_half_up(value: float) -> int:
    """Round to nearest integer with halves going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


# ───────────────────────── small helpers ────────────────────────── #

def get_tap_count(sample_rate: float, pass_frequency: float, stop_frequency: float,
                  attenuation_db: float) -> int:
    """
    Estimate the number of taps for ~0.1 dB passband ripple.

    Lyons, Understanding Digital Signal Processing 3e, section 5.10.5:
    ``taps = attenuation / (22 * (stop - pass) / sample_rate)``.
    """
    transition = (float(stop_frequency) - float(pass_frequency)) / float(sample_rate)
    if transition <= 0:
        raise InvalidSpecification(
            f"Pass frequency [{pass_frequency}] must be less than the stop "
            f"frequency [{stop_frequency}]")

    return round_half_up(float(attenuation_db) / (TAP_COUNT_FACTOR * transition))


def normalize(taps: np.ndarray, log: Optional[logging.Logger] = None) -> np.ndarray:
    """Scale taps so the sum of their absolute values is 1."""
    if log is None:
        log = logging.getLogger(__name__)

    taps = np.asarray(taps, dtype=np.float64)
    accumulator = np.sum(np.abs(taps))

    if accumulator == 0:
        log.warning("All %d taps are zero; skipping normalization", len(taps))
        return taps.copy()

    return taps / accumulator


def invert(taps: np.ndarray) -> np.ndarray:
    """
    Spectral inversion: negate every odd-indexed tap.

    Multiplying by +1, -1, +1, ... moves a low-pass response up to the
    Nyquist-adjacent band, turning it into the high-pass complement.
    """
    inverted = np.array(taps, dtype=np.float64, copy=True)
    inverted[1::2] = -inverted[1::2]
    return inverted


def get_sine(sample_rate: float, frequency: float, length: int) -> np.ndarray:
    """Odd-symmetric sine sequence centred on ``length // 2``."""
    values = np.zeros(length, dtype=np.float64)
    middle = length // 2
    x = np.arange(middle)
    s = np.sin(2.0 * np.pi * (frequency / sample_rate) * x)
    values[middle + x] = s
    values[middle - x] = -s
    return values


def format_taps(taps: np.ndarray, breaks: bool = False) -> str:
    """Render taps as ``index: value``, one per line or eight per line."""
    parts = []
    for x, value in enumerate(taps):
        parts.append(f"{x}: {value}")
        if breaks or x % 8 == 7:
            parts.append("\n")
        else:
            parts.append("\t")
    return "".join(parts)


# ─────────────────────── response + synthesis ─────────────────────── #

def get_unity_response_array(sample_rate: float, frequency: float, length: int) -> np.ndarray:
    """
    Desired unity-gain response for a low-pass of ``length`` DFT points.

    The returned array is ``2 * length`` long: the positive-frequency bins sit
    at the start, their mirror images at the end of the first half, and the
    second half is scratch space for the interleaved inverse DFT result.
    """
    response = np.zeros(2 * length, dtype=np.float64)

    bin_count = round_half_up(frequency / sample_rate * length)
    bin_count = max(0, min(bin_count, length // 2 + 1))

    if length % 2 == 0:
        response[:bin_count] = 1.0
        if bin_count:
            response[length - bin_count:length] = 1.0
    else:
        # odd sizes always carry the DC bin
        response[0] = 1.0
        response[1:bin_count + 1] = 1.0
        if bin_count:
            response[length - bin_count:length] = 1.0

    return response


def synthesize_taps(response: np.ndarray, n: int, length: int, pairs: int,
                    transform: Optional[InverseTransform] = None) -> np.ndarray:
    """
    Inverse-transform ``response`` and fold the bins into ``length`` taps.

    Parameters
    ----------
    response : np.ndarray
        ``2 * n`` buffer holding the real spectrum in its first half;
        overwritten by the transform
    n : int
        Transform size
    length : int
        Number of output taps
    pairs : int
        How many bins (1..pairs) feed the mirrored taps around the centre
    transform : InverseTransform, optional
        Backend; a fresh :class:`ScipyInverseTransform` when omitted

    Returns
    -------
    np.ndarray
        Mirror-symmetric taps; positions not reached by ``pairs`` are zero
    """
    if transform is None:
        transform = ScipyInverseTransform()

    transform.real_inverse_full(response, n)

    taps = np.zeros(length, dtype=np.float64)
    middle = length // 2

    # Bin 0 is the centre coefficient
    taps[middle] = response[0]

    k = np.arange(1, pairs + 1)
    taps[middle + k] = response[2 * k]
    taps[middle - k] = response[2 * k]

    return taps


def get_sinc(
    sample_rate: int,
    frequency: float,
    length: int,
    window: Union[str, WindowType] = WindowType.HAMMING,
    transform: Optional[InverseTransform] = None,
    windower: Optional[Windower] = None,
    log: Optional[logging.Logger] = None
) -> np.ndarray:
    """
    Unity-gain, windowed low-pass prototype of even ``length``.

    The inverse DFT runs over ``length + 1`` points so its size stays odd.
    Index 0 of the result is never reached by the mirror fold and stays zero;
    :func:`firsynth.fir_filter_gen.get_low_pass` trims it off.
    """
    if log is None:
        log = logging.getLogger(__name__)

    if sample_rate <= 0:
        raise InvalidSpecification(f"Sample rate must be positive, got {sample_rate}")
    if length <= 0 or length % 2 != 0:
        raise InvalidSpecification(f"Sinc length must be a positive even number, got {length}")

    window = WindowType.from_name(window)
    if windower is None:
        windower = DefaultWindower()

    size = length + 1
    response = get_unity_response_array(sample_rate, frequency, size)
    log.debug("Sinc: %d taps, %d-point IDFT, cutoff %.1f Hz of %d Hz",
              length, size, frequency, sample_rate)

    taps = synthesize_taps(response, size, length, length // 2 - 1, transform)

    # Taper only the populated, odd-length span around the centre
    taps[1:] = windower.apply(window, taps[1:])

    return normalize(taps, log)
