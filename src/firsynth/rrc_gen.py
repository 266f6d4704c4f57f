#!/usr/bin/env python3
"""
Root-Raised-Cosine Pulse Shaping Filter
=======================================

Closed-form design after GNU Radio's ``firdes::root_raised_cosine``:

- Tap count is ``samples_per_symbol * symbols + 1``
- Sample ``x`` sits at ``index = x - taps/2`` symbol-relative samples
- Where ``(4 alpha index / sps)^2 - 1`` vanishes the L'Hopital form is used
- Taps are divided by their plain (signed) sum, not by the sum of magnitudes
- The roll-off factor must lie in (0, 1]; the closed form divides by alpha,
  so the alpha = 0 limit (a plain sinc pulse) is not offered
"""

import logging
import math
import numpy as np
from typing import Optional, Tuple

from .exceptions import InvalidSpecification

SINGULARITY_THRESHOLD = 1e-6


def symbols_for_attenuation(alpha: float) -> int:
    """Symbol span giving roughly 40 dB attenuation: ``-44 alpha + 33``, rounded up to even."""
    symbols = math.ceil(-44.0 * alpha + 33.0)
    return symbols + symbols % 2


def root_raised_cosine_response(
    samples_per_symbol: int,
    symbols: int,
    alpha: float
) -> Tuple[np.ndarray, float]:
    """
    Raw (unscaled) RRC taps and the running sum used to scale them.

    Singular taps for ``alpha == 1`` are set to -1 and left out of the sum.
    """
    taps = samples_per_symbol * symbols + 1
    sps = float(samples_per_symbol)

    x = np.arange(taps)
    index = x - taps / 2.0

    x1 = np.pi * index / sps
    x2 = 4.0 * alpha * index / sps
    x3 = x2 * x2 - 1.0

    regular = np.abs(x3) >= SINGULARITY_THRESHOLD
    singular = ~regular
    centre = x == taps // 2

    coefficients = np.zeros(taps, dtype=np.float64)

    with np.errstate(divide='ignore', invalid='ignore'):
        numerator = np.where(
            centre,
            np.cos((1.0 + alpha) * x1) + (1.0 - alpha) * np.pi / (4.0 * alpha),
            np.cos((1.0 + alpha) * x1) + np.sin((1.0 - alpha) * x1) / x2,
        )
        denominator = x3 * np.pi
        coefficients[regular] = 4.0 * alpha * numerator[regular] / denominator[regular]

    if np.any(singular):
        if alpha == 1.0:
            coefficients[singular] = -1.0
        else:
            i = index[singular]
            lo = (1.0 - alpha) * x1[singular]
            hi = (1.0 + alpha) * x1[singular]

            numerator = (np.sin(hi) * (1.0 + alpha) * np.pi
                         - np.cos(lo) * ((1.0 - alpha) * np.pi * sps) / (4.0 * alpha * i)
                         + np.sin(lo) * sps * sps / (4.0 * alpha * i * i))
            denominator = -32.0 * np.pi * alpha * alpha * i / sps

            coefficients[singular] = 4.0 * alpha * numerator / denominator

    if alpha == 1.0:
        scale = float(np.sum(coefficients[regular]))
    else:
        scale = float(np.sum(coefficients))

    return coefficients, scale


def get_root_raised_cosine(
    samples_per_symbol: int,
    symbols: int,
    alpha: float,
    log: Optional[logging.Logger] = None
) -> np.ndarray:
    """
    Root-raised-cosine taps scaled to a signed sum of 1.

    Parameters
    ----------
    samples_per_symbol : int
        Oversampling of the symbol rate
    symbols : int
        Symbol span; should be even (see :func:`symbols_for_attenuation`)
    alpha : float
        Roll-off factor in (0, 1]. Zero is rejected: the closed form divides
        by alpha, and a zero-excess-bandwidth pulse is a plain sinc
        (see :func:`firsynth.fir_filter_gen.get_low_pass`)

    Returns
    -------
    np.ndarray
        ``samples_per_symbol * symbols + 1`` taps

    Raises
    ------
    InvalidSpecification
        For non-positive sizes or ``alpha`` outside (0, 1]
    """
    if log is None:
        log = logging.getLogger(__name__)

    if samples_per_symbol is None or samples_per_symbol <= 0:
        raise InvalidSpecification(f"Samples per symbol must be positive, got {samples_per_symbol}")
    if symbols is None or symbols <= 0:
        raise InvalidSpecification(f"Symbol count must be positive, got {symbols}")
    if alpha is None or not 0 < alpha <= 1:
        raise InvalidSpecification(f"Roll-off factor must lie in (0, 1], got {alpha}")

    if symbols % 2:
        log.warning("RRC symbol count %d is odd; an even span is expected", symbols)

    coefficients, scale = root_raised_cosine_response(samples_per_symbol, symbols, alpha)

    log.info("RRC: %d taps, %d sps, alpha %.3f, scale %.6g", len(coefficients),
             samples_per_symbol, alpha, scale)

    if scale == 0 or not np.isfinite(scale):
        raise InvalidSpecification(
            f"RRC taps for sps={samples_per_symbol}, symbols={symbols}, alpha={alpha} "
            f"sum to {scale}; cannot scale")

    return coefficients / scale
