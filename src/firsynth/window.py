#!/usr/bin/env python3
"""
Window (taper) functions applied to raw filter coefficients.

The synthesisers only need ``apply(window_type, coefficients)``; anything that
satisfies the :class:`Windower` protocol can be passed in place of the default.
"""

import enum
import numpy as np
from scipy.special import i0 as bessel_i0
from typing import Protocol, Union

from .exceptions import InvalidSpecification

DEFAULT_KAISER_BETA = 8.6


class WindowType(enum.Enum):
    NONE = "none"
    BLACKMAN = "blackman"
    BLACKMAN_HARRIS = "blackman-harris"
    COSINE = "cosine"
    HAMMING = "hamming"
    HANNING = "hanning"
    KAISER = "kaiser"

    @classmethod
    def from_name(cls, name: Union[str, "WindowType"]) -> "WindowType":
        """Look up a window by name, e.g. ``'hamming'`` or ``'BLACKMAN_HARRIS'``."""
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower().replace("_", "-")
        if key in ("rectangular", "boxcar"):
            key = "none"
        elif key == "hann":
            key = "hanning"
        for member in cls:
            if member.value == key:
                return member
        raise InvalidSpecification(f"Unsupported window type: {name}")


def build_window(M: int, window_type: Union[str, WindowType] = WindowType.HAMMING,
                 beta: float = DEFAULT_KAISER_BETA) -> np.ndarray:
    """
    Return an M-point symmetric window.

    Parameters:
    -----------
    M : int
        Full window length
    window_type : WindowType or str
        Window to build
    beta : float
        Kaiser window beta parameter (only for kaiser)

    Returns:
    --------
    np.ndarray
        Full window
    """
    window_type = WindowType.from_name(window_type)

    if M <= 0:
        return np.zeros(0, dtype=np.float64)
    if M == 1 or window_type is WindowType.NONE:
        return np.ones(M, dtype=np.float64)

    n = np.arange(M, dtype=np.float64)
    x = 2 * np.pi * n / (M - 1)

    if window_type is WindowType.HANNING:
        w = 0.5 - 0.5 * np.cos(x)
    elif window_type is WindowType.HAMMING:
        w = 0.54 - 0.46 * np.cos(x)
    elif window_type is WindowType.BLACKMAN:
        w = 0.42 - 0.5 * np.cos(x) + 0.08 * np.cos(2 * x)
    elif window_type is WindowType.BLACKMAN_HARRIS:
        # 4-term Blackman-Harris
        a0, a1, a2, a3 = 0.35875, 0.48829, 0.14128, 0.01168
        w = a0 - a1*np.cos(x) + a2*np.cos(2*x) - a3*np.cos(3*x)
    elif window_type is WindowType.COSINE:
        w = np.sin(np.pi * n / (M - 1))
    else:
        # Kaiser-Bessel window
        w = bessel_i0(beta * np.sqrt(1 - (2*n/(M-1) - 1)**2)) / bessel_i0(beta)

    # Mirror the left half so the taper is exactly symmetric
    half = (M + 1) // 2
    w[M - half:] = w[:half][::-1]

    return w


def apply_window(window_type: Union[str, WindowType], coefficients: np.ndarray,
                 beta: float = DEFAULT_KAISER_BETA) -> np.ndarray:
    """Return ``coefficients`` multiplied by the named window (input is not modified)."""
    coefficients = np.asarray(coefficients, dtype=np.float64)
    return coefficients * build_window(len(coefficients), window_type, beta)


class Windower(Protocol):
    """Anything that can taper a coefficient sequence."""

    def apply(self, window_type: WindowType, coefficients: np.ndarray) -> np.ndarray:
        ...


class DefaultWindower:
    """Windower backed by :func:`build_window`."""

    def __init__(self, beta: float = DEFAULT_KAISER_BETA):
        self.beta = beta

    def apply(self, window_type: WindowType, coefficients: np.ndarray) -> np.ndarray:
        return apply_window(window_type, coefficients, self.beta)
