#!/usr/bin/env python3
"""
Inverse DFT backends used by the spectral synthesisers.

A backend performs a "full" real-input inverse transform in place: the first
``n`` entries of a ``2n`` buffer hold a real spectrum, and on return the buffer
holds the unscaled complex inverse DFT, interleaved as ``re, im, re, im, ...``.
Backends keep no state, so one instance may be shared between threads.
"""

import numpy as np
import scipy.fft
from typing import Protocol


class InverseTransform(Protocol):
    """In-place, unscaled, real-input inverse DFT."""

    def real_inverse_full(self, buffer: np.ndarray, n: int) -> np.ndarray:
        ...


def _check_buffer(buffer: np.ndarray, n: int) -> None:
    if n <= 0:
        raise ValueError(f"Transform size must be positive, got {n}")
    if buffer.ndim != 1 or len(buffer) < 2 * n:
        raise ValueError(f"Buffer of length {len(buffer)} cannot hold a "
                         f"{n}-point interleaved complex result")


def _interleave(buffer: np.ndarray, result: np.ndarray, n: int) -> np.ndarray:
    buffer[0:2 * n:2] = result.real
    buffer[1:2 * n:2] = result.imag
    return buffer


class ScipyInverseTransform:
    """Backend built on :func:`scipy.fft.ifft` (default)."""

    def real_inverse_full(self, buffer: np.ndarray, n: int) -> np.ndarray:
        _check_buffer(buffer, n)
        # norm="forward" leaves the inverse unscaled
        result = scipy.fft.ifft(buffer[:n], n, norm="forward")
        return _interleave(buffer, result, n)


class NumpyInverseTransform:
    """Backend built on :func:`numpy.fft.ifft`."""

    def real_inverse_full(self, buffer: np.ndarray, n: int) -> np.ndarray:
        _check_buffer(buffer, n)
        result = np.fft.ifft(buffer[:n], n) * n
        return _interleave(buffer, result, n)
