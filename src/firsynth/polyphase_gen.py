#!/usr/bin/env python3
"""
Polyphase Decimation Planner
============================

Splits an overall integer decimation into one or two cascaded stages:

- Ratios below 20 always use a single stage
- Otherwise the ideal first-stage rate comes from Lyons, Understanding Digital
  Signal Processing 3e, section 10.2.1, and the nearest integer divisor of the
  overall ratio is used
- Divisors are found by trial division from 1 to the ratio, O(ratio); this is
  fine for the tens-to-thousands ratios seen in practice
"""

import logging
import math
from typing import List, Optional, Sequence

from .exceptions import InvalidSpecification, NonIntegerDecimation

SINGLE_STAGE_LIMIT = 20


def get_bandwidth_ratio(pass_frequency: float, stop_frequency: float) -> float:
    """F ratio ``(stop - pass) / stop`` of the final transition band."""
    if pass_frequency is None or stop_frequency is None or not 0 <= pass_frequency < stop_frequency:
        raise InvalidSpecification(
            f"Pass frequency [{pass_frequency}] must be less than the stop "
            f"frequency [{stop_frequency}]")

    return (stop_frequency - pass_frequency) / stop_frequency


def get_optimal_stage_one_rate(decimation: int, pass_frequency: float,
                               stop_frequency: float) -> float:
    """
    Ideal (non-integer) first-stage decimation for a two-stage chain.

    ``2 D (1 - sqrt(D F / (2 - F))) / (2 - F (D + 1))``; NaN or infinite when
    the denominator vanishes.
    """
    ratio = get_bandwidth_ratio(pass_frequency, stop_frequency)

    numerator = 1.0 - math.sqrt(decimation * ratio / (2.0 - ratio))
    denominator = 2.0 - ratio * (decimation + 1.0)

    if denominator == 0:
        return math.nan if numerator == 0 else math.copysign(math.inf, numerator)

    return 2.0 * decimation * numerator / denominator


def get_factors(value: int) -> List[int]:
    """All positive divisors of ``value`` in ascending order (brute force)."""
    return [x for x in range(1, value + 1) if value % x == 0]


def find_closest(desired: float, factors: Sequence[int]) -> int:
    """Factor nearest to ``desired``; ties go to the smaller factor."""
    best_factor = None
    best_delta = math.inf

    for factor in sorted(factors):
        delta = abs(desired - factor)
        if delta < best_delta:
            best_delta = delta
            best_factor = factor

    if best_factor is None:
        raise ValueError("No factors to choose from")

    return best_factor


def plan_decimation(
    sample_rate: int,
    decimated_rate: int,
    pass_frequency: Optional[float] = None,
    stop_frequency: Optional[float] = None,
    log: Optional[logging.Logger] = None
) -> List[int]:
    """
    Decimation rates for a single- or two-stage polyphase chain.

    Parameters
    ----------
    sample_rate : int
        Input rate in Hz
    decimated_rate : int
        Final output rate in Hz; must divide ``sample_rate``
    pass_frequency, stop_frequency : float
        Final transition band, needed when the ratio is 20 or more

    Returns
    -------
    list of int
        One or two stages, largest first, whose product is the overall ratio
    """
    if log is None:
        log = logging.getLogger(__name__)

    if sample_rate is None or sample_rate <= 0 or decimated_rate is None or decimated_rate <= 0:
        raise InvalidSpecification(
            f"Sample rate [{sample_rate}] and decimated rate [{decimated_rate}] "
            "must be positive")

    if sample_rate % decimated_rate != 0:
        raise NonIntegerDecimation(
            f"Sample rate [{sample_rate}] must be an integer multiple of the "
            f"decimated rate [{decimated_rate}]")

    decimation = int(sample_rate // decimated_rate)

    if decimation < SINGLE_STAGE_LIMIT:
        log.info("Decimation %d: single stage", decimation)
        return [decimation]

    optimal = get_optimal_stage_one_rate(decimation, pass_frequency, stop_frequency)

    if not math.isfinite(optimal):
        log.warning("Decimation %d: no finite optimal first stage; using a single stage",
                    decimation)
        return [decimation]

    factors = get_factors(decimation)
    stage1 = find_closest(optimal, factors)

    log.info("Decimation %d: stage 1 optimal %.3f, nearest divisor %d",
             decimation, optimal, stage1)
    log.debug("Divisors of %d: %s", decimation, factors)

    if stage1 == decimation or stage1 == 1:
        return [decimation]

    stage2 = decimation // stage1

    return [max(stage1, stage2), min(stage1, stage2)]
