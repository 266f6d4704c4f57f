#!/usr/bin/env python3
"""
Unity-Gain FIR Designer – Low-pass, High-pass, CIC Cleanup, Root-Raised-Cosine
==============================================================================

Front end for the coefficient synthesisers. Fixed-length designs take a cutoff
and a tap count; bandwidth-driven designs take pass/stop frequencies and an
attenuation target and derive the tap count with Lyons' estimate. High-pass
filters are low-pass designs at the mirrored cutoff followed by spectral
inversion.

CLI examples
------------
# 33-tap Hamming low-pass at 4 kHz:
firsynth --kind lowpass --rate 48000 --cutoff 4000 --length 33

# Low-pass from a transition band, forced to odd length:
firsynth --kind lowpass --rate 48000 --pass 4000 --stop 8000 \
    --atten 60 --window blackman --force-odd

# High-pass passing everything above 12 kHz:
firsynth --kind highpass --rate 48000 --stop 8000 --pass 12000 --atten 60

# CIC droop compensation for a 48 kHz output:
firsynth --kind cic --rate 48000 --pass 5000 --atten 40

# Root-raised-cosine pulse shape, 8 samples/symbol over 16 symbols:
firsynth --kind rrc --sps 8 --symbols 16 --alpha 0.35

# Two-stage decimation plan from 2.4 MHz down to 48 kHz:
firsynth --kind plan --rate 2400000 --decimated-rate 48000 \
    --pass 20000 --stop 24000
"""

from __future__ import annotations
import argparse, logging, sys
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any, Union

import numpy as np

from .cic_gen import get_cic_cleanup_filter
from .exceptions import FilterDesignError, InvalidSpecification
from .polyphase_gen import plan_decimation
from .rrc_gen import get_root_raised_cosine
from .sinc_gen import format_taps, get_sinc, get_tap_count, invert, normalize
from .transform import InverseTransform
from .window import Windower, WindowType

FILTER_KINDS = ("lowpass", "highpass", "cic", "rrc")


# ───────────────────────── Data structures ────────────────────────── #

@dataclass
class FilterSpec:
    """Complete specification of a filter design."""
    kind: str  # 'lowpass', 'highpass', 'cic' or 'rrc'
    sample_rate: int = 0
    window: str = 'hamming'
    cutoff: Optional[float] = None
    length: Optional[int] = None
    pass_frequency: Optional[float] = None
    stop_frequency: Optional[float] = None
    attenuation_db: Optional[float] = None
    force_odd: bool = False
    samples_per_symbol: Optional[int] = None
    symbols: Optional[int] = None
    alpha: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'FilterSpec':
        return cls(**d)


# ───────────────────────── validation ────────────────────────── #

def _check_rate(sample_rate) -> None:
    if sample_rate is None or sample_rate <= 0:
        raise InvalidSpecification(f"Sample rate must be positive, got {sample_rate}")


def _check_length(length) -> None:
    if length is None or length <= 0:
        raise InvalidSpecification(f"Filter length must be positive, got {length}")


def _check_cutoff(sample_rate, cutoff) -> None:
    if cutoff is None or not 0 <= cutoff <= sample_rate / 2:
        raise InvalidSpecification(
            f"Cutoff [{cutoff}] must lie between 0 and half [{sample_rate / 2}] "
            f"of the sample rate [{sample_rate}]")


def _check_band(sample_rate, low, high, attenuation_db, what: str) -> None:
    _check_rate(sample_rate)
    if low is None or high is None or not 0 <= low < high <= sample_rate / 2:
        raise InvalidSpecification(
            f"{what} filter band [{low} - {high}] must be increasing and lie "
            f"within half [{sample_rate / 2}] of the sample rate [{sample_rate}]")
    if attenuation_db is None or attenuation_db <= 0:
        raise InvalidSpecification(f"Attenuation must be positive, got {attenuation_db}")


# ─────────────────────── design routines ─────────────────────── #

def get_low_pass(
    sample_rate: int,
    cutoff: float,
    length: int,
    window: Union[str, WindowType] = WindowType.HAMMING,
    transform: Optional[InverseTransform] = None,
    windower: Optional[Windower] = None,
    log: Optional[logging.Logger] = None
) -> np.ndarray:
    """
    Unity-gain, windowed low-pass filter passing 0 Hz to ``cutoff``.

    Odd lengths are cut from a ``length + 1`` sinc by dropping its unused
    first sample, giving an exactly symmetric result. Even lengths are cut
    from a ``length + 2`` sinc by dropping the first and last samples; the
    result is symmetric about its centre once its own first tap is also
    dropped (``taps[1:]``), not after trimming both ends (``taps[1:-1]``).
    """
    if log is None:
        log = logging.getLogger(__name__)

    _check_rate(sample_rate)
    _check_length(length)
    _check_cutoff(sample_rate, cutoff)

    if length % 2 == 0:
        values = get_sinc(sample_rate, cutoff, length + 2, window, transform, windower, log)
        taps = values[1:-1]
    else:
        values = get_sinc(sample_rate, cutoff, length + 1, window, transform, windower, log)
        taps = values[1:]

    log.info("Low-pass: %d taps, cutoff %.1f Hz at %d Hz, %s window",
             length, cutoff, sample_rate, WindowType.from_name(window).value)

    # Trimming an even design drops a populated tap
    return normalize(taps, log)


def get_low_pass_for_band(
    sample_rate: int,
    pass_frequency: float,
    stop_frequency: float,
    attenuation_db: float,
    window: Union[str, WindowType] = WindowType.HAMMING,
    force_odd: bool = False,
    transform: Optional[InverseTransform] = None,
    windower: Optional[Windower] = None,
    log: Optional[logging.Logger] = None
) -> np.ndarray:
    """
    Low-pass filter with ~0.1 dB passband ripple.

    The transition band runs from ``pass_frequency`` to ``stop_frequency``.

    Requires:
      - pass_frequency < stop_frequency
      - stop_frequency <= sample_rate / 2
    """
    if log is None:
        log = logging.getLogger(__name__)

    _check_band(sample_rate, pass_frequency, stop_frequency, attenuation_db, "Low pass")

    tap_count = get_tap_count(sample_rate, pass_frequency, stop_frequency, attenuation_db)

    if force_odd and tap_count % 2 == 0:
        tap_count -= 1

    if tap_count < 1:
        raise InvalidSpecification(
            f"Attenuation {attenuation_db} dB over {pass_frequency}-{stop_frequency} Hz "
            "needs less than one tap")

    log.info("Estimated %d taps for %.1f dB over %.1f-%.1f Hz",
             tap_count, attenuation_db, pass_frequency, stop_frequency)

    return get_low_pass(sample_rate, pass_frequency, tap_count, window,
                        transform, windower, log)


def get_high_pass(
    sample_rate: int,
    cutoff: float,
    length: int,
    window: Union[str, WindowType] = WindowType.HAMMING,
    transform: Optional[InverseTransform] = None,
    windower: Optional[Windower] = None,
    log: Optional[logging.Logger] = None
) -> np.ndarray:
    """Unity-gain, windowed high-pass filter passing ``cutoff`` to half the sample rate."""
    _check_rate(sample_rate)
    _check_cutoff(sample_rate, cutoff)

    # Design the low-pass at the mirrored cutoff so inversion lands on `cutoff`
    mirrored_cutoff = sample_rate / 2 - cutoff

    return invert(get_low_pass(sample_rate, mirrored_cutoff, length, window,
                               transform, windower, log))


def get_high_pass_for_band(
    sample_rate: int,
    stop_frequency: float,
    pass_frequency: float,
    attenuation_db: float,
    window: Union[str, WindowType] = WindowType.HAMMING,
    force_odd: bool = False,
    transform: Optional[InverseTransform] = None,
    windower: Optional[Windower] = None,
    log: Optional[logging.Logger] = None
) -> np.ndarray:
    """
    High-pass filter with the stopband below ``stop_frequency`` and the
    passband from ``pass_frequency`` up to half the sample rate.
    """
    _check_band(sample_rate, stop_frequency, pass_frequency, attenuation_db, "High pass")

    nyquist = sample_rate / 2

    return invert(get_low_pass_for_band(sample_rate, nyquist - pass_frequency,
                                        nyquist - stop_frequency, attenuation_db,
                                        window, force_odd, transform, windower, log))


def design_filter(spec: FilterSpec, log: Optional[logging.Logger] = None) -> np.ndarray:
    """Build the taps described by ``spec``."""
    if log is None:
        log = logging.getLogger(__name__)

    if spec.kind not in FILTER_KINDS:
        raise InvalidSpecification(f"Unknown filter kind: {spec.kind}")

    log.debug("Designing %s", spec.to_dict())

    if spec.kind == 'rrc':
        if None in (spec.samples_per_symbol, spec.symbols, spec.alpha):
            raise InvalidSpecification("RRC design needs samples_per_symbol, symbols and alpha")
        return get_root_raised_cosine(spec.samples_per_symbol, spec.symbols, spec.alpha, log)

    if spec.kind == 'cic':
        return get_cic_cleanup_filter(spec.sample_rate, spec.pass_frequency,
                                      spec.attenuation_db, spec.window, log=log)

    by_length = spec.cutoff is not None and spec.length is not None

    if spec.kind == 'lowpass':
        if by_length:
            return get_low_pass(spec.sample_rate, spec.cutoff, spec.length,
                                spec.window, log=log)
        return get_low_pass_for_band(spec.sample_rate, spec.pass_frequency,
                                     spec.stop_frequency, spec.attenuation_db,
                                     spec.window, spec.force_odd, log=log)

    if by_length:
        return get_high_pass(spec.sample_rate, spec.cutoff, spec.length,
                             spec.window, log=log)
    return get_high_pass_for_band(spec.sample_rate, spec.stop_frequency,
                                  spec.pass_frequency, spec.attenuation_db,
                                  spec.window, spec.force_odd, log=log)


# ─────────────────────────── CLI ─────────────────────────── #

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Unity-gain FIR coefficient and decimation-plan designer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("CLI examples")[1] if __doc__ else None,
    )

    g = p.add_argument_group("Design")
    g.add_argument("--kind", required=True, choices=FILTER_KINDS + ("plan",),
                   help="What to design. 'plan' prints a polyphase decimation plan.")
    g.add_argument("--rate", type=int,
                   help="Sample rate in Hz (output rate for --kind cic).")
    g.add_argument("--window", default="hamming",
                   choices=[w.value for w in WindowType],
                   help="Window applied to sinc designs (default: hamming).")

    g = p.add_argument_group("Fixed length")
    g.add_argument("--cutoff", type=float, help="Cutoff frequency in Hz.")
    g.add_argument("--length", type=int, help="Number of taps.")

    g = p.add_argument_group("Transition band")
    g.add_argument("--pass", dest="pass_frequency", type=float,
                   help="Pass frequency in Hz.")
    g.add_argument("--stop", dest="stop_frequency", type=float,
                   help="Stop frequency in Hz.")
    g.add_argument("--atten", dest="attenuation_db", type=float, default=60.0,
                   help="Stopband attenuation in dB (default: 60).")
    g.add_argument("--force-odd", action="store_true",
                   help="Drop one tap if the estimate is even.")

    g = p.add_argument_group("Root-raised-cosine")
    g.add_argument("--sps", dest="samples_per_symbol", type=int,
                   help="Samples per symbol.")
    g.add_argument("--symbols", type=int, help="Symbol span (even).")
    g.add_argument("--alpha", type=float, help="Roll-off factor (0, 1].")

    g = p.add_argument_group("Decimation plan")
    g.add_argument("--decimated-rate", type=int, help="Target output rate in Hz.")

    g = p.add_argument_group("Output/Analysis")
    g.add_argument("--breaks", action="store_true",
                   help="Print one tap per line instead of eight.")
    g.add_argument("--plot", action="store_true",
                   help="Show the magnitude response (requires matplotlib).")

    g = p.add_argument_group("Misc")
    g.add_argument("--debug", action="store_true",
                   help="Enable DEBUG-level logging for extra detail.")
    g.add_argument("--log-file", type=str,
                   help="Write all log output to this file in addition to the console.")
    return p


def main(argv=None) -> int:
    p = build_parser()
    a = p.parse_args(argv)

    log_handlers = [logging.StreamHandler(sys.stderr)]
    if a.log_file:
        log_format = "%(asctime)s - %(levelname)s - %(message)s"
        log_handlers.append(logging.FileHandler(a.log_file, mode='w'))
    else:
        log_format = "%(levelname)s %(message)s"

    logging.basicConfig(
        handlers=log_handlers,
        level=logging.DEBUG if a.debug else logging.INFO,
        format=log_format
    )
    log = logging.getLogger("firsynth")

    try:
        if a.kind == "plan":
            if a.rate is None or a.decimated_rate is None:
                p.error("--kind plan needs --rate and --decimated-rate")
            stages = plan_decimation(a.rate, a.decimated_rate,
                                     a.pass_frequency, a.stop_frequency, log)
            print(" x ".join(str(s) for s in stages))
            return 0

        spec = FilterSpec(
            kind=a.kind,
            sample_rate=a.rate or 0,
            window=a.window,
            cutoff=a.cutoff,
            length=a.length,
            pass_frequency=a.pass_frequency,
            stop_frequency=a.stop_frequency,
            attenuation_db=a.attenuation_db,
            force_odd=a.force_odd,
            samples_per_symbol=a.samples_per_symbol,
            symbols=a.symbols,
            alpha=a.alpha,
        )
        taps = design_filter(spec, log)
    except FilterDesignError as e:
        log.error("Design failed: %s", e)
        return 1

    print(format_taps(taps, a.breaks))

    if a.plot:
        from .verification import verify_filter_response
        rate = spec.sample_rate or spec.samples_per_symbol or 1
        verify_filter_response(taps, rate, plot=True)

    return 0


if __name__ == "__main__":
    sys.exit(main())
