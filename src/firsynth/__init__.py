"""
firsynth - unity-gain FIR coefficient synthesis and decimation planning.
"""

from .exceptions import FilterDesignError, InvalidSpecification, NonIntegerDecimation
from .window import WindowType, build_window, apply_window
from .transform import ScipyInverseTransform, NumpyInverseTransform
from .sinc_gen import get_tap_count, normalize, invert, get_sinc, get_sine, format_taps
from .fir_filter_gen import (
    FilterSpec,
    design_filter,
    get_low_pass,
    get_low_pass_for_band,
    get_high_pass,
    get_high_pass_for_band,
)
from .cic_gen import get_cic_cleanup_filter
from .rrc_gen import get_root_raised_cosine, symbols_for_attenuation
from .polyphase_gen import plan_decimation

__version__ = "0.1.0"
__all__ = [
    "FilterDesignError",
    "InvalidSpecification",
    "NonIntegerDecimation",
    "WindowType",
    "build_window",
    "apply_window",
    "ScipyInverseTransform",
    "NumpyInverseTransform",
    "get_tap_count",
    "normalize",
    "invert",
    "get_sinc",
    "get_sine",
    "format_taps",
    "FilterSpec",
    "design_filter",
    "get_low_pass",
    "get_low_pass_for_band",
    "get_high_pass",
    "get_high_pass_for_band",
    "get_cic_cleanup_filter",
    "get_root_raised_cosine",
    "symbols_for_attenuation",
    "plan_decimation",
]
