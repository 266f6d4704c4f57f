#!/usr/bin/env python3
"""
Example: design the filters for a 2.4 MHz -> 48 kHz receiver chain.
"""

import logging

import numpy as np

from firsynth import (
    WindowType,
    get_cic_cleanup_filter,
    get_low_pass_for_band,
    get_root_raised_cosine,
    plan_decimation,
)
from firsynth.verification import verify_filter_response


def main():
    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)s: %(message)s'
    )

    sample_rate = 2_400_000
    output_rate = 48_000

    stages = plan_decimation(sample_rate, output_rate, 20_000, 24_000)
    print(f"Decimation stages: {' x '.join(str(s) for s in stages)}")

    channel = get_low_pass_for_band(output_rate, 6_000, 9_000, 60,
                                    WindowType.BLACKMAN, force_odd=True)
    results = verify_filter_response(channel, output_rate, 6_000, 9_000)
    print(f"\nChannel filter: {len(channel)} taps")
    print(f"  Passband ripple: {results['passband_ripple_db']:.2f} dB")
    print(f"  Stopband attenuation: {results['stopband_atten_db']:.1f} dB")

    cleanup = get_cic_cleanup_filter(output_rate, 5_000, 40)
    print(f"\nCIC cleanup filter: {len(cleanup)} taps, "
          f"sum |h| = {np.sum(np.abs(cleanup)):.6f}")

    pulse = get_root_raised_cosine(10, 16, 0.2)
    print(f"\nRRC pulse: {len(pulse)} taps, sum h = {np.sum(pulse):.6f}")


if __name__ == '__main__':
    main()
