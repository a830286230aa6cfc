"""
E-series standard component values and SI-prefix formatting.

Provides snapping of ideal L, C and R magnitudes to the nearest standard
value in the E12 or E24 series, and the short SI notation used on
component labels and in the BOM.
"""

import math
from typing import Sequence, Tuple, Union

# E-series base values (multiplied by decades to get full range)
# These are the standard IEC 60063 values per decade (1.0 to <10.0)

E12_BASE = (1.0, 1.2, 1.5, 1.8, 2.2, 2.7, 3.3, 3.9, 4.7, 5.6, 6.8, 8.2)

E24_BASE = (
    1.0, 1.1, 1.2, 1.3, 1.5, 1.6, 1.8, 2.0, 2.2, 2.4, 2.7, 3.0,
    3.3, 3.6, 3.9, 4.3, 4.7, 5.1, 5.6, 6.2, 6.8, 7.5, 8.2, 9.1,
)

E_SERIES = {
    'E12': E12_BASE,
    'E24': E24_BASE,
}

# Reactive parts (L, C) snap to E12, resistors to E24
REACTIVE_SERIES = 'E12'
RESISTOR_SERIES = 'E24'

_UPPER_PREFIXES = ('', 'k', 'M', 'G')
_LOWER_PREFIXES = ('', 'm', 'μ', 'n', 'p', 'f')

SeriesLike = Union[str, Sequence[float]]


def _resolve_series(series: SeriesLike) -> Sequence[float]:
    if isinstance(series, str):
        if series not in E_SERIES:
            raise ValueError(f"Unknown series '{series}'. Must be one of: {list(E_SERIES.keys())}")
        return E_SERIES[series]
    return series


def snap_to_standard_value(value: float, series: SeriesLike = REACTIVE_SERIES) -> float:
    """
    Snap a value to the nearest standard value of an E-series.

    The value is split into mantissa * 10^exponent with the mantissa in
    [1, 10). The series entry with the smallest absolute difference to the
    mantissa wins, unless 10.0 (the base of the next decade) is strictly
    closer, in which case the result is promoted to 10^(exponent + 1).

    Args:
        value: Ideal magnitude in SI units (Ohms, Henries, Farads).
        series: Series name ('E12', 'E24') or an ascending sequence of
                base values in [1, 10).

    Returns:
        The snapped value, or 0.0 for non-positive / non-finite input.
    """
    base_values = _resolve_series(series)

    if not math.isfinite(value) or value <= 0:
        return 0.0

    exponent = math.floor(math.log10(value))
    mantissa = value / (10 ** exponent)

    closest = base_values[0]
    min_diff = abs(mantissa - base_values[0])
    for bv in base_values[1:]:
        diff = abs(mantissa - bv)
        if diff < min_diff:
            min_diff = diff
            closest = bv

    # Wraparound: 9.8 is nearer to the next decade's 1.0 than to 8.2
    if abs(mantissa - 10.0) < min_diff:
        return 10.0 ** (exponent + 1)

    return closest * (10 ** exponent)


def snap_with_error(value: float, series: SeriesLike = REACTIVE_SERIES) -> Tuple[float, float]:
    """
    Snap a value and report the signed deviation from the ideal.

    Returns:
        Tuple of (snapped_value, error_percentage). Positive error means
        the snapped value is higher. Degenerate input gives (0.0, 0.0).
    """
    snapped = snap_to_standard_value(value, series)
    if snapped == 0.0:
        return 0.0, 0.0
    error_pct = ((snapped - value) / value) * 100
    return snapped, round(error_pct, 4)


def _trim(scaled: float) -> str:
    text = f"{scaled:.1f}" if scaled < 10 else f"{scaled:.0f}"
    if text.endswith('.0'):
        text = text[:-2]
    return text


def format_value(value: float) -> str:
    """
    Format a magnitude with an SI prefix and no unit.

    Examples:
        format_value(1500)      → '1.5k'
        format_value(4.7e-9)    → '4.7n'
        format_value(1e-7)      → '100n'
        format_value(0)         → '0'

    Only the magnitude is rendered; the sign is dropped.
    """
    if value == 0 or not math.isfinite(value):
        return '0'

    val = abs(value)

    if val >= 1:
        idx = 0
        while val >= 1000 and idx < len(_UPPER_PREFIXES) - 1:
            val /= 1000
            idx += 1
        return _trim(val) + _UPPER_PREFIXES[idx]

    idx = 0
    while val < 0.99 and idx < len(_LOWER_PREFIXES) - 1:
        val *= 1000
        idx += 1
    return _trim(val) + _LOWER_PREFIXES[idx]


def engineering_notation(value: float, unit: str = '') -> str:
    """Format a value with SI prefix followed by its unit, e.g. '4.7kΩ'."""
    return f"{format_value(value)}{unit}"
