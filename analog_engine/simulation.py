"""
Closed-form frequency response of the filter approximations.

No circuit is solved here. Each sample is evaluated directly from the
approximation's magnitude function at x = f / fc:

    Butterworth:  |S21|² = 1 / (1 + x^2n)
    Chebyshev:    |S21|² = 1 / (1 + ε²·Cn(x)²),  ε = sqrt(10^(Ap/10) - 1)
    Elliptic:     Chebyshev passband, linear dB transition up to
                  x = 1.1 + 0.5/n, then -As + 2·sin(nπx/5) stopband ripple

Phase is a monotonic heuristic asymptoting to -n·90°, not the true
transfer-function phase. Return loss comes from lossless power
conservation: |S11|² = 1 - |S21|².
"""

import math
from decimal import ROUND_HALF_UP, Decimal

import numpy as np
from typing import Dict, List, Optional

from analog_engine.models import (
    Approximation,
    FilterClass,
    FilterSpecification,
    FrequencyResponseSample,
    Topology,
)

MIN_SWEEP_START_HZ = 0.1
MIN_REFLECTION = 1e-4

# Phase steepening per family, relative to the Butterworth heuristic
_PHASE_FACTOR = {
    Approximation.BUTTERWORTH: 1.0,
    Approximation.CHEBYSHEV: 1.1,
    Approximation.ELLIPTIC: 1.3,
}


def generate_sweep(start: float, end: float, num_points: int) -> np.ndarray:
    """
    Logarithmically spaced sweep of num_points + 1 frequencies.

    Both ends are included. The start is clamped to 0.1 Hz; end > start is
    assumed, a reversed range simply yields a descending sweep.
    """
    start = max(MIN_SWEEP_START_HZ, start)
    if num_points <= 0:
        return np.array([start], dtype=float)
    with np.errstate(divide='ignore', invalid='ignore'):
        return np.logspace(np.log10(start), np.log10(end), num_points + 1)


def ripple_factor(ripple_db: float) -> float:
    """ε for a passband ripple given in dB."""
    with np.errstate(invalid='ignore', over='ignore'):
        return float(np.sqrt(np.power(10.0, ripple_db / 10) - 1))


def chebyshev_polynomial(x: np.ndarray, n: int) -> np.ndarray:
    """Cn(x) = cos(n·acos x) for x <= 1, cosh(n·acosh x) above."""
    with np.errstate(invalid='ignore', over='ignore'):
        return np.where(x <= 1, np.cos(n * np.arccos(x)), np.cosh(n * np.arccosh(x)))


def round_half_up(values: np.ndarray, decimals: int = 2) -> np.ndarray:
    """
    Round to `decimals` places, exact ties away from zero.

    Works on the exact binary value of each float, so 0.125 becomes 0.13
    while 1.005 (stored as 1.00499...) becomes 1.0. Non-finite values pass
    through unchanged.
    """
    quantum = Decimal(1).scaleb(-decimals)
    out = np.asarray(values, dtype=float).copy()
    for i, v in np.ndenumerate(out):
        if math.isfinite(v):
            out[i] = float(Decimal(v).quantize(quantum, rounding=ROUND_HALF_UP))
    return out


def _ripple_loss_db(cn: np.ndarray, eps: float) -> np.ndarray:
    return -10 * np.log10(1 + eps * eps * cn * cn)


def _heuristic_phase(x: np.ndarray, n: int) -> np.ndarray:
    return -(n * 90) * (np.arctan(x) / (np.pi / 2))


def _lowpass_loss_db(x: np.ndarray, spec: FilterSpecification, eps: float) -> np.ndarray:
    n = spec.order
    approximation = spec.approximation

    if approximation == Approximation.BUTTERWORTH:
        return -10 * np.log10(1 + x ** (2 * n))

    if approximation == Approximation.CHEBYSHEV:
        return _ripple_loss_db(chebyshev_polynomial(x, n), eps)

    # Elliptic
    ripple = spec.passband_ripple_db
    atten = spec.stopband_attenuation_db
    transition_width = 1.1 + 0.5 / np.float64(n)

    passband = _ripple_loss_db(np.cos(n * np.arccos(x)), eps)
    transition = -ripple - (atten - ripple) * (x - 1) / (transition_width - 1)
    stopband = -atten + 2 * np.sin(n * np.pi * x / 5)

    return np.select([x <= 1, x < transition_width], [passband, transition], default=stopband)


def _highpass_loss_db(x: np.ndarray, spec: FilterSpecification, eps: float) -> np.ndarray:
    """
    Low-pass/high-pass duality on x_inv = 1/x.

    Only Butterworth is mirrored exactly. Chebyshev and Elliptic mirror the
    passband ripple and fall back to -20·log10(x_inv·n) in the stopband.
    """
    n = spec.order
    x_inv = 1 / x

    if spec.approximation == Approximation.BUTTERWORTH:
        return -10 * np.log10(1 + x_inv ** (2 * n))

    passband = _ripple_loss_db(np.cos(n * np.arccos(x_inv)), eps)
    stopband = -20 * np.log10(x_inv * n)
    return np.where(x_inv <= 1, passband, stopband)


def _passband_mask(frequencies: np.ndarray, spec: FilterSpecification) -> np.ndarray:
    f0 = spec.cutoff_frequency_hz
    if spec.filter_class == FilterClass.LOW_PASS:
        return frequencies <= f0
    if spec.filter_class == FilterClass.HIGH_PASS:
        return frequencies >= f0
    # Band-pass has no passband test
    return np.zeros_like(frequencies, dtype=bool)


def return_loss_db(insertion_loss_db: np.ndarray) -> np.ndarray:
    """S11 in dB from S21 in dB, assuming a lossless two-port."""
    s21 = 10 ** (insertion_loss_db / 20)
    s11 = np.sqrt(np.maximum(0, 1 - s21 * s21))
    return 20 * np.log10(np.maximum(s11, MIN_REFLECTION))


def simulate_frequency_response(spec: FilterSpecification) -> List[FrequencyResponseSample]:
    """
    Simulate insertion loss, return loss and phase across the sweep.

    Args:
        spec: Filter specification. The sweep is taken from
              sweep_start_hz / sweep_end_hz / sweep_point_count.

    Returns:
        sweep_point_count + 1 samples in sweep order. Loss and phase
        values are rounded to 2 decimals. Degenerate specifications
        (order 0, zero gain, ...) give inf/NaN values instead of raising.
    """
    frequencies = generate_sweep(spec.sweep_start_hz, spec.sweep_end_hz, spec.sweep_point_count)
    n = spec.order

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        x = frequencies / np.float64(spec.cutoff_frequency_hz)
        eps = ripple_factor(spec.passband_ripple_db)

        if spec.filter_class == FilterClass.HIGH_PASS:
            mag_db = _highpass_loss_db(x, spec, eps)
            phase = -_heuristic_phase(1 / x, n)
        else:
            mag_db = _lowpass_loss_db(x, spec, eps)
            phase = _heuristic_phase(x, n) * _PHASE_FACTOR[spec.approximation]

        if spec.topology == Topology.ACTIVE:
            # Flat gain, no op-amp bandwidth limit
            mag_db = mag_db + 20 * np.log10(np.float64(spec.gain_v_per_v))

        s11_db = return_loss_db(mag_db)

    mag_db = round_half_up(mag_db)
    s11_db = round_half_up(s11_db)
    phase = round_half_up(phase)
    in_passband = _passband_mask(frequencies, spec)

    return [
        FrequencyResponseSample(
            frequency_hz=float(frequencies[i]),
            insertion_loss_db=float(mag_db[i]),
            return_loss_db=float(s11_db[i]),
            phase_degrees=float(phase[i]),
            is_in_passband=bool(in_passband[i]),
        )
        for i in range(len(frequencies))
    ]


def response_summary(
    samples: List[FrequencyResponseSample],
    reference_db: float = 0.0,
) -> Dict:
    """
    Condense a simulated sweep into headline figures.

    Args:
        samples: Output of simulate_frequency_response().
        reference_db: Level the -3 dB point is measured from
                      (20·log10(gain) for active designs).

    Returns:
        Dict with point count, sweep range, worst-case passband insertion
        and return loss (None without passband samples) and the first
        interpolated -3 dB crossing (None if the sweep never crosses).
    """
    if not samples:
        return {
            'num_points': 0,
            'freq_start': None,
            'freq_end': None,
            'passband_insertion_loss_db': None,
            'passband_return_loss_db': None,
            'minus_3db_freq': None,
        }

    freqs = np.array([s.frequency_hz for s in samples])
    il = np.array([s.insertion_loss_db for s in samples])
    passband = np.array([s.is_in_passband for s in samples])

    passband_il: Optional[float] = None
    passband_rl: Optional[float] = None
    if passband.any():
        passband_il = float(np.min(il[passband]))
        passband_rl = float(max(s.return_loss_db for s in samples if s.is_in_passband))

    return {
        'num_points': len(samples),
        'freq_start': float(freqs[0]),
        'freq_end': float(freqs[-1]),
        'passband_insertion_loss_db': passband_il,
        'passband_return_loss_db': passband_rl,
        'minus_3db_freq': _find_crossing(freqs, il - reference_db, -3.0),
    }


def _find_crossing(freqs: np.ndarray, values: np.ndarray, level: float) -> Optional[float]:
    """First crossing of `level`, interpolated in log-frequency."""
    above = values >= level
    for i in range(1, len(values)):
        if above[i] == above[i - 1]:
            continue
        v0, v1 = values[i - 1], values[i]
        if not (np.isfinite(v0) and np.isfinite(v1)) or v1 == v0:
            return float(freqs[i])
        t = (level - v0) / (v1 - v0)
        log_f = np.log10(freqs[i - 1]) + t * (np.log10(freqs[i]) - np.log10(freqs[i - 1]))
        return round(float(10 ** log_f), 2)
    return None
