"""
Component synthesis for passive ladder and active realizations.

Passive designs are a Cauer-style ladder of `order` stages, series element
first. Every stage uses the flat first-order scaling

    L = Rs / ωc        C = 1 / (ωc · Rs)

rather than per-stage prototype g-values; elliptic designs add a shunt
resonator (L·1.2, C·0.8) at interior shunt positions. Active designs are a
single equal-component Sallen-Key stage whatever the order.

All values are snapped to standard series before formatting: E12 for
L and C, E24 for resistors.
"""

import numpy as np
from dataclasses import replace
from typing import List, Tuple

from analog_engine.components import (
    REACTIVE_SERIES,
    RESISTOR_SERIES,
    format_value,
    snap_to_standard_value,
)
from analog_engine.models import (
    Approximation,
    ComponentDescriptor,
    ComponentRole,
    FilterClass,
    FilterSpecification,
    Topology,
)


# Normalized Butterworth polynomial coefficients, indexed by order
BUTTERWORTH_POLYNOMIALS = {
    1: (1, 1),
    2: (1, 1.414, 1),
    3: (1, 2, 2, 1),
    4: (1, 2.613, 3.414, 2.613, 1),
    5: (1, 3.236, 5.236, 5.236, 3.236, 1),
    6: (1, 3.864, 7.464, 9.142, 7.464, 3.864, 1),
    7: (1, 4.494, 10.098, 14.592, 14.592, 10.098, 4.494, 1),
}

# Butterworth low-pass prototype element values g1..gn (Rs = Rl = 1 Ω, ωc = 1)
G_VALUES = {
    1: (2.000,),
    2: (1.414, 1.414),
    3: (1.000, 2.000, 1.000),
    4: (0.7654, 1.8478, 1.8478, 0.7654),
    5: (0.6180, 1.6180, 2.0000, 1.6180, 0.6180),
    6: (0.5176, 1.4142, 1.9318, 1.9318, 1.4142, 0.5176),
    7: (0.4450, 1.2470, 1.8019, 2.0000, 1.8019, 1.2470, 0.4450),
}

# Elliptic shunt resonator scaling relative to the flat L and C values
RESONATOR_L_FACTOR = 1.2
RESONATOR_C_FACTOR = 0.8

# Active stage capacitor seeds (F) by cutoff band
ACTIVE_CAP_DEFAULT = 10e-9
ACTIVE_CAP_HIGH_FREQ = 100e-12   # cutoff above 1 MHz
ACTIVE_CAP_LOW_FREQ = 1e-6       # cutoff below 100 Hz

_UNITS = {
    ComponentRole.INDUCTOR: 'H',
    ComponentRole.CAPACITOR: 'F',
    ComponentRole.RESISTOR: 'Ω',
}

INDUCTOR_UNIT = _UNITS[ComponentRole.INDUCTOR]
CAPACITOR_UNIT = _UNITS[ComponentRole.CAPACITOR]


def prototype_g_values(order: int) -> Tuple[float, ...]:
    """Tabulated Butterworth ladder g-values for orders 1-7."""
    try:
        return G_VALUES[order]
    except KeyError:
        raise ValueError(f"No g-values tabulated for order {order}. Available: {sorted(G_VALUES)}")


def butterworth_polynomial(order: int) -> Tuple[float, ...]:
    """Coefficients of the normalized Butterworth polynomial, highest power first."""
    try:
        return BUTTERWORTH_POLYNOMIALS[order]
    except KeyError:
        raise ValueError(
            f"No polynomial tabulated for order {order}. Available: {sorted(BUTTERWORTH_POLYNOMIALS)}"
        )


def _descriptor(label: str, ideal: float, role: ComponentRole, series: str = REACTIVE_SERIES,
                stage=None, unit=None) -> ComponentDescriptor:
    snapped = snap_to_standard_value(ideal, series)
    return ComponentDescriptor(
        label=label,
        formatted_value=format_value(snapped),
        unit=unit or _UNITS[role],
        role=role,
        value=snapped,
        stage=stage,
        ideal_value=ideal,
    )


def _passive_ladder(spec: FilterSpecification, wc: float) -> List[ComponentDescriptor]:
    rs = spec.source_impedance_ohm
    n = spec.order
    is_elliptic = spec.approximation == Approximation.ELLIPTIC

    with np.errstate(divide='ignore', invalid='ignore'):
        ideal_l = float(np.float64(rs) / wc)
        ideal_c = float(1 / (np.float64(wc) * rs))

    components = []
    for i in range(n):
        is_series = i % 2 == 0
        ref = i + 1

        if is_elliptic and not is_series and 0 < i < n - 1:
            components.append(_descriptor(f'L{ref}z', RESONATOR_L_FACTOR * ideal_l, ComponentRole.LC_PARALLEL,
                                          unit=INDUCTOR_UNIT))
            components.append(_descriptor(f'C{ref}z', RESONATOR_C_FACTOR * ideal_c, ComponentRole.LC_PARALLEL,
                                          unit=CAPACITOR_UNIT))
            continue

        # High-pass swaps which element sits in series; band-pass takes this path too
        inductor_in_series = spec.filter_class == FilterClass.LOW_PASS
        if is_series == inductor_in_series:
            components.append(_descriptor(f'L{ref}', ideal_l, ComponentRole.INDUCTOR))
        else:
            components.append(_descriptor(f'C{ref}', ideal_c, ComponentRole.CAPACITOR))

    return components


def _active_capacitor_seed(cutoff_hz: float) -> float:
    if cutoff_hz > 1e6:
        return ACTIVE_CAP_HIGH_FREQ
    if cutoff_hz < 100:
        return ACTIVE_CAP_LOW_FREQ
    return ACTIVE_CAP_DEFAULT


def _active_stage(spec: FilterSpecification, wc: float) -> List[ComponentDescriptor]:
    """Equal-R, equal-C Sallen-Key stage: pick a standard C, then solve for R."""
    standard_c = snap_to_standard_value(_active_capacitor_seed(spec.cutoff_frequency_hz), REACTIVE_SERIES)

    with np.errstate(divide='ignore', invalid='ignore'):
        ideal_r = float(1 / (np.float64(wc) * standard_c))

    resistor = _descriptor('R1', ideal_r, ComponentRole.RESISTOR, RESISTOR_SERIES, stage=1)
    capacitor = _descriptor('C1', standard_c, ComponentRole.CAPACITOR, stage=1)

    return [
        resistor,
        replace(resistor, label='R2'),
        capacitor,
        replace(capacitor, label='C2'),
    ]


def synthesize_components(spec: FilterSpecification) -> List[ComponentDescriptor]:
    """
    Synthesize standard-value components realizing the specification.

    Args:
        spec: Filter specification. Passive designs use order, filter class,
              approximation and source impedance; active designs use the
              cutoff only.

    Returns:
        Ordered component descriptors. Passive: one entry per ladder stage
        (two for an elliptic resonator). Active: R1, R2, C1, C2.
        Degenerate values (zero cutoff, zero impedance) snap to 0.
    """
    wc = 2 * np.pi * spec.cutoff_frequency_hz

    if spec.topology == Topology.PASSIVE:
        return _passive_ladder(spec, wc)
    return _active_stage(spec, wc)
