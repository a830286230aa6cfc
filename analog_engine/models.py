"""
Value types shared by the simulator and the synthesizer.

A FilterSpecification is the single immutable input; the simulator and
the synthesizer each derive an independent output collection from it.
"""

from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from typing import Dict, Optional


class FilterClass(str, Enum):
    LOW_PASS = "low_pass"
    HIGH_PASS = "high_pass"
    BAND_PASS = "band_pass"


class Topology(str, Enum):
    PASSIVE = "passive"
    ACTIVE = "active"


class Approximation(str, Enum):
    BUTTERWORTH = "butterworth"
    CHEBYSHEV = "chebyshev"
    ELLIPTIC = "elliptic"


class OptimizationGoal(str, Enum):
    MIN_NOISE = "min_noise"
    MIN_COMPONENTS = "min_components"
    MAX_POWER_EFFICIENCY = "max_power_efficiency"


class ComponentRole(str, Enum):
    INDUCTOR = "inductor"
    CAPACITOR = "capacitor"
    RESISTOR = "resistor"
    LC_PARALLEL = "lc_parallel"   # either half of an elliptic shunt resonator


_ENUM_FIELDS = {
    'filter_class': FilterClass,
    'topology': Topology,
    'approximation': Approximation,
    'optimization': OptimizationGoal,
}


@dataclass(frozen=True)
class FilterSpecification:
    """Engineering parameters of one filter design.

    Defaults reproduce a 5th-order 1 MHz Butterworth low-pass ladder in a
    50 Ω system, swept 1 kHz to 100 MHz.
    """
    filter_class: FilterClass = FilterClass.LOW_PASS
    topology: Topology = Topology.PASSIVE
    approximation: Approximation = Approximation.BUTTERWORTH
    passband_ripple_db: float = 0.1       # Chebyshev / Elliptic only
    stopband_attenuation_db: float = 40.0  # Elliptic only
    order: int = 5
    cutoff_frequency_hz: float = 1e6
    second_cutoff_frequency_hz: Optional[float] = 5e6  # band-pass, unused by the math
    source_impedance_ohm: float = 50.0
    load_impedance_ohm: float = 50.0
    gain_v_per_v: float = 1.0              # active topology only
    optimization: OptimizationGoal = OptimizationGoal.MIN_COMPONENTS
    sweep_start_hz: float = 1e3
    sweep_end_hz: float = 1e8
    sweep_point_count: int = 400

    def replace(self, **changes) -> "FilterSpecification":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Dict) -> "FilterSpecification":
        """Build a specification from a plain dict, coercing enum fields.

        Unknown keys are ignored; missing keys take their defaults.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            if key not in known:
                continue
            if value is None and key != 'second_cutoff_frequency_hz':
                continue
            enum_type = _ENUM_FIELDS.get(key)
            kwargs[key] = enum_type(value) if enum_type is not None else value
        return cls(**kwargs)

    def to_dict(self) -> Dict:
        data = asdict(self)
        for key in _ENUM_FIELDS:
            data[key] = data[key].value
        return data


@dataclass(frozen=True)
class FrequencyResponseSample:
    """One point of the simulated sweep."""
    frequency_hz: float
    insertion_loss_db: float   # S21
    return_loss_db: float      # S11
    phase_degrees: float
    is_in_passband: bool

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class ComponentDescriptor:
    """One synthesized part.

    The label is positional: renderers look parts up by `L{i}`, `C{i}`,
    `L{i}z`, `C{i}z`, `R1`, `R2`, `C1`, `C2`. Resonator halves carry the
    LC_PARALLEL role; their unit tells the inductor from the capacitor.
    `value` is the snapped part, `ideal_value` the computed target.
    """
    label: str
    formatted_value: str
    unit: str
    role: ComponentRole
    value: float = 0.0
    stage: Optional[int] = None
    ideal_value: Optional[float] = None

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['role'] = self.role.value
        return data
