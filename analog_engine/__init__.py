"""
Analog Designer Compute Engine

Core computation library for analog filter response simulation and
standard-value component synthesis.

All math is deterministic — no AI in the loop for numerical calculations.
"""

from analog_engine.components import snap_to_standard_value, format_value, engineering_notation, E12_BASE, E24_BASE
from analog_engine.models import (
    FilterSpecification, FrequencyResponseSample, ComponentDescriptor,
    FilterClass, Topology, Approximation, OptimizationGoal, ComponentRole,
)
from analog_engine.simulation import simulate_frequency_response, generate_sweep, response_summary
from analog_engine.synthesis import synthesize_components, prototype_g_values, butterworth_polynomial
from analog_engine.bom import generate_bom, group_bom, export_csv, export_json

__version__ = "0.1.0"
