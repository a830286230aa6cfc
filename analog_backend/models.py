"""Pydantic models for Analog Designer API requests and responses."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from analog_engine.models import (
    Approximation,
    ComponentRole,
    FilterClass,
    FilterSpecification,
    OptimizationGoal,
    Topology,
)


# --- Filter specification ---

class FilterSpecModel(BaseModel):
    """Validated filter parameters. The engine itself does no validation."""
    filter_class: FilterClass = FilterClass.LOW_PASS
    topology: Topology = Topology.PASSIVE
    approximation: Approximation = Approximation.BUTTERWORTH
    passband_ripple_db: float = Field(0.1, gt=0, description="Passband ripple (dB), Chebyshev/Elliptic")
    stopband_attenuation_db: float = Field(40.0, gt=0, description="Stopband attenuation (dB), Elliptic")
    order: int = Field(5, ge=1, le=9, description="Filter order")
    cutoff_frequency_hz: float = Field(1e6, gt=0, description="Cutoff frequency (Hz)")
    second_cutoff_frequency_hz: Optional[float] = Field(5e6, gt=0, description="Upper cutoff (Hz), band-pass")
    source_impedance_ohm: float = Field(50.0, gt=0, description="Source impedance (Ohms)")
    load_impedance_ohm: float = Field(50.0, gt=0, description="Load impedance (Ohms)")
    gain_v_per_v: float = Field(1.0, gt=0, description="Passband gain (V/V), active only")
    optimization: OptimizationGoal = OptimizationGoal.MIN_COMPONENTS
    sweep_start_hz: float = Field(1e3, description="Sweep start (Hz), floored at 0.1")
    sweep_end_hz: float = Field(1e8, gt=0, description="Sweep end (Hz)")
    sweep_point_count: int = Field(400, ge=1, le=5000, description="Sweep steps")

    def to_spec(self) -> FilterSpecification:
        return FilterSpecification.from_dict(self.model_dump())


# --- Engine outputs ---

class ResponseSample(BaseModel):
    frequency_hz: float
    insertion_loss_db: float
    return_loss_db: float
    phase_degrees: float
    is_in_passband: bool


class Component(BaseModel):
    label: str = Field(..., description="Positional label (L1, C2z, R1)")
    formatted_value: str
    unit: str
    role: ComponentRole
    value: float
    stage: Optional[int] = None
    ideal_value: Optional[float] = Field(None, description="Computed value before standard-series snapping")


class ResponseSummary(BaseModel):
    num_points: int
    freq_start: Optional[float] = None
    freq_end: Optional[float] = None
    passband_insertion_loss_db: Optional[float] = None
    passband_return_loss_db: Optional[float] = None
    minus_3db_freq: Optional[float] = None


# --- API Request/Response Models ---

class SimulateResponse(BaseModel):
    samples: list[ResponseSample]
    summary: ResponseSummary


class SynthesizeResponse(BaseModel):
    components: list[Component]
    bom_summary: dict = {}


class DesignRequest(BaseModel):
    spec: FilterSpecModel
    include_insights: bool = False


class DesignResponse(BaseModel):
    spec: FilterSpecModel
    samples: list[ResponseSample]
    summary: ResponseSummary
    components: list[Component]
    insights: Optional[str] = None


class InsightResponse(BaseModel):
    insights: str
    fallback: bool = False


class SnapInfo(BaseModel):
    target: float
    actual: float
    error_pct: float
    series: str


class BOMEntry(BaseModel):
    ref: str
    role: str
    value: float
    value_display: str
    unit: str
    quantity: int = 1
    description: str
    estimated_price: Optional[float] = None
    e_series_snapped: Optional[SnapInfo] = None


class BOMRequest(BaseModel):
    spec: FilterSpecModel
    grouped: bool = True


class BOMResponse(BaseModel):
    entries: list[BOMEntry]
    total_cost: Optional[float] = None
    cost_estimate: dict = {}
    csv: str
    json_export: str


class StandardSeriesResponse(BaseModel):
    name: str
    values: list[float]
