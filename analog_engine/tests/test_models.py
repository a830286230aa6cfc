"""
Tests for the specification and output value types.
"""

import dataclasses

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from analog_engine.models import (
    Approximation,
    ComponentDescriptor,
    ComponentRole,
    FilterClass,
    FilterSpecification,
    OptimizationGoal,
    Topology,
)


class TestFilterSpecification:

    def test_defaults(self):
        spec = FilterSpecification()
        assert spec.filter_class == FilterClass.LOW_PASS
        assert spec.topology == Topology.PASSIVE
        assert spec.approximation == Approximation.BUTTERWORTH
        assert spec.order == 5
        assert spec.cutoff_frequency_hz == 1e6
        assert spec.sweep_point_count == 400

    def test_frozen(self):
        spec = FilterSpecification()
        with pytest.raises(dataclasses.FrozenInstanceError):
            spec.order = 3

    def test_replace_returns_copy(self):
        spec = FilterSpecification()
        changed = spec.replace(order=3)
        assert changed.order == 3
        assert spec.order == 5

    def test_from_dict_coerces_enums(self):
        spec = FilterSpecification.from_dict({
            'filter_class': 'high_pass',
            'topology': 'active',
            'approximation': 'chebyshev',
            'optimization': 'min_noise',
            'order': 3,
        })
        assert spec.filter_class is FilterClass.HIGH_PASS
        assert spec.topology is Topology.ACTIVE
        assert spec.approximation is Approximation.CHEBYSHEV
        assert spec.optimization is OptimizationGoal.MIN_NOISE
        assert spec.order == 3

    def test_from_dict_ignores_unknown_and_none(self):
        spec = FilterSpecification.from_dict({'bogus': 1, 'order': None, 'second_cutoff_frequency_hz': None})
        assert spec.order == 5
        assert spec.second_cutoff_frequency_hz is None

    def test_from_dict_rejects_bad_enum(self):
        with pytest.raises(ValueError):
            FilterSpecification.from_dict({'approximation': 'bessel'})

    def test_to_dict_round_trip(self):
        spec = FilterSpecification(filter_class=FilterClass.BAND_PASS, order=2)
        data = spec.to_dict()
        assert data['filter_class'] == 'band_pass'
        assert FilterSpecification.from_dict(data) == spec


class TestComponentDescriptor:

    def test_to_dict(self):
        comp = ComponentDescriptor('L1', '8.2μ', 'H', ComponentRole.INDUCTOR, 8.2e-6)
        assert comp.to_dict() == {
            'label': 'L1',
            'formatted_value': '8.2μ',
            'unit': 'H',
            'role': 'inductor',
            'value': 8.2e-6,
            'stage': None,
            'ideal_value': None,
        }

    def test_resonator_role_value(self):
        comp = ComponentDescriptor('C2z', '2.7n', 'F', ComponentRole.LC_PARALLEL, 2.7e-9, ideal_value=2.55e-9)
        data = comp.to_dict()
        assert data['role'] == 'lc_parallel'
        assert data['ideal_value'] == pytest.approx(2.55e-9)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
