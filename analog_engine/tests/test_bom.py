"""
Tests for BOM generation and export.
"""

import json

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from analog_engine.bom import (
    generate_bom,
    group_bom,
    estimate_cost,
    total_cost,
    export_csv,
    export_json,
    bom_summary,
)
from analog_engine.models import Approximation, FilterSpecification, Topology
from analog_engine.synthesis import synthesize_components


ACTIVE = FilterSpecification(topology=Topology.ACTIVE, cutoff_frequency_hz=1e6)
ELLIPTIC = FilterSpecification(order=5, approximation=Approximation.ELLIPTIC, cutoff_frequency_hz=1e6)


class TestGenerateBom:
    """Test per-part BOM entries."""

    def test_one_entry_per_component(self):
        comps = synthesize_components(ELLIPTIC)
        bom = generate_bom(comps)
        assert [e['ref'] for e in bom] == [c.label for c in comps]

    def test_value_display(self):
        bom = generate_bom(synthesize_components(ACTIVE))
        assert bom[0]['value_display'] == '16Ω'
        assert bom[2]['value_display'] == '10nF'

    def test_resonator_description(self):
        bom = generate_bom(synthesize_components(ELLIPTIC))
        by_ref = {e['ref']: e for e in bom}
        assert by_ref['L2z']['description'] == 'Shunt resonator inductor'
        assert by_ref['L1']['description'] == 'Inductor'

    def test_stage_in_description(self):
        bom = generate_bom(synthesize_components(ACTIVE))
        assert bom[0]['description'] == 'Resistor, stage 1'

    def test_prices(self):
        bom = generate_bom(synthesize_components(ACTIVE))
        assert bom[0]['estimated_price'] == pytest.approx(0.05)   # resistor
        assert bom[2]['estimated_price'] == pytest.approx(0.30)   # 10 nF capacitor

    def test_snap_error_reported(self):
        """Rs/ωc = 7.958 µH is stocked as 8.2 µH, +3.04 %."""
        bom = generate_bom(synthesize_components(FilterSpecification(order=3)))
        snap = bom[0]['e_series_snapped']
        assert snap['series'] == 'E12'
        assert snap['actual'] == pytest.approx(bom[0]['value'])
        assert snap['target'] == pytest.approx(7.9577e-6, rel=1e-4)
        assert snap['error_pct'] == pytest.approx(3.04, abs=0.01)

    def test_resistor_snap_uses_e24(self):
        """1/(ωc·10 nF) = 15.92 Ω → 16 Ω on E24."""
        bom = generate_bom(synthesize_components(ACTIVE))
        assert bom[0]['e_series_snapped']['series'] == 'E24'
        assert bom[0]['e_series_snapped']['error_pct'] == pytest.approx(0.531, abs=1e-3)
        assert bom[2]['e_series_snapped']['error_pct'] == pytest.approx(0.0, abs=1e-9)

    def test_degenerate_part_has_no_snap_info(self):
        bom = generate_bom(synthesize_components(FilterSpecification(order=1, source_impedance_ohm=0.0)))
        assert bom[0]['value'] == 0.0
        assert bom[0]['e_series_snapped'] is None

    def test_resonator_priced_by_element(self):
        bom = generate_bom(synthesize_components(ELLIPTIC))
        by_ref = {e['ref']: e for e in bom}
        assert by_ref['L2z']['role'] == 'lc_parallel'
        assert by_ref['L2z']['estimated_price'] == pytest.approx(1.50)   # 10 µH inductor
        assert by_ref['C2z']['estimated_price'] == pytest.approx(0.30)   # 2.7 nF capacitor
        assert by_ref['C2z']['description'] == 'Shunt resonator capacitor'


class TestGroupBom:
    """Test collapsing of identical parts."""

    def test_active_pairs(self):
        lines = group_bom(generate_bom(synthesize_components(ACTIVE)))
        assert [(line['ref'], line['quantity']) for line in lines] == [('R1, R2', 2), ('C1, C2', 2)]

    def test_ladder_groups_flat_values(self):
        lines = group_bom(generate_bom(synthesize_components(FilterSpecification(order=5))))
        assert [(line['ref'], line['quantity']) for line in lines] == [('L1, L3, L5', 3), ('C2, C4', 2)]

    def test_total_preserved(self):
        bom = generate_bom(synthesize_components(ELLIPTIC))
        assert total_cost(group_bom(bom)) == pytest.approx(total_cost(bom))


class TestExport:
    """Test CSV and JSON export."""

    def test_csv_header_and_total(self):
        csv_text = export_csv(generate_bom(synthesize_components(ACTIVE)))
        lines = csv_text.strip().splitlines()
        assert lines[0].startswith('Reference,Role,Value')
        assert 'TOTAL:' in lines[-1]
        assert '$0.70' in lines[-1]

    def test_json_roundtrip(self):
        bom = generate_bom(synthesize_components(ACTIVE))
        data = json.loads(export_json(bom))
        assert len(data['bom']) == 4
        assert data['cost_estimate']['total_usd'] == pytest.approx(0.70)
        assert data['cost_estimate']['by_role'] == {'resistor': 0.1, 'capacitor': 0.6}

    def test_estimate_counts_quantity(self):
        lines = group_bom(generate_bom(synthesize_components(ACTIVE)))
        assert estimate_cost(lines)['component_count'] == 4


class TestSummary:

    def test_counts(self):
        summary = bom_summary(synthesize_components(ELLIPTIC))
        assert summary['total_components'] == 7
        assert summary['inductors'] == 3
        assert summary['capacitors'] == 0
        assert summary['resonator_parts'] == 4
        assert summary['resistors'] == 0
        assert summary['display'][0] == 'L1 = 8.2μH'


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
