"""
Bill of Materials generation from synthesized components.

Generates BOM in multiple formats (dict, CSV, JSON) with estimated pricing
and grouping of identical parts.
"""

import csv
import io
import json
from typing import Dict, List

from analog_engine.components import (
    REACTIVE_SERIES,
    RESISTOR_SERIES,
    engineering_notation,
    snap_with_error,
)
from analog_engine.models import ComponentDescriptor, ComponentRole


# Rough cost estimates per component role (USD)
_COST_ESTIMATES = {
    'resistor': {
        'base': 0.05,
        'value_multiplier': {},
    },
    'capacitor': {
        'base': 0.10,
        'value_multiplier': {  # by capacitance range
            1e-12: 0.10,   # pF range
            1e-9: 0.10,    # nF range
            1e-6: 0.20,    # µF range
            1e-3: 1.00,    # mF range (electrolytic)
        },
    },
    'inductor': {
        'base': 0.50,
        'value_multiplier': {  # by inductance range
            1e-6: 0.30,    # µH range
            1e-3: 1.00,    # mH range
            1e-1: 3.00,    # large inductors
        },
    },
}

_DESCRIPTIONS = {
    'inductor': 'Inductor',
    'capacitor': 'Capacitor',
    'resistor': 'Resistor',
}

# Resonator halves are priced and described by their element kind
_KIND_BY_UNIT = {
    'H': 'inductor',
    'F': 'capacitor',
    'Ω': 'resistor',
}


def _part_kind(comp: ComponentDescriptor) -> str:
    if comp.role == ComponentRole.LC_PARALLEL:
        return _KIND_BY_UNIT.get(comp.unit, comp.role.value)
    return comp.role.value


def _snap_info(comp: ComponentDescriptor, kind: str):
    """Target, actual and signed error of the standard-value snap."""
    if comp.ideal_value is None or comp.value <= 0:
        return None
    series = RESISTOR_SERIES if kind == 'resistor' else REACTIVE_SERIES
    snapped, error_pct = snap_with_error(comp.ideal_value, series)
    return {
        'target': comp.ideal_value,
        'actual': snapped,
        'error_pct': error_pct,
        'series': series,
    }


def _estimate_price(role: str, value: float) -> float:
    """Estimate component cost in USD."""
    if role not in _COST_ESTIMATES:
        return 0.25  # Default fallback

    info = _COST_ESTIMATES[role]
    price = info['base']

    if info['value_multiplier'] and value > 0:
        for threshold, mult in sorted(info['value_multiplier'].items()):
            if value <= threshold:
                price += mult
                break
        else:
            price += 2.00

    return round(price, 2)


def _describe(comp: ComponentDescriptor, kind: str) -> str:
    text = _DESCRIPTIONS.get(kind, kind)
    if comp.role == ComponentRole.LC_PARALLEL:
        text = f'Shunt resonator {text.lower()}'
    if comp.stage is not None:
        text = f'{text}, stage {comp.stage}'
    return text


def generate_bom(components: List[ComponentDescriptor]) -> List[Dict]:
    """
    Generate a Bill of Materials from synthesized components.

    Args:
        components: Output of synthesize_components().

    Returns:
        List of BOM entry dicts with ref, role, value, value_display, unit,
        quantity, description, estimated_price and e_series_snapped (the
        ideal target, the standard value and the signed error in percent,
        or None when the part carries no ideal value), in synthesis order.
    """
    bom = []

    for comp in components:
        kind = _part_kind(comp)
        bom.append({
            'ref': comp.label,
            'role': comp.role.value,
            'value': comp.value,
            'value_display': f'{comp.formatted_value}{comp.unit}',
            'unit': comp.unit,
            'quantity': 1,
            'description': _describe(comp, kind),
            'estimated_price': _estimate_price(kind, comp.value),
            'e_series_snapped': _snap_info(comp, kind),
        })

    return bom


def group_bom(bom: List[Dict]) -> List[Dict]:
    """
    Collapse entries with the same role, unit and value into one line.

    References are joined with commas and quantities summed; the first
    occurrence fixes the line order.
    """
    grouped: Dict[tuple, Dict] = {}

    for entry in bom:
        key = (entry['role'], entry['unit'], entry['value'])
        if key not in grouped:
            line = dict(entry)
            line['refs'] = [entry['ref']]
            grouped[key] = line
            continue
        line = grouped[key]
        line['refs'].append(entry['ref'])
        line['quantity'] += entry.get('quantity', 1)

    lines = []
    for line in grouped.values():
        line['ref'] = ', '.join(line.pop('refs'))
        lines.append(line)
    return lines


def estimate_cost(bom: List[Dict]) -> Dict:
    """
    Estimate total cost from a BOM.

    Returns cost breakdown and total.
    """
    total = 0.0
    by_role = {}

    for entry in bom:
        cost = entry.get('estimated_price', 0) * entry.get('quantity', 1)
        total += cost
        role = entry.get('role', 'other')
        by_role[role] = by_role.get(role, 0.0) + cost

    return {
        'total_usd': round(total, 2),
        'by_role': {k: round(v, 2) for k, v in by_role.items()},
        'component_count': sum(e.get('quantity', 1) for e in bom),
        'note': 'Rough estimate for budgeting. Actual costs vary by supplier and quantity.',
    }


def total_cost(bom: List[Dict]) -> float:
    """Calculate total estimated cost of a BOM."""
    return round(sum(entry.get('estimated_price', 0) * entry.get('quantity', 1) for entry in bom), 2)


def export_csv(bom: List[Dict]) -> str:
    """Export BOM as CSV string."""
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(['Reference', 'Role', 'Value', 'Quantity', 'Description', 'Est. Price (USD)'])

    for entry in bom:
        writer.writerow([
            entry['ref'],
            entry['role'],
            entry['value_display'],
            entry['quantity'],
            entry['description'],
            f"${entry.get('estimated_price', 0):.2f}",
        ])

    # Total row
    writer.writerow(['', '', '', '', 'TOTAL:', f"${total_cost(bom):.2f}"])

    return output.getvalue()


def export_json(bom: List[Dict]) -> str:
    """Export BOM as JSON string."""
    export_data = {
        'bom': bom,
        'cost_estimate': estimate_cost(bom),
        'generated_by': 'Analog Designer Engine',
    }
    return json.dumps(export_data, indent=2, ensure_ascii=False)


def bom_summary(components: List[ComponentDescriptor]) -> Dict:
    """Count parts by role, e.g. for an API response header."""
    return {
        'total_components': len(components),
        'resistors': sum(1 for c in components if c.role == ComponentRole.RESISTOR),
        'capacitors': sum(1 for c in components if c.role == ComponentRole.CAPACITOR),
        'inductors': sum(1 for c in components if c.role == ComponentRole.INDUCTOR),
        'resonator_parts': sum(1 for c in components if c.role == ComponentRole.LC_PARALLEL),
        'display': [f'{c.label} = {engineering_notation(c.value, c.unit)}' for c in components],
    }
