"""Unit grouping and bulk edits.

Units sharing the same name, area and value form one fungible group. Edits
and deletions act on a whole group, identified by its composite key.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List

from ..models.numeric import coerce_int, coerce_number
from ..models.proforma import Proforma, Unit, UnitType, new_id


@dataclass
class UnitGroup:
    """Units of one type that share name, area and value."""

    key: str
    name: str
    area: float
    value: float
    quantity: int = 0
    ids: List[str] = field(default_factory=list)

    @property
    def total_revenue(self) -> float:
        return self.quantity * self.area * self.value


def _key_number(number: float) -> str:
    return str(int(number)) if float(number).is_integer() else repr(float(number))


def unit_group_key(unit: Unit) -> str:
    """Composite key ``name|area|value`` identifying a unit's group."""
    return f"{unit.name}|{_key_number(unit.area)}|{_key_number(unit.value)}"


def group_units(units: List[Unit]) -> List[UnitGroup]:
    """Collapse units into groups, in first-seen order."""
    groups: Dict[str, UnitGroup] = {}
    for unit in units:
        key = unit_group_key(unit)
        group = groups.get(key)
        if group is None:
            group = UnitGroup(key=key, name=unit.name, area=unit.area, value=unit.value)
            groups[key] = group
        group.quantity += 1
        group.ids.append(unit.id)
    return list(groups.values())


def _make_units(unit_type_id: str, name: str, area: float, value: float, quantity: int) -> List[Unit]:
    count = max(1, coerce_int(quantity, 1))
    batch = new_id()
    return [
        Unit(
            id=f"{unit_type_id}-{batch}-{i}",
            name=name,
            area=coerce_number(area),
            value=coerce_number(value),
        )
        for i in range(count)
    ]


def add_units(unit_type: UnitType, name: str, area: float, value: float, quantity: int = 1) -> UnitType:
    """Append ``quantity`` identical units (at least one) to a unit type."""
    new_units = _make_units(unit_type.id, name, area, value, quantity)
    return replace(unit_type, units=list(unit_type.units) + new_units)


def replace_unit_group(
    unit_type: UnitType,
    group_key: str,
    name: str,
    area: float,
    value: float,
    quantity: int = 1,
) -> UnitType:
    """Replace exactly the units matching ``group_key`` with a new batch.

    Args:
        unit_type: Unit type being edited.
        group_key: Key of the group before the edit.
        name: New unit name.
        area: New area per unit (SF).
        value: New price per SF.
        quantity: Number of units in the edited group.

    Returns:
        UnitType with the group's units swapped out.
    """
    kept = [u for u in unit_type.units if unit_group_key(u) != group_key]
    new_units = _make_units(unit_type.id, name, area, value, quantity)
    return replace(unit_type, units=kept + new_units)


def delete_unit_group(unit_type: UnitType, group_key: str) -> UnitType:
    """Remove every unit in the group ``group_key``."""
    return replace(
        unit_type,
        units=[u for u in unit_type.units if unit_group_key(u) != group_key],
    )


def update_unit_type(proforma: Proforma, unit_type: UnitType) -> Proforma:
    """Return a copy of the proforma with ``unit_type`` swapped in by id (or appended)."""
    unit_mix = [unit_type if ut.id == unit_type.id else ut for ut in proforma.unit_mix]
    if not any(ut.id == unit_type.id for ut in proforma.unit_mix):
        unit_mix.append(unit_type)
    return replace(proforma, unit_mix=unit_mix)
