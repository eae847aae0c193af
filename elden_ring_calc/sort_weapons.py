"""
Elden Ring Calculator - Weapon Sorting
======================================
Orders (weapon, attack result) rows for the weapon table.

Every sort key maps a row to a single projection where ascending order is the
natural "best first" display order - numeric columns that should show the
largest value first are negated.

Sort keys:
    name, totalAttack, poise, stamDmg, stamCost, bowDist, crit, stability
    <N>Attack         e.g. "2Attack"         (N = AttackPowerType code)
    <N>SpellScaling   e.g. "1SpellScaling"
    <A>Scaling        e.g. "dexScaling"      (A = Attribute code)
    <A>Requirement    e.g. "strRequirement"
    <N>GuardCutRate   e.g. "0GuardCutRate"
    <W>WeakRate       e.g. "3WeakRate"       (W = WeakRateType code)

Unknown keys are not an error: every row projects to "" and the order is
left to the sort.
"""

import logging
from functools import cmp_to_key
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .core import (
    Attribute,
    AttackPowerType,
    WeakRateType,
    Weapon,
    WeaponAttackResult,
    NO_BOW_DIST,
    get_total_damage_attack_power,
)

logger = logging.getLogger(__name__)

WeaponTableRow = Tuple[Weapon, WeaponAttackResult]
SortValue = Union[float, str]
SortValueGetter = Callable[[WeaponTableRow], SortValue]

# Rows without a bow range sort after every bow
NO_BOW_DIST_SORT_VALUE = 999999

SIMPLE_SORT_KEYS = (
    "name",
    "totalAttack",
    "poise",
    "stamDmg",
    "stamCost",
    "bowDist",
    "crit",
    "stability",
)


# =============================================================================
# SORT KEY PARSING
# =============================================================================

def _parse_attack_power_type(code: str) -> Optional[AttackPowerType]:
    try:
        return AttackPowerType(int(code))
    except ValueError:
        return None


def _parse_attribute(code: str) -> Optional[Attribute]:
    try:
        return Attribute(code)
    except ValueError:
        return None


def _parse_weak_rate_type(code: str) -> Optional[WeakRateType]:
    try:
        return WeakRateType(int(code))
    except ValueError:
        return None


def _get_parametric_sort_value(sort_by: str) -> Optional[SortValueGetter]:
    """Build the projection for a "<code><Suffix>" key, or None if it doesn't parse."""
    # SpellScaling must be checked before Scaling
    if sort_by.endswith("SpellScaling"):
        attack_power_type = _parse_attack_power_type(sort_by[:-len("SpellScaling")])
        if attack_power_type is not None:
            return lambda row: -row[1].spell_scaling.get(attack_power_type, 0)

    elif sort_by.endswith("Attack"):
        attack_power_type = _parse_attack_power_type(sort_by[:-len("Attack")])
        if attack_power_type is not None:
            return lambda row: -row[1].attack_power.get(attack_power_type, 0)

    elif sort_by.endswith("Scaling"):
        attribute = _parse_attribute(sort_by[:-len("Scaling")])
        if attribute is not None:
            return lambda row: -row[0].attribute_scaling[row[1].upgrade_level].get(attribute, 0)

    elif sort_by.endswith("Requirement"):
        attribute = _parse_attribute(sort_by[:-len("Requirement")])
        if attribute is not None:
            return lambda row: -row[0].requirements.get(attribute, 0)

    elif sort_by.endswith("GuardCutRate"):
        attack_power_type = _parse_attack_power_type(sort_by[:-len("GuardCutRate")])
        if attack_power_type is not None:
            return lambda row: -row[1].guard_cut_rate.get(attack_power_type, 0)

    elif sort_by.endswith("WeakRate"):
        weak_rate_type = _parse_weak_rate_type(sort_by[:-len("WeakRate")])
        if weak_rate_type is not None:
            return lambda row: -row[0].weak_rate.get(weak_rate_type, 0)

    return None


def _name_sort_value(row: WeaponTableRow) -> str:
    weapon = row[0]
    # Affinity padded like "0003" so variants of one weapon stay together
    return f"{weapon.weapon_name},{str(weapon.affinity_id).rjust(4, '0')}"


def _bow_dist_sort_value(row: WeaponTableRow) -> float:
    weapon = row[0]
    if weapon.bow_dist == NO_BOW_DIST:
        return NO_BOW_DIST_SORT_VALUE
    return -weapon.bow_dist


def get_sort_value(sort_by: str) -> SortValueGetter:
    """
    Get the projection function for a sort key.

    Unknown keys return a projection that is "" for every row.
    """
    if sort_by == "name":
        return _name_sort_value
    if sort_by == "totalAttack":
        return lambda row: -get_total_damage_attack_power(row[1].attack_power)
    if sort_by == "poise":
        return lambda row: -row[0].poise
    if sort_by == "stamDmg":
        return lambda row: -row[0].stam_dmg
    if sort_by == "stamCost":
        return lambda row: -row[0].stam_cost
    if sort_by == "crit":
        return lambda row: -row[0].crit
    if sort_by == "bowDist":
        return _bow_dist_sort_value
    if sort_by == "stability":
        return lambda row: -row[1].stability

    getter = _get_parametric_sort_value(sort_by)
    if getter is not None:
        return getter

    logger.debug("Unknown weapon sort key %r, leaving order unspecified", sort_by)
    return lambda row: ""


def is_sort_key(sort_by: str) -> bool:
    """True if sort_by is a recognised sort key."""
    return sort_by in SIMPLE_SORT_KEYS or _get_parametric_sort_value(sort_by) is not None


# =============================================================================
# SORTING
# =============================================================================

def sort_weapons(
    rows: Sequence[WeaponTableRow],
    sort_by: str,
    reverse: bool = False,
) -> List[WeaponTableRow]:
    """
    Sort weapon table rows by a column.

    The comparison is a strict greater-than test flipped by reverse, so rows
    with exactly equal projections have no defined relative order.

    Args:
        rows: (weapon, attack result) pairs; not modified
        sort_by: Sort key (see module docstring)
        reverse: Worst first instead of best first

    Returns:
        New list of the same rows
    """
    get_value = get_sort_value(sort_by)

    def compare(row1: WeaponTableRow, row2: WeaponTableRow) -> int:
        return 1 if (get_value(row1) > get_value(row2)) != reverse else -1

    return sorted(rows, key=cmp_to_key(compare))
