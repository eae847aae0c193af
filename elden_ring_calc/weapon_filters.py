"""
Elden Ring Calculator - Weapon Filters
======================================
Narrow the full weapon list down to what the weapon table should show, and
group rows by weapon class.

Affinity IDs:
    0 = Standard, 1 = Heavy, 2 = Keen, 3 = Quality, ... , -1 = Special
    (unique weapons that can't have an affinity)
"""

from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from .core import (
    Attributes,
    Weapon,
    WeaponAttackResult,
    WeaponType,
    DLC_WEAPON_TYPES,
    adjust_attributes_for_two_handing,
    get_ineffective_attributes,
)

WeaponTableRow = Tuple[Weapon, WeaponAttackResult]

SPECIAL_AFFINITY_ID = -1

AFFINITY_NAMES: Mapping[int, str] = {
    0: "Standard",
    1: "Heavy",
    2: "Keen",
    3: "Quality",
    4: "Fire",
    5: "Flame Art",
    6: "Lightning",
    7: "Sacred",
    8: "Magic",
    9: "Cold",
    10: "Poison",
    11: "Blood",
    12: "Occult",
    SPECIAL_AFFINITY_ID: "Special",
}


def is_effective(weapon: Weapon, attributes: Attributes, two_handing: bool = False) -> bool:
    """True if the player meets every requirement (after the two-handing STR bonus)."""
    adjusted = adjust_attributes_for_two_handing(weapon, attributes, two_handing)
    return not get_ineffective_attributes(weapon, adjusted)


def filter_weapons(
    weapons: Iterable[Weapon],
    weapon_types: Optional[Iterable[WeaponType]] = None,
    affinity_ids: Optional[Iterable[int]] = None,
    include_dlc: bool = True,
    effective_only: bool = False,
    attributes: Optional[Attributes] = None,
    two_handing: bool = False,
) -> List[Weapon]:
    """
    Filter weapons for the weapon table.

    Args:
        weapons: All decoded weapons
        weapon_types: Weapon classes to keep (None = all)
        affinity_ids: Affinities to keep (None = all)
        include_dlc: Keep Shadow of the Erdtree weapons and weapon classes
        effective_only: Drop weapons the player can't wield effectively
        attributes: Player attributes, required when effective_only is set
        two_handing: Two handing, for the effective_only STR check

    Returns:
        New list, in input order
    """
    if effective_only and attributes is None:
        raise ValueError("effective_only requires attributes")

    weapon_type_set = set(weapon_types) if weapon_types is not None else None
    affinity_id_set = set(affinity_ids) if affinity_ids is not None else None

    filtered = []
    for weapon in weapons:
        if weapon_type_set is not None and weapon.weapon_type not in weapon_type_set:
            continue
        if affinity_id_set is not None and weapon.affinity_id not in affinity_id_set:
            continue
        if not include_dlc and (weapon.dlc or weapon.weapon_type in DLC_WEAPON_TYPES):
            continue
        if effective_only and not is_effective(weapon, attributes, two_handing):
            continue
        filtered.append(weapon)

    return filtered


def group_weapons_by_type(
    rows: Sequence[WeaponTableRow],
) -> List[Tuple[WeaponType, List[WeaponTableRow]]]:
    """
    Split rows into one group per weapon class.

    Groups follow WeaponType order; rows keep their order within a group, so
    sort before grouping.
    """
    groups = {}
    for row in rows:
        groups.setdefault(row[0].weapon_type, []).append(row)
    return [(weapon_type, groups[weapon_type]) for weapon_type in sorted(groups)]
