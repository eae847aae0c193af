"""
Weapon table rows and display formatting.

Builds the (weapon, attack result) rows for the current settings and turns
them into a pandas DataFrame for st.dataframe(). All rounding for display
happens here; the calculator itself never rounds.
"""
import math
from typing import Dict, List, Optional, Sequence

import pandas as pd

from elden_ring_calc.core import (
    Attribute,
    AttackPowerType,
    Weapon,
    ALL_ATTRIBUTES,
    ALL_DAMAGE_TYPES,
    ALL_STATUS_TYPES,
    ALL_WEAK_RATE_TYPES,
    NO_BOW_DIST,
    clamp_upgrade_level,
    get_scaling_tier,
    get_weapon_attack,
    get_total_damage_attack_power,
)
from elden_ring_calc.sort_weapons import WeaponTableRow, is_sort_key, sort_weapons
from elden_ring_calc.weapon_filters import filter_weapons

from .data_manager import AppState

ATTACK_POWER_TYPE_LABELS: Dict[AttackPowerType, str] = {
    AttackPowerType.PHYSICAL: "Phy",
    AttackPowerType.MAGIC: "Mag",
    AttackPowerType.FIRE: "Fir",
    AttackPowerType.LIGHTNING: "Lit",
    AttackPowerType.HOLY: "Hol",
    AttackPowerType.POISON: "Poison",
    AttackPowerType.SCARLET_ROT: "Rot",
    AttackPowerType.BLEED: "Bleed",
    AttackPowerType.FROST: "Frost",
    AttackPowerType.SLEEP: "Sleep",
    AttackPowerType.MADNESS: "Madness",
    AttackPowerType.DEATH_BLIGHT: "Death",
}

ATTRIBUTE_LABELS: Dict[Attribute, str] = {
    Attribute.STR: "Str",
    Attribute.DEX: "Dex",
    Attribute.INT: "Int",
    Attribute.FAI: "Fai",
    Attribute.ARC: "Arc",
}


# =============================================================================
# FORMATTING
# =============================================================================

def round_value(value: float) -> int:
    """Truncate for display, with a small offset against floating point error."""
    return math.floor(value + 0.000000001)


def format_attack_power(value: Optional[float], base: Optional[float] = None) -> str:
    """
    Format one attack power cell.

    With base given, shows "base + bonus" like the in-game status screen
    ("base - penalty" when requirements aren't met).
    """
    if value is None:
        return "-"
    if base is None:
        return str(round_value(value))
    bonus = round_value(value - base)
    if bonus < 0:
        return f"{round_value(base)} - {-bonus}"
    return f"{round_value(base)} + {bonus}"


def format_scaling(weapon: Weapon, upgrade_level: int, attribute: Attribute, numerical: bool) -> str:
    scaling = weapon.attribute_scaling[upgrade_level].get(attribute, 0)
    if not scaling:
        return "-"
    if numerical:
        return f"{round(scaling * 10000) / 100:g}"
    return get_scaling_tier(weapon, upgrade_level, attribute) or "-"


def format_bow_dist(value: float) -> str:
    if value == NO_BOW_DIST:
        return "-"
    return f"{value + 100:g}%"


def format_cut_rate(value: Optional[float]) -> str:
    """Guard damage negation (or guard boost) as a percentage, capped at 100%."""
    if not value:
        return "-"
    return f"{min(100, round(value * 10) / 10):g}%"


def format_weak_rate(value: Optional[float]) -> str:
    """Bonus damage against an enemy category, e.g. 1.2 -> "20%"."""
    if value is None or value == 1:
        return "-"
    return f"{round((value - 1) * 100 * 100) / 100:g}%"


def format_weapon_name(weapon: Weapon, upgrade_level: int) -> str:
    name = f"{weapon.name} +{upgrade_level}" if upgrade_level > 0 else weapon.name
    if weapon.variant:
        name = f"{name} ({weapon.variant})"
    return name


# =============================================================================
# SORTABLE COLUMNS
# =============================================================================

FIXED_COLUMN_SORT_KEYS: Dict[str, str] = {
    "Weapon": "name",
    "Total": "totalAttack",
    "Guard Boost": "stability",
    "Poise": "poise",
    "Stam Dmg": "stamDmg",
    "Stam Cost": "stamCost",
    "Crit": "crit",
    "Range": "bowDist",
}


def get_column_sort_key(column: str) -> Optional[str]:
    """Sort key for a weapon table column, or None if it can't be sorted."""
    if column in FIXED_COLUMN_SORT_KEYS:
        return FIXED_COLUMN_SORT_KEYS[column]

    for attack_power_type, label in ATTACK_POWER_TYPE_LABELS.items():
        code = int(attack_power_type)
        if column == label:
            return f"{code}Attack"
        if column == f"{label} Spell":
            return f"{code}SpellScaling"
        if column == f"Guard {label}":
            return f"{code}GuardCutRate"

    for attribute, label in ATTRIBUTE_LABELS.items():
        if column == f"{label} Scaling":
            return f"{attribute.value}Scaling"
        if column == f"{label} Req":
            return f"{attribute.value}Requirement"

    for weak_rate_type in ALL_WEAK_RATE_TYPES:
        if column == f"Weak {weak_rate_type.name}":
            return f"{int(weak_rate_type)}WeakRate"

    return None


def get_sort_options(columns: Sequence[str]) -> Dict[str, str]:
    """
    Sort key -> column label for every sortable column, in table order.

    Total attack is always offered, even when the table is empty.
    """
    options = {"totalAttack": "Total"}
    for column in columns:
        sort_key = get_column_sort_key(column)
        if sort_key is not None and is_sort_key(sort_key):
            options[sort_key] = column
    return options


# =============================================================================
# ROWS
# =============================================================================

def build_weapon_rows(weapons: Sequence[Weapon], state: AppState) -> List[WeaponTableRow]:
    """
    Filter, calculate and sort the weapon list for the current settings.

    Each weapon is calculated at the chosen upgrade level converted to its own
    scale (somber weapons max out at +10).
    """
    attributes = state.get_attributes()
    filtered = filter_weapons(
        weapons,
        weapon_types=state.get_weapon_types() or None,
        affinity_ids=state.affinity_ids or None,
        include_dlc=state.include_dlc,
        effective_only=state.effective_only,
        attributes=attributes,
        two_handing=state.two_handing,
    )

    rows = [
        (
            weapon,
            get_weapon_attack(
                weapon,
                attributes,
                upgrade_level=clamp_upgrade_level(weapon, state.upgrade_level),
                two_handing=state.two_handing,
                include_arcane_bonus=state.include_arcane_bonus,
            ),
        )
        for weapon in filtered
    ]
    return sort_weapons(rows, state.sort_by, state.reverse)


def weapon_table_dataframe(rows: Sequence[WeaponTableRow], state: AppState) -> pd.DataFrame:
    """Build the display table. Columns depend on the split/base/scaling toggles."""
    records = []
    for weapon, result in rows:
        level = result.upgrade_level
        record = {"Weapon": format_weapon_name(weapon, level)}

        if state.split_damage:
            for attack_power_type in ALL_DAMAGE_TYPES:
                record[ATTACK_POWER_TYPE_LABELS[attack_power_type]] = format_attack_power(
                    result.attack_power.get(attack_power_type),
                    result.base_attack_power.get(attack_power_type) if state.show_base_damage else None,
                )
        record["Total"] = round_value(get_total_damage_attack_power(result.attack_power))

        for attack_power_type in ALL_STATUS_TYPES:
            if any(attack_power_type in other.attack_power for _, other in rows):
                record[ATTACK_POWER_TYPE_LABELS[attack_power_type]] = format_attack_power(
                    result.attack_power.get(attack_power_type)
                )

        if any(other_weapon.is_spell_tool for other_weapon, _ in rows):
            for attack_power_type, value in result.spell_scaling.items():
                record[f"{ATTACK_POWER_TYPE_LABELS[attack_power_type]} Spell"] = f"{round_value(value * 10) / 10}%"

        for attribute in ALL_ATTRIBUTES:
            label = ATTRIBUTE_LABELS[attribute]
            record[f"{label} Scaling"] = format_scaling(weapon, level, attribute, state.numerical_scaling)
        for attribute in ALL_ATTRIBUTES:
            label = ATTRIBUTE_LABELS[attribute]
            requirement = weapon.requirements.get(attribute, 0)
            mark = "*" if attribute in result.ineffective_attributes else ""
            record[f"{label} Req"] = f"{requirement}{mark}" if requirement else "-"

        for attack_power_type in ALL_DAMAGE_TYPES:
            label = ATTACK_POWER_TYPE_LABELS[attack_power_type]
            record[f"Guard {label}"] = format_cut_rate(result.guard_cut_rate.get(attack_power_type))
        record["Guard Boost"] = format_cut_rate(result.stability)

        for weak_rate_type in ALL_WEAK_RATE_TYPES:
            if any(other_weapon.weak_rate.get(weak_rate_type, 1) != 1 for other_weapon, _ in rows):
                record[f"Weak {weak_rate_type.name}"] = format_weak_rate(weapon.weak_rate.get(weak_rate_type))

        record["Poise"] = weapon.poise
        record["Stam Dmg"] = weapon.stam_dmg
        record["Stam Cost"] = weapon.stam_cost
        record["Crit"] = weapon.crit
        record["Range"] = format_bow_dist(weapon.bow_dist)
        record["Ineffective"] = bool(result.ineffective_attack_power_types)
        records.append(record)

    return pd.DataFrame(records)
