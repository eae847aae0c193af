"""
Elden Ring Calculator - Weapon Data
===================================
Immutable weapon records as decoded from the regulation data document.

All per-level tables are sparse: a missing key means "not applicable" and is
treated as 0 for arithmetic.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .constants import (
    Attribute,
    AttackPowerType,
    WeaponType,
    WeakRateType,
    MAX_REGULAR_UPGRADE_LEVEL,
    MAX_SPECIAL_UPGRADE_LEVEL,
    NO_BOW_DIST,
)


# Attribute -> value, e.g. {"str": 40, "dex": 18, ...}
Attributes = Mapping[Attribute, int]

# Calc-correct graph: attribute value -> scaling curve multiplier
CalcCorrectGraph = Sequence[float]

# True means "full weight"; a number is a correction coefficient
AttributeCorrect = Union[bool, float]


class WeaponDataError(ValueError):
    """Weapon data is missing a value the attack calculation depends on."""


class UpgradeLevelError(ValueError):
    """Upgrade level is outside the range the weapon supports."""


@dataclass(frozen=True)
class Weapon:
    """
    A single weapon + affinity combination.

    attack and attribute_scaling are indexed by upgrade level first, so
    attack[10][AttackPowerType.FIRE] is the base fire attack at +10.
    """
    name: str
    weapon_name: str
    affinity_id: int
    weapon_type: WeaponType

    requirements: Dict[Attribute, int] = field(default_factory=dict)
    attack: List[Dict[AttackPowerType, float]] = field(default_factory=list)
    attribute_scaling: List[Dict[Attribute, float]] = field(default_factory=list)
    attack_element_correct: Dict[AttackPowerType, Dict[Attribute, AttributeCorrect]] = field(
        default_factory=dict
    )
    calc_correct_graphs: Dict[AttackPowerType, CalcCorrectGraph] = field(default_factory=dict)
    status_additional_calc_correct_graph: Optional[CalcCorrectGraph] = None

    # Descending (threshold, label) pairs, e.g. [(1.75, "S"), (1.4, "A"), ...]
    scaling_tiers: List[Tuple[float, str]] = field(default_factory=list)

    # Flags
    paired: bool = False
    sorcery_tool: bool = False
    incantation_tool: bool = False
    dlc: bool = False

    # Display / sort fields
    url: Optional[str] = None
    variant: Optional[str] = None
    poise: float = 0
    stam_dmg: float = 0
    stam_cost: float = 0
    crit: float = 100
    bow_dist: float = NO_BOW_DIST
    weak_rate: Dict[WeakRateType, float] = field(default_factory=dict)
    guard_cut_rate: Dict[AttackPowerType, float] = field(default_factory=dict)
    stability: float = 0

    @property
    def max_upgrade_level(self) -> int:
        return len(self.attack) - 1

    @property
    def is_special(self) -> bool:
        """Special weapons are upgraded with somber smithing stones (+10 max)."""
        return self.max_upgrade_level == MAX_SPECIAL_UPGRADE_LEVEL

    @property
    def is_spell_tool(self) -> bool:
        return self.sorcery_tool or self.incantation_tool

    def __hash__(self) -> int:
        # name already includes the affinity, e.g. "Heavy Battle Axe"
        return hash(self.name)

    def check_upgrade_level(self, upgrade_level: int) -> None:
        """Raise UpgradeLevelError if upgrade_level can't index this weapon's tables."""
        if not 0 <= upgrade_level <= self.max_upgrade_level:
            raise UpgradeLevelError(
                f"{self.name}: upgrade level {upgrade_level} is outside "
                f"0..{self.max_upgrade_level}"
            )


# =============================================================================
# CALC-CORRECT GRAPH LOOKUP
# =============================================================================

def lookup_calc_correct(
    graph: Optional[CalcCorrectGraph],
    attribute_value: int,
    weapon_name: str = "",
) -> float:
    """
    Look up a scaling curve multiplier for an attribute value.

    A graph without a value at attribute_value is corrupt data, so this raises
    WeaponDataError rather than returning 0.
    """
    if graph is None:
        raise WeaponDataError(f"{weapon_name}: missing calc-correct graph")
    if attribute_value < 0:
        raise WeaponDataError(
            f"{weapon_name}: calc-correct graph lookup for negative attribute {attribute_value}"
        )
    try:
        value = graph[attribute_value]
    except (IndexError, KeyError):
        raise WeaponDataError(
            f"{weapon_name}: calc-correct graph has no value for attribute {attribute_value}"
        ) from None
    if value is None:
        raise WeaponDataError(
            f"{weapon_name}: calc-correct graph has no value for attribute {attribute_value}"
        )
    return value


# =============================================================================
# SCALING TIERS
# =============================================================================

def get_scaling_tier(weapon: Weapon, upgrade_level: int, attribute: Attribute) -> Optional[str]:
    """
    Get the letter grade (S/A/B/C/D/E) for a weapon's scaling in one attribute.

    Returns None when the weapon doesn't scale with the attribute.
    """
    scaling = weapon.attribute_scaling[upgrade_level].get(attribute, 0)
    if not scaling:
        return None
    for threshold, label in weapon.scaling_tiers:
        if scaling >= threshold:
            return label
    return None


# =============================================================================
# UPGRADE LEVELS
# =============================================================================

def to_special_upgrade_level(regular_upgrade_level: int) -> int:
    """
    Convert a +0..+25 upgrade level to the +0..+10 somber scale.

    Rounds to the nearest somber level, so +25 -> +10 and +12 -> +5.
    """
    return math.floor((regular_upgrade_level + 1.25) / 2.5)


def clamp_upgrade_level(weapon: Weapon, regular_upgrade_level: int) -> int:
    """
    Get the upgrade level to calculate a weapon at for a chosen +0..+25 level.

    Special weapons are converted to their own scale; weapons with fewer
    levels than requested (e.g. unupgradable weapons) are capped.
    """
    regular_upgrade_level = max(0, min(regular_upgrade_level, MAX_REGULAR_UPGRADE_LEVEL))
    if weapon.is_special:
        return min(to_special_upgrade_level(regular_upgrade_level), weapon.max_upgrade_level)
    return min(regular_upgrade_level, weapon.max_upgrade_level)
