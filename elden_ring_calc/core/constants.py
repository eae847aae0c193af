"""
Elden Ring Calculator - Core Constants
======================================
Single source of truth for attribute, damage type and weapon class enums,
plus the numeric constants used by the attack calculation.

Enum values match the codes used in the regulation data document and in
parametric sort keys (e.g. "2Attack" sorts by fire attack power).
"""

from enum import Enum, IntEnum
from typing import List


# =============================================================================
# ENUMS
# =============================================================================

class Attribute(str, Enum):
    """Player attributes that weapons scale with or require."""
    STR = "str"
    DEX = "dex"
    INT = "int"
    FAI = "fai"
    ARC = "arc"


class AttackPowerType(IntEnum):
    """
    Damage and status channels a weapon can deal.

    Damage types (0-4) receive the two-handing Strength bonus and the
    ineffective attribute penalty. Status types (5+) never do.
    """
    # Damage types
    PHYSICAL = 0
    MAGIC = 1
    FIRE = 2
    LIGHTNING = 3
    HOLY = 4

    # Status effect buildup
    POISON = 5
    SCARLET_ROT = 6
    BLEED = 7
    FROST = 8
    SLEEP = 9
    MADNESS = 10
    DEATH_BLIGHT = 11


class WeaponType(IntEnum):
    """Weapon classes."""
    DAGGER = 0
    STRAIGHT_SWORD = 1
    GREATSWORD = 2
    COLOSSAL_SWORD = 3
    CURVED_SWORD = 4
    CURVED_GREATSWORD = 5
    KATANA = 6
    TWINBLADE = 7
    THRUSTING_SWORD = 8
    HEAVY_THRUSTING_SWORD = 9
    AXE = 10
    GREATAXE = 11
    HAMMER = 12
    GREAT_HAMMER = 13
    FLAIL = 14
    SPEAR = 15
    GREAT_SPEAR = 16
    HALBERD = 17
    REAPER = 18
    FIST = 19
    CLAW = 20
    WHIP = 21
    COLOSSAL_WEAPON = 22
    LIGHT_BOW = 23
    BOW = 24
    GREATBOW = 25
    CROSSBOW = 26
    BALLISTA = 27
    GLINTSTONE_STAFF = 28
    SACRED_SEAL = 29
    SMALL_SHIELD = 30
    MEDIUM_SHIELD = 31
    GREATSHIELD = 32
    TORCH = 33
    # Shadow of the Erdtree
    HAND_TO_HAND = 34
    PERFUME_BOTTLE = 35
    THRUSTING_SHIELD = 36
    THROWING_BLADE = 37
    BACKHAND_BLADE = 38
    LIGHT_GREATSWORD = 39
    GREAT_KATANA = 40
    BEAST_CLAW = 41


class WeakRateType(IntEnum):
    """Enemy categories a weapon can deal bonus damage against."""
    A = 0
    B = 1
    C = 2
    D = 3
    E = 4
    F = 5


# =============================================================================
# ORDERED COLLECTIONS
# =============================================================================

ALL_ATTRIBUTES: List[Attribute] = [
    Attribute.STR,
    Attribute.DEX,
    Attribute.INT,
    Attribute.FAI,
    Attribute.ARC,
]

ALL_DAMAGE_TYPES: List[AttackPowerType] = [
    AttackPowerType.PHYSICAL,
    AttackPowerType.MAGIC,
    AttackPowerType.FIRE,
    AttackPowerType.LIGHTNING,
    AttackPowerType.HOLY,
]

ALL_STATUS_TYPES: List[AttackPowerType] = [
    AttackPowerType.POISON,
    AttackPowerType.SCARLET_ROT,
    AttackPowerType.BLEED,
    AttackPowerType.FROST,
    AttackPowerType.SLEEP,
    AttackPowerType.MADNESS,
    AttackPowerType.DEATH_BLIGHT,
]

ALL_WEAK_RATE_TYPES: List[WeakRateType] = list(WeakRateType)

# Bows and ballistae can only be wielded with both hands
FORCED_TWO_HANDING_TYPES = frozenset({
    WeaponType.LIGHT_BOW,
    WeaponType.BOW,
    WeaponType.GREATBOW,
    WeaponType.BALLISTA,
})

DLC_WEAPON_TYPES = frozenset({
    WeaponType.HAND_TO_HAND,
    WeaponType.PERFUME_BOTTLE,
    WeaponType.THRUSTING_SHIELD,
    WeaponType.THROWING_BLADE,
    WeaponType.BACKHAND_BLADE,
    WeaponType.LIGHT_GREATSWORD,
    WeaponType.GREAT_KATANA,
    WeaponType.BEAST_CLAW,
})


# =============================================================================
# ATTACK CALCULATION CONSTANTS
# =============================================================================

# Two-handing: effective STR = floor(STR * 1.5)
TWO_HANDING_STR_MULTIPLIER = 1.5

# Scaling multiplier for a damage type whose requirements are not met:
# total_scaling = 1 - penalty
DEFAULT_INEFFECTIVE_ATTRIBUTE_PENALTY = 0.4

# Upgrade level caps (smithing stones vs somber smithing stones)
MAX_REGULAR_UPGRADE_LEVEL = 25
MAX_SPECIAL_UPGRADE_LEVEL = 10

# Calc-correct graphs are evaluated for 0..148 so that 99 STR two-handed
# (floor(99 * 1.5) = 148) still has a defined value
MAX_ATTRIBUTE_VALUE = 148

# Sentinel bow range modifier for weapons that are not bows
NO_BOW_DIST = -1


def is_damage_type(attack_power_type: AttackPowerType) -> bool:
    """Damage types are PHYSICAL through HOLY; everything else is a status."""
    return attack_power_type in ALL_DAMAGE_TYPES
