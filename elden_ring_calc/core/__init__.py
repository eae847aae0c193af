"""
Elden Ring Calculator - Core Math Module
========================================
Single source of truth for weapon data types and the attack calculation.

All other modules should import from here rather than implementing their own formulas.
"""

from .constants import (
    # Enums
    Attribute,
    AttackPowerType,
    WeaponType,
    WeakRateType,
    # Ordered collections
    ALL_ATTRIBUTES,
    ALL_DAMAGE_TYPES,
    ALL_STATUS_TYPES,
    ALL_WEAK_RATE_TYPES,
    FORCED_TWO_HANDING_TYPES,
    DLC_WEAPON_TYPES,
    # Numeric constants
    TWO_HANDING_STR_MULTIPLIER,
    DEFAULT_INEFFECTIVE_ATTRIBUTE_PENALTY,
    MAX_REGULAR_UPGRADE_LEVEL,
    MAX_SPECIAL_UPGRADE_LEVEL,
    MAX_ATTRIBUTE_VALUE,
    NO_BOW_DIST,
    is_damage_type,
)

from .weapon import (
    Attributes,
    CalcCorrectGraph,
    Weapon,
    WeaponDataError,
    UpgradeLevelError,
    lookup_calc_correct,
    get_scaling_tier,
    to_special_upgrade_level,
    clamp_upgrade_level,
)

from .attack import (
    # Core calculation
    get_weapon_attack,
    WeaponAttackResult,
    # Helper functions
    adjust_attributes_for_two_handing,
    get_ineffective_attributes,
    get_total_damage_attack_power,
)

__all__ = [
    # Constants
    'Attribute',
    'AttackPowerType',
    'WeaponType',
    'WeakRateType',
    'ALL_ATTRIBUTES',
    'ALL_DAMAGE_TYPES',
    'ALL_STATUS_TYPES',
    'ALL_WEAK_RATE_TYPES',
    'FORCED_TWO_HANDING_TYPES',
    'DLC_WEAPON_TYPES',
    'TWO_HANDING_STR_MULTIPLIER',
    'DEFAULT_INEFFECTIVE_ATTRIBUTE_PENALTY',
    'MAX_REGULAR_UPGRADE_LEVEL',
    'MAX_SPECIAL_UPGRADE_LEVEL',
    'MAX_ATTRIBUTE_VALUE',
    'NO_BOW_DIST',
    'is_damage_type',
    # Weapon data
    'Attributes',
    'CalcCorrectGraph',
    'Weapon',
    'WeaponDataError',
    'UpgradeLevelError',
    'lookup_calc_correct',
    'get_scaling_tier',
    'to_special_upgrade_level',
    'clamp_upgrade_level',
    # Attack calculation
    'get_weapon_attack',
    'WeaponAttackResult',
    'adjust_attributes_for_two_handing',
    'get_ineffective_attributes',
    'get_total_damage_attack_power',
]
