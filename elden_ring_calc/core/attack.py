"""
Elden Ring Calculator - Weapon Attack Calculation
=================================================
Attack power, spell scaling and ineffective-requirement checks for a weapon
at a given upgrade level and set of player attributes.

Master Formula (per attack power type):
    AttackPower = BaseAttack[level] * TotalScaling

    TotalScaling = 1 + sum(CalcCorrect[type][attr_value] * Scaling[level][attr])
                   for each attribute the type scales with

    If a damage type scales with an attribute whose requirement is not met:
        TotalScaling = 1 - IneffectivePenalty   (0.6 by default)

Spell casting tools also report SpellScaling = 100 * TotalScaling for each
damage type, even if their base attack for that type is 0.

No rounding happens here - rounding is a display concern.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Mapping

from .constants import (
    Attribute,
    AttackPowerType,
    ALL_ATTRIBUTES,
    ALL_DAMAGE_TYPES,
    ALL_STATUS_TYPES,
    FORCED_TWO_HANDING_TYPES,
    TWO_HANDING_STR_MULTIPLIER,
    DEFAULT_INEFFECTIVE_ATTRIBUTE_PENALTY,
    is_damage_type,
)
from .weapon import Attributes, Weapon, lookup_calc_correct


# =============================================================================
# RESULT DATACLASS
# =============================================================================

@dataclass(frozen=True)
class WeaponAttackResult:
    """
    Complete attack calculation result for one weapon at one upgrade level.

    Holds plain dicts, so results compare by value but can't be hashed.
    """
    upgrade_level: int
    base_attack_power: Dict[AttackPowerType, float] = field(default_factory=dict)
    attack_power: Dict[AttackPowerType, float] = field(default_factory=dict)
    spell_scaling: Dict[AttackPowerType, float] = field(default_factory=dict)
    ineffective_attributes: FrozenSet[Attribute] = frozenset()
    ineffective_attack_power_types: FrozenSet[AttackPowerType] = frozenset()

    # Guard figures, passed through from the weapon for the weapon table
    guard_cut_rate: Dict[AttackPowerType, float] = field(default_factory=dict)
    stability: float = 0

    __hash__ = None

    @property
    def total_attack_power(self) -> float:
        return get_total_damage_attack_power(self.attack_power)

    def breakdown(self) -> str:
        """Return formatted breakdown of the attack calculation."""
        lines = [f"Attack Breakdown (+{self.upgrade_level})", "=" * 30]
        for attack_power_type, value in self.attack_power.items():
            base = self.base_attack_power.get(attack_power_type, 0)
            flag = " (ineffective)" if attack_power_type in self.ineffective_attack_power_types else ""
            lines.append(
                f"{attack_power_type.name.title():<14}{base:>8.1f} + {value - base:>7.1f}{flag}"
            )
        for attack_power_type, value in self.spell_scaling.items():
            lines.append(f"{attack_power_type.name.title()} Spell Scaling: {value:.1f}%")
        lines.append("-" * 30)
        lines.append(f"Total Damage:   {self.total_attack_power:,.1f}")
        return "\n".join(lines)


def get_total_damage_attack_power(attack_power: Mapping[AttackPowerType, float]) -> float:
    """Sum attack power over the damage types (status buildup is excluded)."""
    return sum(attack_power.get(attack_power_type, 0) for attack_power_type in ALL_DAMAGE_TYPES)


# =============================================================================
# TWO-HANDING
# =============================================================================

def adjust_attributes_for_two_handing(
    weapon: Weapon,
    attributes: Attributes,
    two_handing: bool = False,
) -> Dict[Attribute, int]:
    """
    Apply the 50% Strength bonus for wielding a weapon with both hands.

    Rules:
        - Paired weapons never get the bonus
        - Bows and ballistae always get it (they can only be two handed)
        - STR = floor(STR * 1.5), other attributes unchanged

    Returns:
        A new attributes dict; the input is not modified
    """
    two_handing_bonus = two_handing

    if weapon.paired:
        two_handing_bonus = False

    if weapon.weapon_type in FORCED_TWO_HANDING_TYPES:
        two_handing_bonus = True

    adjusted = dict(attributes)
    if two_handing_bonus:
        adjusted[Attribute.STR] = math.floor(attributes[Attribute.STR] * TWO_HANDING_STR_MULTIPLIER)
    return adjusted


def get_ineffective_attributes(weapon: Weapon, attributes: Attributes) -> FrozenSet[Attribute]:
    """Attributes that are below the weapon's requirement."""
    return frozenset(
        Attribute(attribute)
        for attribute, requirement in weapon.requirements.items()
        if requirement and attributes[attribute] < requirement
    )


# =============================================================================
# MASTER ATTACK CALCULATION
# =============================================================================

def get_weapon_attack(
    weapon: Weapon,
    attributes: Attributes,
    upgrade_level: int,
    two_handing: bool = False,
    disable_two_handing_attack_power_bonus: bool = False,
    include_arcane_bonus: bool = False,
    ineffective_attribute_penalty: float = DEFAULT_INEFFECTIVE_ATTRIBUTE_PENALTY,
) -> WeaponAttackResult:
    """
    Determine the attack power of a weapon with the given player attributes.

    Args:
        weapon: Decoded weapon data
        attributes: Player attributes (all five must be present)
        upgrade_level: Weapon upgrade level, already clamped to the weapon's range
        two_handing: Wielding the weapon with both hands
        disable_two_handing_attack_power_bonus: Use the raw STR for scaling even
            when two handing (requirements still use the adjusted STR)
        include_arcane_bonus: Multiply status buildup by the weapon's Arcane curve
        ineffective_attribute_penalty: Subtracted from 1 for damage types with
            unmet requirements

    Returns:
        WeaponAttackResult

    Raises:
        UpgradeLevelError: upgrade_level is outside 0..weapon.max_upgrade_level
        WeaponDataError: a calc-correct graph has no value for a reached attribute
    """
    weapon.check_upgrade_level(upgrade_level)

    adjusted_attributes = adjust_attributes_for_two_handing(weapon, attributes, two_handing)
    ineffective_attributes = get_ineffective_attributes(weapon, adjusted_attributes)

    ineffective_attack_power_types = set()
    base_attack_power: Dict[AttackPowerType, float] = {}
    attack_power: Dict[AttackPowerType, float] = {}
    spell_scaling: Dict[AttackPowerType, float] = {}

    level_attack = weapon.attack[upgrade_level]
    level_scaling = weapon.attribute_scaling[upgrade_level]
    unupgraded_scaling = weapon.attribute_scaling[0]

    for attack_power_type in ALL_DAMAGE_TYPES + ALL_STATUS_TYPES:
        damage_type = is_damage_type(attack_power_type)

        current_base_attack_power = level_attack.get(attack_power_type, 0)
        if not current_base_attack_power and not weapon.is_spell_tool:
            continue

        # AttackElementCorrectParam decides which attributes each type scales with
        scaling_attributes = weapon.attack_element_correct.get(attack_power_type, {})

        total_scaling = 1.0

        if damage_type and any(scaling_attributes.get(a) for a in ineffective_attributes):
            # Unmet requirements subtract a flat penalty instead of adding scaling
            total_scaling = 1 - ineffective_attribute_penalty
            ineffective_attack_power_types.add(attack_power_type)
        else:
            if damage_type and not disable_two_handing_attack_power_bonus:
                effective_attributes = adjusted_attributes
            else:
                effective_attributes = attributes

            for attribute in ALL_ATTRIBUTES:
                attribute_correct = scaling_attributes.get(attribute)
                if not attribute_correct:
                    continue

                if attribute_correct is True:
                    scaling = level_scaling.get(attribute, 0)
                else:
                    unupgraded = unupgraded_scaling.get(attribute, 0)
                    if unupgraded:
                        scaling = attribute_correct * level_scaling.get(attribute, 0) / unupgraded
                    else:
                        scaling = 0

                if scaling:
                    total_scaling += lookup_calc_correct(
                        weapon.calc_correct_graphs.get(attack_power_type),
                        effective_attributes[attribute],
                        weapon.name,
                    ) * scaling

        # e.g. total_scaling 1.5 adds +50% of the base attack power
        if current_base_attack_power:
            base = current_base_attack_power
            if (
                include_arcane_bonus
                and not damage_type
                and weapon.status_additional_calc_correct_graph is not None
            ):
                base *= 100 * lookup_calc_correct(
                    weapon.status_additional_calc_correct_graph,
                    adjusted_attributes[Attribute.ARC],
                    weapon.name,
                )
            base_attack_power[attack_power_type] = base
            attack_power[attack_power_type] = base * total_scaling

        if damage_type and weapon.is_spell_tool:
            spell_scaling[attack_power_type] = 100 * total_scaling

    return WeaponAttackResult(
        upgrade_level=upgrade_level,
        base_attack_power=base_attack_power,
        attack_power=attack_power,
        spell_scaling=spell_scaling,
        ineffective_attributes=ineffective_attributes,
        ineffective_attack_power_types=frozenset(ineffective_attack_power_types),
        guard_cut_rate=dict(weapon.guard_cut_rate),
        stability=weapon.stability,
    )
