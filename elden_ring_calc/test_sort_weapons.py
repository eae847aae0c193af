"""
Unit tests for sort_weapons.py - Weapon table ordering by column.
"""
from collections import Counter

import pytest

from elden_ring_calc.core import (
    Attribute,
    AttackPowerType,
    WeakRateType,
    WeaponType,
    Weapon,
    WeaponAttackResult,
)
from elden_ring_calc.sort_weapons import (
    NO_BOW_DIST_SORT_VALUE,
    get_sort_value,
    is_sort_key,
    sort_weapons,
)

PHY = AttackPowerType.PHYSICAL
MAG = AttackPowerType.MAGIC
FIRE = AttackPowerType.FIRE
BLEED = AttackPowerType.BLEED


def make_row(name, attack_power=None, affinity_id=0, upgrade_level=0, result_fields=None, **weapon_fields):
    weapon = Weapon(
        name=name,
        weapon_name=weapon_fields.pop("weapon_name", name),
        affinity_id=affinity_id,
        weapon_type=weapon_fields.pop("weapon_type", WeaponType.AXE),
        attack=[{}] * (upgrade_level + 1),
        attribute_scaling=weapon_fields.pop("attribute_scaling", [{}] * (upgrade_level + 1)),
        **weapon_fields,
    )
    result = WeaponAttackResult(
        upgrade_level=upgrade_level,
        attack_power=attack_power or {},
        **(result_fields or {}),
    )
    return weapon, result


def names(rows):
    return [weapon.name for weapon, _ in rows]


class TestSimpleKeys:
    """Tests for the literal sort keys."""

    def test_total_attack_best_first(self):
        rows = [
            make_row("Low", {PHY: 100}),
            make_row("High", {PHY: 200, MAG: 100}),
            make_row("Mid", {FIRE: 250}),
        ]
        assert names(sort_weapons(rows, "totalAttack", False)) == ["High", "Mid", "Low"]

    def test_total_attack_ignores_status(self):
        rows = [
            make_row("Bleed", {PHY: 100, BLEED: 500}),
            make_row("Plain", {PHY: 150}),
        ]
        assert names(sort_weapons(rows, "totalAttack", False)) == ["Plain", "Bleed"]

    def test_total_attack_reverse(self):
        rows = [
            make_row("Low", {PHY: 100}),
            make_row("High", {PHY: 300}),
            make_row("Mid", {PHY: 200}),
        ]
        assert names(sort_weapons(rows, "totalAttack", True)) == ["Low", "Mid", "High"]

    @pytest.mark.parametrize("sort_by, field", [
        ("poise", "poise"),
        ("stamDmg", "stam_dmg"),
        ("stamCost", "stam_cost"),
        ("crit", "crit"),
    ])
    def test_weapon_fields_largest_first(self, sort_by, field):
        rows = [
            make_row("A", **{field: 10}),
            make_row("B", **{field: 30}),
            make_row("C", **{field: 20}),
        ]
        assert names(sort_weapons(rows, sort_by, False)) == ["B", "C", "A"]

    def test_stability_from_result(self):
        rows = [
            make_row("A", result_fields={"stability": 20}),
            make_row("B", result_fields={"stability": 60}),
        ]
        assert names(sort_weapons(rows, "stability", False)) == ["B", "A"]

    def test_name_alphabetical_then_affinity(self):
        rows = [
            make_row("Keen Club", weapon_name="Club", affinity_id=2),
            make_row("Axe", weapon_name="Axe", affinity_id=0),
            make_row("Heavy Club", weapon_name="Club", affinity_id=1),
            make_row("Club", weapon_name="Club", affinity_id=0),
        ]
        assert names(sort_weapons(rows, "name", False)) == ["Axe", "Club", "Heavy Club", "Keen Club"]

    def test_name_affinity_padding(self):
        """Affinity 10 sorts after affinity 9 thanks to zero padding."""
        rows = [
            make_row("Poison Club", weapon_name="Club", affinity_id=10),
            make_row("Cold Club", weapon_name="Club", affinity_id=9),
        ]
        assert names(sort_weapons(rows, "name", False)) == ["Cold Club", "Poison Club"]

    def test_name_projection(self):
        row = make_row("Club", affinity_id=3)
        assert get_sort_value("name")(row) == "Club,0003"


class TestBowDist:
    """Tests for the bow range column."""

    def test_non_bows_last(self):
        rows = [
            make_row("Axe", bow_dist=-1),
            make_row("Short Bow", bow_dist=10),
            make_row("Longbow", bow_dist=20),
        ]
        assert names(sort_weapons(rows, "bowDist", False)) == ["Longbow", "Short Bow", "Axe"]

    def test_non_bow_projection(self):
        assert get_sort_value("bowDist")(make_row("Axe", bow_dist=-1)) == NO_BOW_DIST_SORT_VALUE

    def test_zero_range_bow_before_non_bow(self):
        rows = [make_row("Axe", bow_dist=-1), make_row("Bow", bow_dist=0)]
        assert names(sort_weapons(rows, "bowDist", False)) == ["Bow", "Axe"]


class TestParametricKeys:
    """Tests for "<code><Suffix>" sort keys."""

    def test_attack_by_type(self):
        rows = [
            make_row("Phys", {PHY: 300}),
            make_row("Fire", {PHY: 100, FIRE: 150}),
            make_row("More Fire", {FIRE: 200}),
        ]
        assert names(sort_weapons(rows, "2Attack", False)) == ["More Fire", "Fire", "Phys"]

    def test_status_attack(self):
        rows = [make_row("None", {PHY: 100}), make_row("Bleed", {BLEED: 55})]
        assert names(sort_weapons(rows, "7Attack", False)) == ["Bleed", "None"]

    def test_spell_scaling(self):
        rows = [
            make_row("Weak Staff", result_fields={"spell_scaling": {MAG: 180}}),
            make_row("Sword"),
            make_row("Strong Staff", result_fields={"spell_scaling": {MAG: 320}}),
        ]
        assert names(sort_weapons(rows, "1SpellScaling", False)) == ["Strong Staff", "Weak Staff", "Sword"]

    def test_attribute_scaling_uses_result_level(self):
        """Scaling is read at the upgrade level the row was calculated at."""
        rows = [
            make_row("A", upgrade_level=1, attribute_scaling=[{Attribute.DEX: 0.9}, {Attribute.DEX: 0.1}]),
            make_row("B", upgrade_level=1, attribute_scaling=[{Attribute.DEX: 0.2}, {Attribute.DEX: 0.5}]),
        ]
        assert names(sort_weapons(rows, "dexScaling", False)) == ["B", "A"]

    def test_requirement(self):
        rows = [
            make_row("Light", requirements={Attribute.STR: 8}),
            make_row("None"),
            make_row("Heavy", requirements={Attribute.STR: 40}),
        ]
        assert names(sort_weapons(rows, "strRequirement", False)) == ["Heavy", "Light", "None"]

    def test_guard_cut_rate(self):
        rows = [
            make_row("Sword", result_fields={"guard_cut_rate": {PHY: 45}}),
            make_row("Shield", result_fields={"guard_cut_rate": {PHY: 100}}),
        ]
        assert names(sort_weapons(rows, "0GuardCutRate", False)) == ["Shield", "Sword"]

    def test_weak_rate(self):
        rows = [
            make_row("Plain", weak_rate={WeakRateType.D: 1.0}),
            make_row("Anti Dragon", weak_rate={WeakRateType.D: 1.2}),
        ]
        assert names(sort_weapons(rows, "3WeakRate", False)) == ["Anti Dragon", "Plain"]

    def test_missing_values_are_zero(self):
        assert get_sort_value("4Attack")(make_row("A", {PHY: 100})) == 0
        assert get_sort_value("arcRequirement")(make_row("A")) == 0
        assert get_sort_value("5WeakRate")(make_row("A")) == 0


class TestOrdering:
    """Tests for sort properties that hold for every key."""

    def test_does_not_modify_input(self):
        rows = [make_row("A", {PHY: 1}), make_row("B", {PHY: 3}), make_row("C", {PHY: 2})]
        original = list(rows)
        sorted_rows = sort_weapons(rows, "totalAttack", False)
        assert rows == original
        assert sorted_rows is not rows

    def test_reverse_is_exact_reverse_without_ties(self):
        rows = [make_row(str(i), {PHY: value}) for i, value in enumerate([5, 1, 9, 3, 7, 2])]
        ascending = sort_weapons(rows, "totalAttack", False)
        descending = sort_weapons(rows, "totalAttack", True)
        assert names(descending) == list(reversed(names(ascending)))

    def test_idempotent_projections_with_ties(self):
        rows = [make_row(str(i), {PHY: value}) for i, value in enumerate([3, 1, 3, 2, 1, 3])]
        get_value = get_sort_value("totalAttack")
        once = sort_weapons(rows, "totalAttack", False)
        twice = sort_weapons(once, "totalAttack", False)
        assert [get_value(row) for row in once] == [-3, -3, -3, -2, -1, -1]
        assert [get_value(row) for row in twice] == [get_value(row) for row in once]

    def test_empty(self):
        assert sort_weapons([], "name", False) == []


class TestUnknownKeys:
    """Unknown sort keys fall back to an unspecified order."""

    @pytest.mark.parametrize("sort_by", ["bogusKey", "99Attack", "lckScaling", "xWeakRate", ""])
    def test_keeps_every_row(self, sort_by):
        rows = [make_row(name, {PHY: i}) for i, name in enumerate("ABCDE")]
        result = sort_weapons(rows, sort_by, False)
        assert Counter(names(result)) == Counter(names(rows))

    def test_projection_is_empty_string(self):
        assert get_sort_value("bogusKey")(make_row("A")) == ""

    @pytest.mark.parametrize("sort_by, expected", [
        ("name", True),
        ("totalAttack", True),
        ("0Attack", True),
        ("11Attack", True),
        ("4SpellScaling", True),
        ("faiScaling", True),
        ("intRequirement", True),
        ("2GuardCutRate", True),
        ("5WeakRate", True),
        ("12Attack", False),
        ("6WeakRate", False),
        ("bogusKey", False),
    ])
    def test_is_sort_key(self, sort_by, expected):
        assert is_sort_key(sort_by) is expected
