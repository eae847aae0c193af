"""
Elden Ring Calculator - Regulation Data Decoding
================================================
Turns the pre-fetched regulation data document (JSON) into Weapon records.

The document stores each weapon's +0 values plus shared tables that are
expanded here:
    - calcCorrectGraphs: curve definitions, evaluated into 0..148 lookup tables
    - attackElementCorrects: which attributes each damage type scales with
    - reinforceTypes: per upgrade level multipliers for attack and scaling

Document Shape:
    {
      "calcCorrectGraphs": {"0": [{"maxVal": 1, "maxGrowVal": 0, "adjPt_maxGrowVal": 1.2}, ...]},
      "attackElementCorrects": {"10000": {"0": {"str": true, "dex": true}}},
      "reinforceTypes": {"0": [{"attack": {"0": 1.0}, "attributeScaling": {"str": 1.0}}, ...]},
      "scalingTiers": [[1.75, "S"], [1.4, "A"], [0.9, "B"], [0.6, "C"], [0.25, "D"], [0, "E"]],
      "weapons": [{"name": "Longsword", "weaponName": "Longsword", "affinityId": 0, ...}]
    }
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .core import (
    Attribute,
    AttackPowerType,
    WeaponType,
    WeakRateType,
    Weapon,
    WeaponDataError,
    MAX_ATTRIBUTE_VALUE,
    NO_BOW_DIST,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CALC-CORRECT GRAPHS
# =============================================================================

def evaluate_calc_correct_graph(
    stages: Sequence[Mapping[str, float]],
    max_value: int = MAX_ATTRIBUTE_VALUE,
) -> Tuple[float, ...]:
    """
    Evaluate a calc-correct graph for every attribute value 0..max_value.

    Each stage is a breakpoint (maxVal, maxGrowVal). Between two breakpoints
    the growth is interpolated with a power curve:

        ratio = (value - stage.maxVal) / (next.maxVal - stage.maxVal)
        adj > 0:  ratio = ratio ^ adj
        adj < 0:  ratio = 1 - (1 - ratio) ^ -adj
        growth = stage.maxGrowVal + (next.maxGrowVal - stage.maxGrowVal) * ratio

    The graph stores growth as a percentage, so values are divided by 100.

    Args:
        stages: Breakpoints with maxVal, maxGrowVal and adjPt_maxGrowVal
        max_value: Highest attribute value to evaluate

    Returns:
        Tuple indexed by attribute value
    """
    if not stages:
        raise WeaponDataError("calc-correct graph has no stages")

    stages = sorted(stages, key=lambda stage: stage["maxVal"])
    values = []

    for attribute_value in range(max_value + 1):
        stage_index = 0
        for i, stage in enumerate(stages):
            if stage["maxVal"] <= attribute_value:
                stage_index = i

        stage = stages[stage_index]
        if stage_index == len(stages) - 1 or attribute_value < stage["maxVal"]:
            values.append(stage["maxGrowVal"] / 100)
            continue

        next_stage = stages[stage_index + 1]
        ratio = (attribute_value - stage["maxVal"]) / (next_stage["maxVal"] - stage["maxVal"])

        adjustment = stage.get("adjPt_maxGrowVal", 1)
        if adjustment > 0:
            ratio = ratio ** adjustment
        elif adjustment < 0:
            ratio = 1 - (1 - ratio) ** -adjustment

        growth = stage["maxGrowVal"] + (next_stage["maxGrowVal"] - stage["maxGrowVal"]) * ratio
        values.append(growth / 100)

    return tuple(values)


# =============================================================================
# DECODING HELPERS
# =============================================================================

def _attack_power_type_map(encoded: Optional[Mapping[str, Any]]) -> Dict[AttackPowerType, Any]:
    if not encoded:
        return {}
    return {AttackPowerType(int(code)): value for code, value in encoded.items()}


def _attribute_map(encoded: Optional[Mapping[str, Any]]) -> Dict[Attribute, Any]:
    if not encoded:
        return {}
    return {Attribute(code): value for code, value in encoded.items()}


def _lookup(table: Mapping[str, Any], table_name: str, table_id: Any, weapon_name: str) -> Any:
    try:
        return table[str(table_id)]
    except KeyError:
        raise WeaponDataError(f"{weapon_name}: unknown {table_name} id {table_id}") from None


def _decode_weapon(
    encoded: Mapping[str, Any],
    data: Mapping[str, Any],
    graphs: Dict[str, Tuple[float, ...]],
    scaling_tiers: List[Tuple[float, str]],
) -> Weapon:
    name = encoded["name"]

    def get_graph(graph_id: Any) -> Tuple[float, ...]:
        key = str(graph_id)
        if key not in graphs:
            graphs[key] = evaluate_calc_correct_graph(
                _lookup(data["calcCorrectGraphs"], "calcCorrectGraph", graph_id, name)
            )
        return graphs[key]

    reinforce_levels = _lookup(data["reinforceTypes"], "reinforceType", encoded["reinforceTypeId"], name)
    if not reinforce_levels:
        raise WeaponDataError(f"{name}: reinforceType {encoded['reinforceTypeId']} has no levels")

    base_attack = _attack_power_type_map(encoded.get("attack"))
    base_scaling = _attribute_map(encoded.get("attributeScaling"))

    # Expand +0 values to every upgrade level
    attack = []
    attribute_scaling = []
    for reinforce in reinforce_levels:
        attack_mult = _attack_power_type_map(reinforce.get("attack"))
        scaling_mult = _attribute_map(reinforce.get("attributeScaling"))
        attack.append({
            attack_power_type: value * attack_mult.get(attack_power_type, 1)
            for attack_power_type, value in base_attack.items()
            if value
        })
        attribute_scaling.append({
            attribute: value * scaling_mult.get(attribute, 1)
            for attribute, value in base_scaling.items()
            if value
        })

    attack_element_correct = {
        attack_power_type: _attribute_map(attributes)
        for attack_power_type, attributes in _attack_power_type_map(
            _lookup(data["attackElementCorrects"], "attackElementCorrect",
                    encoded["attackElementCorrectId"], name)
        ).items()
    }

    calc_correct_graphs = {
        attack_power_type: get_graph(graph_id)
        for attack_power_type, graph_id in _attack_power_type_map(encoded.get("calcCorrectGraphIds")).items()
    }

    status_graph_id = encoded.get("statusAdditionalCalcCorrectGraphId")
    status_graph = get_graph(status_graph_id) if status_graph_id is not None else None

    return Weapon(
        name=name,
        weapon_name=encoded.get("weaponName", name),
        affinity_id=encoded.get("affinityId", 0),
        weapon_type=WeaponType(encoded["weaponType"]),
        requirements=_attribute_map(encoded.get("requirements")),
        attack=attack,
        attribute_scaling=attribute_scaling,
        attack_element_correct=attack_element_correct,
        calc_correct_graphs=calc_correct_graphs,
        status_additional_calc_correct_graph=status_graph,
        scaling_tiers=scaling_tiers,
        paired=encoded.get("paired", False),
        sorcery_tool=encoded.get("sorceryTool", False),
        incantation_tool=encoded.get("incantationTool", False),
        dlc=encoded.get("dlc", False),
        url=encoded.get("url"),
        variant=encoded.get("variant"),
        poise=encoded.get("poise", 0),
        stam_dmg=encoded.get("stamDmg", 0),
        stam_cost=encoded.get("stamCost", 0),
        crit=encoded.get("crit", 100),
        bow_dist=encoded.get("bowDist", NO_BOW_DIST),
        weak_rate={WeakRateType(int(code)): value for code, value in (encoded.get("weakRate") or {}).items()},
        guard_cut_rate=_attack_power_type_map(encoded.get("guardCutRate")),
        stability=encoded.get("stability", 0),
    )


# =============================================================================
# PUBLIC API
# =============================================================================

def decode_regulation_data(data: Mapping[str, Any]) -> List[Weapon]:
    """
    Decode a regulation data document into weapons.

    Raises:
        WeaponDataError: the document is missing a table or references an unknown id
    """
    for table in ("calcCorrectGraphs", "attackElementCorrects", "reinforceTypes", "weapons"):
        if table not in data:
            raise WeaponDataError(f"regulation data is missing '{table}'")

    scaling_tiers = [(threshold, label) for threshold, label in data.get("scalingTiers", [])]
    graphs: Dict[str, Tuple[float, ...]] = {}

    weapons = []
    for encoded in data["weapons"]:
        try:
            weapons.append(_decode_weapon(encoded, data, graphs, scaling_tiers))
        except WeaponDataError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise WeaponDataError(f"malformed weapon {encoded.get('name', '?')!r}: {e}") from e

    logger.info("Decoded %d weapons (%d calc-correct graphs)", len(weapons), len(graphs))
    return weapons


def load_regulation_data(path: str) -> List[Weapon]:
    """Read a regulation data JSON file and decode it."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return decode_regulation_data(data)
