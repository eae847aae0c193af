"""
Data manager for loading and saving the weapon list settings.
Settings are kept in a single JSON file so the app restores the last used
attributes, filters and sort column on the next visit.
"""
import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional

from elden_ring_calc.core import (
    Attribute,
    WeaponType,
    ALL_ATTRIBUTES,
    MAX_REGULAR_UPGRADE_LEVEL,
)
from elden_ring_calc.sort_weapons import is_sort_key
from elden_ring_calc.weapon_filters import AFFINITY_NAMES

logger = logging.getLogger(__name__)

# Path to data directory (regulation data + saved settings)
DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "data")
SETTINGS_FILE = os.path.join(DATA_DIR, "app_state.json")

# Regulation data file, overridable with ELDEN_RING_CALC_DATA
DEFAULT_REGULATION_DATA_FILE = os.path.join(DATA_DIR, "regulation-vanilla.json")
REGULATION_DATA_ENV = "ELDEN_RING_CALC_DATA"

# Attribute range the character settings accept
MIN_ATTRIBUTE_INPUT = 1
MAX_ATTRIBUTE_INPUT = 99
DEFAULT_ATTRIBUTE_VALUE = 30


def get_regulation_data_path() -> str:
    """Get path to the regulation data JSON file."""
    return os.environ.get(REGULATION_DATA_ENV) or DEFAULT_REGULATION_DATA_FILE


@dataclass
class AppState:
    """All user selectable filters and display options for the weapon list."""
    # Character
    attributes: Dict[str, int] = field(
        default_factory=lambda: {attribute.value: DEFAULT_ATTRIBUTE_VALUE for attribute in ALL_ATTRIBUTES}
    )
    two_handing: bool = False
    upgrade_level: int = MAX_REGULAR_UPGRADE_LEVEL

    # Filters
    weapon_types: List[int] = field(default_factory=lambda: [int(WeaponType.AXE)])
    affinity_ids: List[int] = field(default_factory=lambda: [0, -1])  # Standard and Special
    include_dlc: bool = True
    include_arcane_bonus: bool = False
    effective_only: bool = False

    # Display
    split_damage: bool = True
    show_base_damage: bool = False
    group_weapon_types: bool = False
    numerical_scaling: bool = False

    # Sorting
    sort_by: str = "totalAttack"
    reverse: bool = False

    def get_attributes(self) -> Dict[Attribute, int]:
        """Attributes keyed by the Attribute enum, missing ones default to 30."""
        return {
            attribute: int(self.attributes.get(attribute.value, DEFAULT_ATTRIBUTE_VALUE))
            for attribute in ALL_ATTRIBUTES
        }

    def get_weapon_types(self) -> List[WeaponType]:
        return [WeaponType(weapon_type) for weapon_type in self.weapon_types]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppState":
        """
        Build from stored data, ignoring keys from older versions of the app.

        Values the settings widgets can't show are brought back into range:
        attributes are clamped to 1..99, the upgrade level to 0..25, unknown
        weapon types and affinities are dropped and an unknown sort key falls
        back to totalAttack.
        """
        known = {f.name for f in fields(cls)}
        state = cls(**{key: value for key, value in data.items() if key in known})

        # Keep attributes complete even if the stored dict is partial
        state.attributes = {
            attribute.value: _clamp(value, MIN_ATTRIBUTE_INPUT, MAX_ATTRIBUTE_INPUT)
            for attribute, value in state.get_attributes().items()
        }
        state.upgrade_level = _clamp(int(state.upgrade_level), 0, MAX_REGULAR_UPGRADE_LEVEL)

        valid_weapon_types = {int(weapon_type) for weapon_type in WeaponType}
        state.weapon_types = [
            int(weapon_type) for weapon_type in state.weapon_types
            if int(weapon_type) in valid_weapon_types
        ]
        state.affinity_ids = [
            int(affinity_id) for affinity_id in state.affinity_ids
            if int(affinity_id) in AFFINITY_NAMES
        ]

        if not is_sort_key(state.sort_by):
            logger.warning("Unknown stored sort key %r, using totalAttack", state.sort_by)
            state.sort_by = "totalAttack"
        return state


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def save_app_state(state: AppState, filepath: Optional[str] = None) -> bool:
    """
    Save app state to JSON.
    Returns True on success.
    """
    filepath = filepath or SETTINGS_FILE
    try:
        os.makedirs(os.path.dirname(filepath) or ".", exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(state.to_dict(), f, indent=2)
        return True
    except OSError as e:
        logger.warning("Error saving app state to %s: %s", filepath, e)
        return False


def load_app_state(filepath: Optional[str] = None) -> AppState:
    """
    Load app state from JSON.
    Returns default AppState if the file doesn't exist or can't be read.
    """
    filepath = filepath or SETTINGS_FILE

    if not os.path.exists(filepath):
        return AppState()

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        return AppState.from_dict(data)
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning("Error loading app state from %s, using defaults: %s", filepath, e)
        return AppState()
