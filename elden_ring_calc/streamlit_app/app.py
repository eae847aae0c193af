"""
Elden Ring Weapon Calculator - Streamlit Web App
Weapon list with attack power for the chosen attributes, filters and sorting.

Run with:
    streamlit run elden_ring_calc/streamlit_app/app.py
"""
import streamlit as st

from elden_ring_calc.core import (
    ALL_ATTRIBUTES,
    MAX_REGULAR_UPGRADE_LEVEL,
    WeaponDataError,
    WeaponType,
    to_special_upgrade_level,
)
from elden_ring_calc.regulation_data import load_regulation_data
from elden_ring_calc.sort_weapons import sort_weapons
from elden_ring_calc.weapon_filters import AFFINITY_NAMES, group_weapons_by_type
from elden_ring_calc.streamlit_app.utils.attack_chart import create_attack_progression_chart
from elden_ring_calc.streamlit_app.utils.data_manager import (
    MAX_ATTRIBUTE_INPUT,
    MIN_ATTRIBUTE_INPUT,
    get_regulation_data_path,
    load_app_state,
    save_app_state,
)
from elden_ring_calc.streamlit_app.utils.weapon_table import (
    ATTRIBUTE_LABELS,
    build_weapon_rows,
    get_sort_options,
    weapon_table_dataframe,
)

# Page config
st.set_page_config(
    page_title="Elden Ring Weapon Calculator",
    page_icon="⚔️",
    layout="wide",
    initial_sidebar_state="expanded"
)

@st.cache_data
def load_weapons(path: str):
    return load_regulation_data(path)


def init_session_state():
    """Initialize session state variables."""
    if 'app_state' not in st.session_state:
        st.session_state.app_state = load_app_state()


def auto_save():
    save_app_state(st.session_state.app_state)


def settings_sidebar(state):
    """Attributes, upgrade level and filter controls."""
    with st.sidebar:
        st.header("Character")
        cols = st.columns(len(ALL_ATTRIBUTES))
        for col, attribute in zip(cols, ALL_ATTRIBUTES):
            with col:
                state.attributes[attribute.value] = st.number_input(
                    ATTRIBUTE_LABELS[attribute],
                    min_value=MIN_ATTRIBUTE_INPUT,
                    max_value=MAX_ATTRIBUTE_INPUT,
                    value=int(state.attributes[attribute.value]),
                    key=f"attr_{attribute.value}",
                )

        state.upgrade_level = st.selectbox(
            "Weapon Level",
            options=list(range(MAX_REGULAR_UPGRADE_LEVEL + 1)),
            index=state.upgrade_level,
            format_func=lambda level: f"+{level} / +{to_special_upgrade_level(level)}",
        )
        state.two_handing = st.checkbox("Two Handing", value=state.two_handing)
        state.include_arcane_bonus = st.checkbox("Include Arcane Status Bonus", value=state.include_arcane_bonus)

        st.header("Filters")
        state.weapon_types = [
            int(weapon_type) for weapon_type in st.multiselect(
                "Weapon Types",
                options=list(WeaponType),
                default=state.get_weapon_types(),
                format_func=lambda weapon_type: weapon_type.name.replace("_", " ").title(),
            )
        ]
        state.affinity_ids = st.multiselect(
            "Affinities",
            options=list(AFFINITY_NAMES),
            default=state.affinity_ids,
            format_func=lambda affinity_id: AFFINITY_NAMES[affinity_id],
        )
        state.include_dlc = st.checkbox("Include DLC", value=state.include_dlc)
        state.effective_only = st.checkbox("Effective Only", value=state.effective_only)

        st.header("Display")
        state.split_damage = st.checkbox("Show Damage Split", value=state.split_damage)
        state.show_base_damage = st.checkbox("Show Base Damage", value=state.show_base_damage)
        state.group_weapon_types = st.checkbox("Group by Weapon Type", value=state.group_weapon_types)
        state.numerical_scaling = st.checkbox("Numerical Scaling", value=state.numerical_scaling)


def sort_controls(state, columns):
    """Sort column picker, offering every sortable column currently shown."""
    options = get_sort_options(columns)
    if state.sort_by not in options:
        state.sort_by = "totalAttack"
    sort_keys = list(options)

    col1, col2 = st.columns([3, 1])
    with col1:
        state.sort_by = st.selectbox(
            "Sort By",
            options=sort_keys,
            index=sort_keys.index(state.sort_by),
            format_func=lambda key: options[key],
        )
    with col2:
        state.reverse = st.checkbox("Reverse", value=state.reverse)


def main_app():
    state = st.session_state.app_state

    st.title("⚔️ Elden Ring Weapon Calculator")

    try:
        weapons = load_weapons(get_regulation_data_path())
    except FileNotFoundError:
        st.error(f"Regulation data not found at {get_regulation_data_path()}")
        st.stop()
    except WeaponDataError as e:
        st.error(f"Regulation data is invalid: {e}")
        st.stop()

    settings_sidebar(state)

    rows = build_weapon_rows(weapons, state)
    st.caption(f"{len(rows)} weapons")

    if not rows:
        auto_save()
        st.info("No weapons match the selected filters.")
        return

    # Optional columns only appear when some filtered row has a value for them
    sort_controls(state, weapon_table_dataframe(rows, state).columns)
    auto_save()
    rows = sort_weapons(rows, state.sort_by, state.reverse)

    if state.group_weapon_types:
        for weapon_type, group_rows in group_weapons_by_type(rows):
            st.subheader(weapon_type.name.replace("_", " ").title())
            st.dataframe(weapon_table_dataframe(group_rows, state), use_container_width=True, hide_index=True)
    else:
        st.dataframe(weapon_table_dataframe(rows, state), use_container_width=True, hide_index=True)

    st.divider()
    st.subheader("Attack Progression")
    names = [weapon.name for weapon, _ in rows]
    selected = st.selectbox("Weapon", options=range(len(rows)), format_func=lambda i: names[i])
    st.plotly_chart(
        create_attack_progression_chart(rows[selected][0], state.get_attributes(), state.two_handing),
        use_container_width=True,
    )


init_session_state()
main_app()
