"""
Attack Progression Chart Component

Creates an interactive Plotly chart of a weapon's attack power at every
upgrade level for the current attributes, split by damage type.
"""

import plotly.graph_objects as go
from typing import Dict, List, Mapping

from elden_ring_calc.core import (
    Attribute,
    AttackPowerType,
    Weapon,
    ALL_DAMAGE_TYPES,
    get_weapon_attack,
)

DAMAGE_TYPE_COLORS: Dict[AttackPowerType, str] = {
    AttackPowerType.PHYSICAL: "#c0c0c0",
    AttackPowerType.MAGIC: "#5599ff",
    AttackPowerType.FIRE: "#ff7733",
    AttackPowerType.LIGHTNING: "#ffdd44",
    AttackPowerType.HOLY: "#ffe9a8",
}


def get_attack_progression(
    weapon: Weapon,
    attributes: Mapping[Attribute, int],
    two_handing: bool = False,
) -> Dict[AttackPowerType, List[float]]:
    """
    Attack power per damage type at each upgrade level 0..max.

    Damage types the weapon never deals are left out.
    """
    results = [
        get_weapon_attack(weapon, attributes, upgrade_level, two_handing=two_handing)
        for upgrade_level in range(weapon.max_upgrade_level + 1)
    ]
    return {
        attack_power_type: [result.attack_power.get(attack_power_type, 0) for result in results]
        for attack_power_type in ALL_DAMAGE_TYPES
        if any(attack_power_type in result.attack_power for result in results)
    }


def create_attack_progression_chart(
    weapon: Weapon,
    attributes: Mapping[Attribute, int],
    two_handing: bool = False,
    height: int = 300,
) -> go.Figure:
    """
    Create stacked area chart of attack power by upgrade level.

    Returns:
        Plotly Figure object ready for display with st.plotly_chart()
    """
    progression = get_attack_progression(weapon, attributes, two_handing)
    levels = list(range(weapon.max_upgrade_level + 1))

    fig = go.Figure()
    for attack_power_type, values in progression.items():
        fig.add_trace(go.Scatter(
            x=levels,
            y=values,
            mode='lines',
            stackgroup='attack',
            line=dict(color=DAMAGE_TYPE_COLORS[attack_power_type], width=2),
            name=attack_power_type.name.title(),
            hovertemplate='+%{x}: %{y:.0f}<extra>%{fullData.name}</extra>',
        ))

    fig.update_layout(
        title=f"{weapon.name} - Attack Power by Upgrade Level",
        xaxis_title="Upgrade Level",
        yaxis_title="Attack Power",
        height=height,
        margin=dict(l=40, r=20, t=40, b=40),
        paper_bgcolor='rgba(0,0,0,0)',
        plot_bgcolor='rgba(0,0,0,0)',
        font=dict(color='#ccc'),
    )
    return fig
