"""
Elden Ring Weapon Calculator
============================
Attack power, spell scaling and weapon ranking for ELDEN RING builds.
"""
