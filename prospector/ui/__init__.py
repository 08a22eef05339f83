"""Streamlit UI components."""

from .sidebar import render_sidebar
from .mission_control import render_mission_control
from .war_room import render_war_room
from .process_inspector import render_process_inspector

__all__ = [
    "render_sidebar",
    "render_mission_control",
    "render_war_room",
    "render_process_inspector",
]
