"""
Donny Core - The level/actor simulation.

This module provides the per-frame game simulation, its Gymnasium
environment wrapper, and all supporting systems (config, food catalog,
scoring, rules).

Main exports:
- Session: Level sequence and screen-flow state machine
- Level, Player, FoodItem: The simulated actors and their level
- DonnyEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
"""

from dairy_free_donny.donny_core.config_loader import GameConfig, load_config
from dairy_free_donny.donny_core.clock import MonotonicClock, SimClock
from dairy_free_donny.donny_core.interfaces import Bounds, DrawSink, HeldKeys
from dairy_free_donny.donny_core.food_catalog import FoodCatalog, FoodType
from dairy_free_donny.donny_core.food import FoodItem
from dairy_free_donny.donny_core.player import Player
from dairy_free_donny.donny_core.level import Level
from dairy_free_donny.donny_core.session import Session, SessionState
from dairy_free_donny.donny_core.env_gym import DonnyEnv

__all__ = [
    "GameConfig",
    "load_config",
    "MonotonicClock",
    "SimClock",
    "Bounds",
    "DrawSink",
    "HeldKeys",
    "FoodCatalog",
    "FoodType",
    "FoodItem",
    "Player",
    "Level",
    "Session",
    "SessionState",
    "DonnyEnv",
]
