# harvest/config/config_game.py
"""
Configuration for core game systems, file paths, and debug settings.
"""
import os

# --- Directories and Files ---
# config_game.py is in harvest/config/, so one level up is the package root.
PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.path.join(PACKAGE_DIR, "data")
TASK_DATA_DIR = os.path.join(DATA_DIR, "tasks")

# --- Scenes ---
DEFAULT_SCENE = "farm"

# --- Debug Settings ---
DEBUG_SHOW_EXIT_ZONES = False
DEBUG_TASK_LOGGING = True
