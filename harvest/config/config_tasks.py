# harvest/config/config_tasks.py
"""
Configuration for the task tracking system.
"""

# --- Manager ---
MAX_COMPLETED_TASKS = 100
INTEGRATION_MAX_COMPLETED_TASKS = 50
TASK_LOG_SOURCE = "TaskManager"

# --- Display ---
TASK_DISPLAY_MAX_TASKS = 10
TASK_DISPLAY_LEGACY_MAX_TASKS = 20
TASK_PANEL_MAX_VISIBLE_TASKS = 8

# --- Kinds ---
TASK_KIND_BASIC = "basic"
TASK_KIND_ANIMAL = "animal"
TASK_KIND_COLLECTION = "collection"
DEFAULT_ANIMAL_ACTIONS = ["feed", "talk"]

# --- Catalog ---
TASK_CATALOG_FILES = ["animal_care.json"]
TASK_CONFIG_REQUIRED_FIELDS = ["kind", "title", "description", "category"]

TASK_SETTINGS = {
    "enable_notifications": True,
    "enable_sounds": True,
    "max_active_tasks_per_type": 10,
    "enable_task_priorities": True,
    "enable_task_categories": True,
}

TASK_CATEGORIES = {
    "animals": {
        "name": "Animal Care",
        "color": (121, 85, 72),
        "icon": "cow",
        "description": "Taking care of farm animals",
    },
}

TASK_PRIORITIES = {
    "low": {"value": 1, "name": "Low", "color": (158, 158, 158)},
    "normal": {"value": 2, "name": "Normal", "color": (33, 150, 243)},
    "high": {"value": 3, "name": "High", "color": (255, 152, 0)},
    "urgent": {"value": 4, "name": "Urgent", "color": (244, 67, 54)},
    "critical": {"value": 5, "name": "Critical", "color": (156, 39, 176)},
}

# Tasks every new game starts with, in display order
STARTER_TASK_IDS = [
    "cow1", "cow2", "cow3", "cowBaby",
    "chicken1", "chicken2", "chicken3", "chicken4",
]
