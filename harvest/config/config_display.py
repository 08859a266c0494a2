# harvest/config/config_display.py
"""
Colours and layout values shared by the task overlay, indicators and messages.
"""

# --- Screen ---
SCREEN_WIDTH = 1280

# --- Task Panel ---
TASK_PANEL_WIDTH = 320
TASK_PANEL_MAX_HEIGHT = 400
TASK_PANEL_MARGIN = 30
TASK_PANEL_ROW_HEIGHT = 18
TASK_PANEL_BG_COLOR = (26, 26, 26)
TASK_PANEL_BORDER_COLOR = (76, 175, 80)
TASK_PANEL_TITLE_COLOR = (76, 175, 80)
TASK_PANEL_TEXT_COLOR = (255, 255, 255)
TASK_PANEL_MUTED_COLOR = (136, 136, 136)

# --- Indicators ---
INDICATOR_SIZE = 8
INDICATOR_OFFSET_Y = -20
INDICATOR_COLOR_DEFAULT = (255, 255, 0)   # yellow
INDICATOR_COLOR_HALF = (255, 165, 0)      # orange, >= 50%
INDICATOR_COLOR_NEARLY = (255, 215, 0)    # gold, >= 75%
INDICATOR_COLOR_DONE = (76, 175, 80)

# --- Transient Messages ---
MESSAGE_DURATION = 3.0
MESSAGE_Y = 100
MESSAGE_BG_COLOR = (0, 0, 0)
MESSAGE_COLORS = {
    "info": (255, 255, 255),
    "success": (76, 175, 80),
    "warning": (255, 152, 0),
    "error": (244, 67, 54),
}
