# harvest/ui/task_indicator.py
import math
import pygame
from typing import Dict, Optional, Tuple

from harvest.config import (
    INDICATOR_COLOR_DEFAULT, INDICATOR_COLOR_DONE, INDICATOR_COLOR_HALF, INDICATOR_COLOR_NEARLY,
    INDICATOR_SIZE
)

Color = Tuple[int, int, int]

def color_for_progress(percentage: int) -> Color:
    """Indicator colour for a task that is `percentage` done."""
    if percentage >= 75:
        return INDICATOR_COLOR_NEARLY
    if percentage >= 50:
        return INDICATOR_COLOR_HALF
    return INDICATOR_COLOR_DEFAULT

class TaskIndicator:
    """Pulsing marker drawn above a sprite that still has work to do."""

    def __init__(self, task_id: str, x: float, y: float,
                 color: Color = INDICATOR_COLOR_DEFAULT,
                 glowing: bool = True,
                 task_type: str = "default",
                 size: int = INDICATOR_SIZE):
        self.task_id = task_id
        self.x = x
        self.y = y
        self.color = color
        self.glowing = glowing
        self.task_type = task_type
        self.size = size
        self.visible = True
        self.phase = 0.0

    def update(self, dt: float):
        if self.glowing:
            self.phase = (self.phase + dt * 4.0) % (2 * math.pi)

    def glow_radius(self) -> int:
        if not self.glowing:
            return 0
        return int(self.size * (1.5 + 0.5 * math.sin(self.phase)))

    def draw(self, surface: pygame.Surface, camera_offset: Tuple[float, float] = (0, 0)):
        if not self.visible:
            return
        cx = int(self.x - camera_offset[0])
        cy = int(self.y - camera_offset[1])

        radius = self.glow_radius()
        if radius > self.size:
            glow = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
            pygame.draw.circle(glow, (*self.color, 70), (radius, radius), radius)
            surface.blit(glow, (cx - radius, cy - radius))

        pygame.draw.circle(surface, self.color, (cx, cy), self.size)
        pygame.draw.circle(surface, (255, 255, 255), (cx, cy), self.size, 1)

class IndicatorManager:
    def __init__(self):
        self.indicators: Dict[str, TaskIndicator] = {}

    def create_indicator(self, task_id: str, x: float, y: float,
                         glowing: bool = True, task_type: str = "default") -> TaskIndicator:
        indicator = TaskIndicator(task_id, x, y, glowing=glowing, task_type=task_type)
        self.indicators[task_id] = indicator
        return indicator

    def get_indicator(self, task_id: str) -> Optional[TaskIndicator]:
        return self.indicators.get(task_id)

    def update_indicator(self, task_id: str, color: Optional[Color] = None, glowing: Optional[bool] = None) -> bool:
        indicator = self.indicators.get(task_id)
        if indicator is None:
            return False
        if color is not None:
            indicator.color = color
        if glowing is not None:
            indicator.glowing = glowing
        return True

    def set_indicator_glowing(self, task_id: str, glowing: bool) -> bool:
        indicator = self.indicators.get(task_id)
        if indicator is None:
            return False
        indicator.glowing = glowing
        if not glowing:
            indicator.color = INDICATOR_COLOR_DONE
        return True

    def remove_indicator(self, task_id: str) -> bool:
        return self.indicators.pop(task_id, None) is not None

    def clear(self):
        self.indicators.clear()

    def update(self, dt: float):
        for indicator in self.indicators.values():
            indicator.update(dt)

    def draw(self, surface: pygame.Surface, camera_offset: Tuple[float, float] = (0, 0)):
        for indicator in self.indicators.values():
            indicator.draw(surface, camera_offset)
