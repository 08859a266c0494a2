# harvest/ui/floating_text.py
import pygame
from typing import List, Optional, Tuple

from harvest.config import MESSAGE_BG_COLOR, MESSAGE_COLORS, MESSAGE_DURATION, MESSAGE_Y, SCREEN_WIDTH

FADE_IN_TIME = 0.3

class TaskMessage:
    """One transient banner ("You feed cow1!") centred near the top of the screen."""

    def __init__(self, text: str, message_type: str = "info", duration: float = MESSAGE_DURATION):
        self.text = str(text)
        self.message_type = message_type if message_type in MESSAGE_COLORS else "info"
        self.color: Tuple[int, int, int] = MESSAGE_COLORS[self.message_type]
        self.duration = duration
        self.elapsed = 0.0
        self.alpha = 0

    def update(self, dt: float) -> bool:
        """Advances the message clock. Returns False once it has expired."""
        self.elapsed += dt
        if self.elapsed > self.duration:
            return False

        if self.elapsed < FADE_IN_TIME:
            self.alpha = int(255 * (self.elapsed / FADE_IN_TIME))
        # Fade out in last half
        elif self.elapsed > self.duration * 0.5:
            progress = (self.elapsed - (self.duration * 0.5)) / (self.duration * 0.5)
            self.alpha = int(255 * (1.0 - progress))
        else:
            self.alpha = 255

        return True

    def draw(self, surface: pygame.Surface, font: pygame.font.Font, y: int):
        text_surf = font.render(self.text, True, self.color)
        padding_x, padding_y = 12, 6
        box = pygame.Surface((text_surf.get_width() + padding_x * 2, text_surf.get_height() + padding_y * 2))
        box.fill(MESSAGE_BG_COLOR)
        box.blit(text_surf, (padding_x, padding_y))

        # Handle alpha if surface supports it, otherwise just draw
        if self.alpha < 255:
            box.set_alpha(self.alpha)

        x = (surface.get_width() or SCREEN_WIDTH) // 2 - box.get_width() // 2
        surface.blit(box, (x, y))

class MessageDisplay:
    """Stack of live TaskMessages; newest is drawn lowest."""

    def __init__(self, max_messages: int = 4):
        self.messages: List[TaskMessage] = []
        self.max_messages = max_messages
        self._font: Optional[pygame.font.Font] = None

    def show(self, text: str, message_type: str = "info") -> TaskMessage:
        message = TaskMessage(text, message_type)
        self.messages.append(message)
        if len(self.messages) > self.max_messages:
            self.messages = self.messages[-self.max_messages:]
        return message

    def update(self, dt: float):
        self.messages = [m for m in self.messages if m.update(dt)]

    def clear(self):
        self.messages = []

    def draw(self, surface: pygame.Surface):
        if not self.messages:
            return
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.Font(None, 22)

        y = MESSAGE_Y
        for message in self.messages:
            message.draw(surface, self._font, y)
            y += self._font.get_linesize() + 16
