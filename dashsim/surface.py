"""2D raster the animator draws onto, backed by an off-screen pygame surface."""
import os
from typing import Tuple

# off-screen only: no window is ever opened
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame

RGB = Tuple[int, int, int]

def hex_rgb(s: str) -> RGB:
    s = s.lstrip("#")
    return int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16)

BACKGROUND: RGB = (17, 24, 39)
LINE_RGB:   RGB = (59, 130, 246)
FADE_ALPHA = 0.2
LINE_ALPHA = 0.2

CLEAR = (0, 0, 0, 0)


def _a8(alpha: float) -> int:
    return max(0, min(255, round(alpha * 255)))


class Surface:
    def __init__(self, width: int, height: int, background: RGB = BACKGROUND):
        self.width = width
        self.height = height
        self.screen = pygame.Surface((width, height))
        self.screen.fill(background)
        # translucent layers, blitted onto the screen for alpha drawing
        self._veil = pygame.Surface((width, height), pygame.SRCALPHA)
        self._layer = pygame.Surface((width, height), pygame.SRCALPHA)
        self._open = True

    @property
    def available(self) -> bool:
        return self._open

    def close(self):
        self._open = False

    def fade(self, rgb: RGB = BACKGROUND, alpha: float = FADE_ALPHA):
        # partial overwrite, leaves motion trails
        self._veil.fill((*rgb, _a8(alpha)))
        self.screen.blit(self._veil, (0, 0))

    def line(self, x0: float, y0: float, x1: float, y1: float,
             rgb: RGB = LINE_RGB, alpha: float = LINE_ALPHA):
        rect = pygame.draw.line(self._layer, (*rgb, _a8(alpha)), (x0, y0), (x1, y1), 1)
        if rect.width and rect.height:
            self.screen.blit(self._layer, rect.topleft, area=rect)
        self._layer.fill(CLEAR, rect)

    def circle(self, cx: float, cy: float, r: float, rgb: RGB):
        pygame.draw.circle(self.screen, rgb, (int(round(cx)), int(round(cy))), r)

    def pixel(self, x: int, y: int) -> RGB:
        c = self.screen.get_at((x, y))
        return c.r, c.g, c.b

    def to_bytes(self) -> bytes:
        return pygame.image.tobytes(self.screen, "RGB")
