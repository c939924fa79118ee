import logging
import sys

import numpy as np
import pygame

from playback import HighlightKind
from tone import get_engine, stop_sound

logger = logging.getLogger(__name__)

# ============================================================
# ========================= DRAW SETTINGS ====================
# ============================================================

WINDOW_WIDTH  = 1100
WINDOW_HEIGHT = 680

BACKGROUND_COLOR = (5, 5, 10)
COMPARE_COLOR    = (255, 0, 0, 128)
SWAP_COLOR       = (0, 255, 0, 128)
LABEL_COLOR      = (255, 255, 255)
STATUS_COLOR     = (215, 215, 228)
LABEL_Y          = 80

HIGHLIGHT_COLORS = {
    HighlightKind.COMPARE: COMPARE_COLOR,
    HighlightKind.SWAP:    SWAP_COLOR,
}

# ============================================================
# ========================= STRIP LAYOUT =====================
# ============================================================

def segment_widths(total, count) -> list:
    """Split `total` pixels into `count` slices; the first `total % count` get one extra."""
    if count <= 0: return []
    base, remainder = divmod(total, count)
    return [base + 1 if i < remainder else base for i in range(count)]


def segment_offsets(widths) -> list:
    offsets, x = [], 0
    for w in widths:
        offsets.append(x); x += w
    return offsets


def value_to_color(ratios) -> np.ndarray:
    """Blue -> cyan -> green -> yellow -> red ramp for ratios in [0, 1]."""
    r = np.asarray(ratios, dtype=np.float64)
    up   = lambda t: (255 * t * 4).astype(np.uint8)
    down = lambda t: (255 * (1 - t * 4)).astype(np.uint8)
    zero = np.zeros_like(r, dtype=np.uint8); full = np.full_like(r, 255, dtype=np.uint8)
    q1, q2, q3 = r < 0.25, (r >= 0.25) & (r < 0.5), (r >= 0.5) & (r < 0.75)
    q4 = r >= 0.75
    red   = np.select([q1, q2, q3, q4], [zero, zero, up(np.clip(r - 0.5, 0, 0.25)), full])
    green = np.select([q1, q2, q3, q4], [up(np.clip(r, 0, 0.25)), full, full,
                                         down(np.clip(r - 0.75, 0, 0.25))])
    blue  = np.select([q1, q2, q3, q4], [full, down(np.clip(r - 0.25, 0, 0.25)), zero, zero])
    return np.stack([red, green, blue], axis=-1).astype(np.uint8)


def make_gradient_image(width, height) -> pygame.Surface:
    """Stand-in picture when no image file is given: a hue ramp from left to right."""
    cols = value_to_color(np.arange(width) / max(1, width))
    pixels = np.repeat(cols[:, np.newaxis, :], height, axis=1)
    return pygame.surfarray.make_surface(pixels)


def load_image(path, size) -> pygame.Surface:
    if path is None:
        return make_gradient_image(*size)
    logger.info("Strip image: %s", path)
    return pygame.transform.smoothscale(pygame.image.load(path).convert(), size)

# ============================================================
# ========================= RENDERER =========================
# ============================================================

class StripRenderer:
    """
    Draws `source` cut into vertical slices, slice order[p] at position p.

    Slices are labelled with their source index and positions listed in the
    highlights are tinted per highlight kind.
    """

    def __init__(self, surface, source, font=None):
        self.surface = surface
        self.font    = font
        self.source  = pygame.transform.scale(source, surface.get_size())

    def draw(self, order, highlights=(), status=""):
        s = self.surface
        w, h = s.get_size()
        s.fill(BACKGROUND_COLOR)
        widths  = segment_widths(w, len(order))
        offsets = segment_offsets(widths)

        for p, k in enumerate(order):
            s.blit(self.source, (offsets[p], 0), pygame.Rect(offsets[k], 0, widths[p], h))
            if self.font:
                t = self.font.render(str(k), True, LABEL_COLOR)
                s.blit(t, t.get_rect(center=(offsets[p] + widths[p] // 2, LABEL_Y)))

        # one overlay per kind; tints on the same slice stack
        for kind, color in HIGHLIGHT_COLORS.items():
            overlay = pygame.Surface((w, h), pygame.SRCALPHA)
            for hl in highlights:
                if hl.kind is not kind: continue
                for p in hl.indexes:
                    if 0 <= p < len(order):
                        overlay.fill(color, pygame.Rect(offsets[p], 0, widths[p], h))
            s.blit(overlay, (0, 0))

        if status and self.font:
            s.blit(self.font.render(status, True, STATUS_COLOR), (12, 10))


def build_font(size=13):
    for name in ("Consolas", "Courier New", "Lucida Console"):
        try: return pygame.font.SysFont(name, size)
        except (pygame.error, OSError): pass
    return pygame.font.SysFont(None, size)

# ============================================================
# ========================= PRESENTER ========================
# ============================================================

def pump_events():
    for ev in pygame.event.get():
        if ev.type == pygame.QUIT or (ev.type == pygame.KEYDOWN and ev.key == pygame.K_ESCAPE):
            stop_sound(); pygame.quit(); sys.exit()


class Presenter:
    """Frame callback for playback.play(): redraw the strip, then sound the frame's tones."""

    def __init__(self, renderer, sound=True, wave_kind="square"):
        self.renderer  = renderer
        self.sound     = sound
        self.wave_kind = wave_kind
        self.label     = ""

    def status(self, frame):
        tail = "  [SORTED]" if frame.settled else ""
        return f"{self.label}   comparisons: {frame.comparisons}   swaps: {frame.swaps}{tail}"

    async def __call__(self, frame):
        pump_events()
        self.renderer.draw(frame.array, frame.highlights, self.status(frame))
        pygame.display.flip()
        if self.sound and not frame.settled:
            engine = get_engine()
            if engine:
                engine.play(frame.duration_ms, len(frame.array), frame.sound_indexes, self.wave_kind)
