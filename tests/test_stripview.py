"""Headless tests for the strip renderer (off-screen surfaces only)."""

import numpy as np
import pygame

from stripview import (
    Presenter, StripRenderer, make_gradient_image, segment_offsets, segment_widths, value_to_color,
)
from playback import Frame, Highlight, HighlightKind


def striped_source(count, height=2):
    source = pygame.Surface((count, height))
    for k in range(count):
        source.fill((k * 60, 10, 200), pygame.Rect(k, 0, 1, height))
    return source


def rgb(surface, x, y=0):
    return tuple(surface.get_at((x, y)))[:3]


def test_segment_widths_spread_remainder():
    assert segment_widths(10, 3) == [4, 3, 3]
    assert segment_widths(9, 3) == [3, 3, 3]
    assert segment_widths(5, 0) == []
    assert segment_offsets([4, 3, 3]) == [0, 4, 7]


def test_value_to_color_ramp():
    colors = value_to_color([0.0, 0.25, 0.5, 0.75, 1.0])
    assert [tuple(int(v) for v in c) for c in colors] == [
        (0, 0, 255), (0, 255, 255), (0, 255, 0), (255, 255, 0), (255, 0, 0),
    ]


def test_gradient_image_size():
    image = make_gradient_image(16, 3)
    assert image.get_size() == (16, 3)
    assert rgb(image, 0) == (0, 0, 255)


def test_draw_rearranges_slices():
    surface = pygame.Surface((4, 2))
    StripRenderer(surface, striped_source(4)).draw([3, 2, 1, 0])
    assert [rgb(surface, x)[0] for x in range(4)] == [180, 120, 60, 0]


def test_draw_tints_highlights():
    surface = pygame.Surface((4, 2))
    renderer = StripRenderer(surface, striped_source(4))
    renderer.draw([0, 1, 2, 3], [
        Highlight((1,), HighlightKind.COMPARE),
        Highlight((2,), HighlightKind.SWAP),
        Highlight((), HighlightKind.SWAP),
    ])
    plain, red, green = rgb(surface, 0), rgb(surface, 1), rgb(surface, 2)
    assert plain == (0, 10, 200)
    assert red[0] > 100 and red[2] < 200
    assert green[1] > 100 and green[2] < 200
    assert rgb(surface, 3) == (180, 10, 200)


def test_draw_ignores_out_of_range_highlight():
    surface = pygame.Surface((2, 1))
    renderer = StripRenderer(surface, striped_source(2, height=1))
    renderer.draw([0, 1], [Highlight((5,), HighlightKind.COMPARE)])
    assert rgb(surface, 0) == (0, 10, 200)


def test_presenter_status_line():
    presenter = Presenter(renderer=None, sound=False)
    presenter.label = "Heap Sort"
    frame = Frame(array=(0, 1), comparisons=7, swaps=3)
    assert presenter.status(frame) == "Heap Sort   comparisons: 7   swaps: 3"
    frame.settled = True
    assert presenter.status(frame).endswith("[SORTED]")


def test_value_to_color_is_uint8():
    assert value_to_color(np.linspace(0, 1, 5)).dtype == np.uint8


def test_compare_and_swap_tints_stack_on_one_slice():
    surface = pygame.Surface((2, 1))
    renderer = StripRenderer(surface, striped_source(2, height=1))
    renderer.draw([0, 1], [
        Highlight((0,), HighlightKind.COMPARE),
        Highlight((0,), HighlightKind.SWAP),
    ])
    r, g, b = rgb(surface, 0)
    assert r > 40 and g > 100 and b < 100
    assert rgb(surface, 1) == (60, 10, 200)
