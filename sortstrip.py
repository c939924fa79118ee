import argparse
import asyncio
import json
import logging
import os
import sys
from dataclasses import dataclass, field, replace

import pygame

from stripview import WINDOW_HEIGHT, WINDOW_WIDTH, Presenter, StripRenderer, build_font, load_image
from playback import play
from sorters import ALGORITHMS, accent, algorithm_info, get_generator, shuffle
from tone import stop_sound

logger = logging.getLogger(__name__)

# ============================================================
# ===================== USER SETTINGS ========================
# ============================================================
#
# All times in milliseconds.
#   FRAME_DURATION : how long one drawn frame stays up; steps are batched to fill it
#   SLOW_INTERVAL  : pacing per step for the efficient algorithms (and the shuffle)
#   FAST_INTERVAL  : pacing per step for the quadratic ones (and the accent sweep)
#   SLOW_N / FAST_N: element counts for the two classes
FRAME_DURATION = 20
SLOW_INTERVAL  = 8
FAST_INTERVAL  = 2
SLOW_N         = 128
FAST_N         = 48

DEFAULT_ALGORITHMS = ["merge", "selection", "insertion"]
WAVE_KIND          = "square"

SHUFFLE_PAUSE = 1.0
ACCENT_PAUSE  = 2.0


@dataclass
class ShowConfig:
    frame_duration: float = FRAME_DURATION
    slow_interval: float  = SLOW_INTERVAL
    fast_interval: float  = FAST_INTERVAL
    slow_n: int           = SLOW_N
    fast_n: int           = FAST_N
    algorithms: list      = field(default_factory=lambda: list(DEFAULT_ALGORITHMS))
    image: str | None     = None
    sound: bool           = True

# ============================================================
# ======================= CONFIG LOADING =====================
# ============================================================

# preset-file name -> (ShowConfig field, coercion)
_NUMERIC_KEYS = {
    "frameDuration": ("frame_duration", float),
    "slowInterval":  ("slow_interval",  float),
    "fastInterval":  ("fast_interval",  float),
    "slowN":         ("slow_n",         lambda v: int(float(v))),
    "fastN":         ("fast_n",         lambda v: int(float(v))),
}


def config_from_mapping(mapping, base=None) -> ShowConfig:
    """Overlay a preset mapping onto `base`. Numbers are only coerced, never range-checked."""
    changes = {}
    for key, (attr, coerce) in _NUMERIC_KEYS.items():
        if mapping.get(key) is not None:
            changes[attr] = coerce(mapping[key])
    if mapping.get("algorithms"):
        algos = mapping["algorithms"]
        changes["algorithms"] = algos.split(",") if isinstance(algos, str) else list(algos)
    if "image" in mapping:
        changes["image"] = mapping["image"]
    if "sound" in mapping:
        changes["sound"] = bool(mapping["sound"])
    return replace(base or ShowConfig(), **changes)


def load_preset(path) -> ShowConfig:
    with open(path) as f:
        return config_from_mapping(json.load(f))


def build_parser():
    p = argparse.ArgumentParser(
        prog="sortstrip",
        description="Replay sorting algorithms as a rearranged image strip with tones.",
    )
    p.add_argument("--preset", help="JSON file with frameDuration/slowInterval/fastInterval/slowN/fastN")
    p.add_argument("--frame-duration", dest="frameDuration", help="ms per drawn frame")
    p.add_argument("--slow-interval", dest="slowInterval", help="ms per step, efficient algorithms")
    p.add_argument("--fast-interval", dest="fastInterval", help="ms per step, quadratic algorithms")
    p.add_argument("--slow-n", dest="slowN", help="element count, efficient algorithms")
    p.add_argument("--fast-n", dest="fastN", help="element count, quadratic algorithms")
    p.add_argument("--algorithms", help="comma-separated keys, run in order (see --list)")
    p.add_argument("--image", help="picture to cut into the strip (default: colour ramp)")
    p.add_argument("--mute", action="store_true", help="no tones")
    p.add_argument("--log-level", default="INFO")
    p.add_argument("--list", action="store_true", help="print algorithm keys and exit")
    return p


def resolve_config(args, parser) -> ShowConfig:
    try:
        cfg = load_preset(args.preset) if args.preset else ShowConfig()
        overrides = {k: v for k, v in vars(args).items() if k in _NUMERIC_KEYS or k == "algorithms"}
        cfg = config_from_mapping(overrides, cfg)
    except (OSError, ValueError) as e:
        parser.error(str(e))
    if args.image: cfg.image = args.image
    if args.mute:  cfg.sound = False
    for key in cfg.algorithms:
        try: algorithm_info(key)
        except KeyError: parser.error(f"unknown algorithm {key!r} (see --list)")
    return cfg

# ============================================================
# =========================== SHOW ===========================
# ============================================================

def _is_power_of_two(n):
    return n > 0 and n & (n - 1) == 0


async def run_show(cfg, presenter, *, sleep=asyncio.sleep, rng=None):
    """
    Shuffle, sort, then accent each configured algorithm in turn.

    The sort consumes exactly the array the shuffle settled on, and the accent
    exactly the array the sort settled on. Returns [(key, sorted array), ...].
    """
    results = []
    for key in cfg.algorithms:
        name, efficient = algorithm_info(key)
        n        = cfg.slow_n if efficient else cfg.fast_n
        interval = cfg.slow_interval if efficient else cfg.fast_interval
        if key == "bitonic" and not _is_power_of_two(n):
            logger.warning("Bitonic sort expects a power-of-two size, got %d", n)

        logger.info("%s: %d elements, %.3g ms/step", name, n, interval)
        presenter.label = name

        arr = list(range(n))
        shuffled = await play(shuffle(arr, rng=rng), cfg.slow_interval, cfg.frame_duration,
                              presenter, initial=arr, sleep=sleep)
        await sleep(SHUFFLE_PAUSE)

        arr = list(shuffled)
        sorted_arr = await play(get_generator(key, arr, True), interval, cfg.frame_duration,
                                presenter, initial=arr, sleep=sleep)

        arr = list(sorted_arr)
        await play(accent(arr, True), cfg.fast_interval, cfg.frame_duration,
                   presenter, initial=arr, sleep=sleep)
        await sleep(ACCENT_PAUSE)

        results.append((key, sorted_arr))
    logger.info("done")
    return results

# ============================================================
# ========================= MAIN =============================
# ============================================================

def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.list:
        for name, key, efficient in ALGORITHMS:
            print(f"{key:<18} {name}{'  (efficient)' if efficient else ''}")
        return

    cfg = resolve_config(args, parser)
    if cfg.image and not os.path.exists(cfg.image):
        parser.error(f"image not found: {cfg.image}")

    pygame.init()
    try:
        screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption("SortStrip")
        renderer  = StripRenderer(screen, load_image(cfg.image, screen.get_size()), build_font())
        presenter = Presenter(renderer, sound=cfg.sound, wave_kind=WAVE_KIND)
        asyncio.run(run_show(cfg, presenter))
    finally:
        stop_sound(); pygame.quit()


if __name__ == "__main__":
    sys.exit(main())
