import asyncio
import logging
import math
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from itertools import islice

logger = logging.getLogger(__name__)

# ============================================================
# ====================== PLAYBACK SETTINGS ===================
# ============================================================
#
# MAX_STEPS      : safety valve. At most this many steps are queued and shown;
#   the rest of the sequence is run out unseen so the settle frame still
#   shows the final array.
# MAX_TAIL_STEPS : how far past MAX_STEPS a sequence is run out before giving up.
MAX_STEPS      = 80_000
MAX_TAIL_STEPS = 5_000_000


class HighlightKind(str, Enum):
    COMPARE = "compare"
    SWAP    = "swap"


@dataclass(frozen=True)
class Highlight:
    indexes: tuple
    kind: HighlightKind


@dataclass
class Frame:
    """
    Several consecutive steps folded into one presentation tick.

    Attributes
    ----------
    array         : tuple  : array of the last folded step
    highlights    : list   : every folded step's compare/swap lists, in order
    sound_indexes : tuple  : first folded step's compare indexes, else its swaps
    comparisons   : int    : running comparison count of the last folded step
    swaps         : int    : running swap count of the last folded step
    duration_ms   : float  : tone length and pacing delay for this frame
    settled       : bool   : True only for the closing frame of a play() call
    step_count    : int    : how many steps were folded in (0 for the closing frame)
    """
    array: tuple
    highlights: list = field(default_factory=list)
    sound_indexes: tuple = ()
    comparisons: int = 0
    swaps: int = 0
    duration_ms: float = 0.0
    settled: bool = False
    step_count: int = 0


def steps_per_frame(pacing_interval, frame_budget) -> int:
    if not (math.isfinite(pacing_interval) and pacing_interval > 0):
        raise ValueError(f"pacing interval must be a positive number of ms, got {pacing_interval!r}")
    if not math.isfinite(frame_budget):
        raise ValueError(f"frame budget must be a finite number of ms, got {frame_budget!r}")
    return max(1, math.ceil(frame_budget / pacing_interval))


def drain(steps, limit=MAX_STEPS) -> deque:
    """Pull the step sequence into a FIFO queue, at most `limit` steps."""
    return deque(islice(steps, limit))


def run_out(steps, limit=MAX_TAIL_STEPS):
    """
    Consume what is left of a truncated sequence without queueing it and
    return its last step, or None when nothing was left. A sequence still
    going after `limit` more steps is abandoned at that point.
    """
    last, count = None, 0
    for count, last in enumerate(steps, 1):
        if count >= limit:
            logger.error("Step sequence still running after %d extra steps, settling early", limit)
            break
    if last is not None:
        logger.warning("Step sequence truncated at %d steps (%d more not shown)", MAX_STEPS, count)
    return last


def build_frame(queue, count, duration_ms=0.0) -> Frame:
    """Pop up to `count` steps off the head of `queue` and fold them into a Frame."""
    frame = Frame(array=(), duration_ms=duration_ms)
    while frame.step_count < count and queue:
        step = queue.popleft()
        if frame.step_count == 0:
            frame.sound_indexes = step.compare_indexes or step.swapped_indexes
        frame.array       = step.array
        frame.comparisons = step.comparisons
        frame.swaps       = step.swaps
        frame.highlights.append(Highlight(step.compare_indexes, HighlightKind.COMPARE))
        frame.highlights.append(Highlight(step.swapped_indexes, HighlightKind.SWAP))
        frame.step_count += 1
    return frame


async def play(steps, pacing_interval, frame_budget, present_frame, *, initial=(), sleep=asyncio.sleep):
    """
    Replay a step sequence through `present_frame`, one awaited call per frame.

    The sequence is drained completely before the first frame is shown. Each
    frame is followed by a pause of max(frame_budget, pacing_interval) ms. A
    final frame without highlights always shows the settled array, which is
    also the return value. When the safety valve cuts the sequence short, the
    unshown rest is still run out so that array is the driver's last one.
    `initial` is returned when the sequence is empty.
    """
    per_frame = steps_per_frame(pacing_interval, frame_budget)
    delay_ms  = max(frame_budget, pacing_interval)

    steps = iter(steps)
    queue = drain(steps, MAX_STEPS)
    last  = queue[-1] if queue else None
    if len(queue) == MAX_STEPS:
        last = run_out(steps, MAX_TAIL_STEPS) or last
    final = last.array if last else tuple(initial)
    logger.debug("Drained %d steps, %d per frame", len(queue), per_frame)

    while queue:
        frame = build_frame(queue, per_frame, delay_ms)
        await present_frame(frame)
        await sleep(delay_ms / 1000)

    await present_frame(Frame(
        array=final,
        comparisons=last.comparisons if last else 0,
        swaps=last.swaps if last else 0,
        duration_ms=delay_ms,
        settled=True,
    ))
    return final
