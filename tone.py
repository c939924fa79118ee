import logging
import math
import threading
import time

import numpy as np
import pygame

logger = logging.getLogger(__name__)

# ============================================================
# ====================== SOUND SETTINGS ======================
# ============================================================
#
# FREQ_MIN / FREQ_MAX : the band every tone falls in. Index i of an n-element
#   array sounds at  FREQ_MIN + (FREQ_MAX - FREQ_MIN) * i / n.
FREQ_MIN = 20.0
FREQ_MAX = 6000.0
#
SAMPLE_RATE = 44100
CHUNK_SIZE  = 512
#
# TONE_GAIN : output level of a single voice, before normalisation.
TONE_GAIN = 0.2
#
# SOUND_ATTACK / SOUND_RELEASE : raised-cosine fade in/out, in seconds.
#   Both are clamped to half the tone length for very short frames.
SOUND_ATTACK  = 0.004
SOUND_RELEASE = 0.010
#
# VOICE_STEAL_FADE : samples a still-sounding tone gets to fade out when the
#   next play() call displaces it.
VOICE_STEAL_FADE = 64
#
# MAX_VOICES : tones per play() call beyond this are dropped.
MAX_VOICES = 24

WAVE_KINDS = ("sine", "square", "sawtooth", "triangle")
TWO_PI = 2.0 * math.pi


def calculate_frequency(element_count, index):
    return FREQ_MIN + (FREQ_MAX - FREQ_MIN) * (index / element_count)


def waveform(kind, phases) -> np.ndarray:
    """Unit-amplitude wave for phases in [0, 1)."""
    if kind == "sine":     return np.sin(TWO_PI * phases)
    if kind == "square":   return np.where(phases < 0.5, 1.0, -1.0)
    if kind == "sawtooth": return 2.0 * phases - 1.0
    if kind == "triangle": return 1.0 - 4.0 * np.abs(phases - 0.5)
    raise ValueError(f"Unknown wave kind: {kind}")


class _Osc:
    """
    Single oscillator voice.

    Attributes
    ----------
    freq      : float  : frequency in Hz
    kind      : str    : one of WAVE_KINDS
    phase     : float  : current phase in [0, 1), advances by freq/sr each sample
    age       : int    : samples rendered so far
    max_age   : int    : total lifetime in samples
    attack    : int    : attack length in samples (raised-cosine fade-in)
    release   : int    : release length in samples (raised-cosine fade-out)
    """
    __slots__ = ('freq', 'kind', 'phase', 'age', 'max_age', 'attack', 'release')

    def __init__(self, freq, kind, max_age, attack, release):
        self.freq    = freq
        self.kind    = kind
        self.phase   = 0.0
        self.age     = 0
        self.max_age = max_age
        self.attack  = attack
        self.release = release


def _envelope(o, abs_age) -> np.ndarray:
    """Raised-cosine attack and release over the sample ages `abs_age`; zero past max_age."""
    env = np.ones(len(abs_age), dtype=np.float64)
    a_mask = abs_age < o.attack
    if np.any(a_mask):
        env[a_mask] = 0.5 * (1.0 - np.cos(math.pi * abs_age[a_mask] / o.attack))
    rel_start = o.max_age - o.release
    r_mask = abs_age >= rel_start
    if np.any(r_mask):
        env[r_mask] = np.maximum(0.0, 0.5 * (1.0 + np.cos(
            math.pi * (abs_age[r_mask] - rel_start) / o.release
        )))
    env[abs_age >= o.max_age] = 0.0
    return env


class SoundEngine:
    def __init__(self):
        self.sample_rate  = SAMPLE_RATE
        self.chunk_size   = CHUNK_SIZE
        self._oscs        = []          # list of active _Osc instances
        self._lock        = threading.Lock()
        self._running     = False
        self._thread      = None
        self._channel     = None

    def start(self):
        self._channel = pygame.mixer.Channel(1)
        self._running = True
        self._thread  = threading.Thread(target=self._loop, daemon=True)
        self._thread.start()

    def stop(self):
        self._running = False
        if self._channel:
            self._channel.stop()

    def play(self, duration_ms, element_count, indexes, wave_kind="square"):
        """
        Sound one tone per index, all at once, for `duration_ms`.
        Whatever the previous call left ringing is cut short with a quick fade.
        """
        if wave_kind not in WAVE_KINDS:
            raise ValueError(f"Unknown wave kind: {wave_kind}")
        max_age = max(2, int(duration_ms / 1000 * self.sample_rate))
        attack  = max(1, min(int(SOUND_ATTACK  * self.sample_rate), max_age // 2))
        release = max(1, min(int(SOUND_RELEASE * self.sample_rate), max_age // 2))
        fresh = [_Osc(calculate_frequency(element_count, i), wave_kind, max_age, attack, release)
                 for i in list(indexes)[:MAX_VOICES]]
        with self._lock:
            for o in self._oscs:
                steal = min(VOICE_STEAL_FADE, o.release)
                if o.age + steal < o.max_age:
                    o.max_age = o.age + steal
                    o.release = steal
            self._oscs = self._oscs + fresh

    def _gen_chunk(self) -> np.ndarray:
        """
        Synthesise one chunk as float64 in [-1, 1].

        Each voice renders its own wave kind through waveform(), shaped by
        _envelope(). Voices past max_age are dropped.
        """
        buf = np.zeros(self.chunk_size, dtype=np.float64)
        idx = np.arange(self.chunk_size, dtype=np.float64)

        with self._lock:
            alive = []
            for o in self._oscs:
                phases = (o.phase + idx * (o.freq / self.sample_rate)) % 1.0
                buf   += waveform(o.kind, phases) * _envelope(o, idx + o.age)

                o.phase = (o.phase + self.chunk_size * (o.freq / self.sample_rate)) % 1.0
                o.age  += self.chunk_size
                if o.age < o.max_age:
                    alive.append(o)

            self._oscs = alive
            n_voices = max(1, len(alive))

        # RMS-aware normalisation keeps loudness steady as voices come and go
        buf *= TONE_GAIN / math.sqrt(n_voices)
        return buf

    def _loop(self):
        """Mixer thread: keep one chunk queued on the channel. TONE_GAIN already leaves headroom."""
        chunk_secs = self.chunk_size / self.sample_rate
        while self._running:
            mono   = self._gen_chunk()
            pcm    = (np.clip(mono, -1.0, 1.0) * 32767).astype(np.int16)
            stereo = np.column_stack((pcm, pcm))
            snd    = pygame.mixer.Sound(buffer=stereo.tobytes())
            deadline = time.monotonic() + chunk_secs * 4
            while self._channel.get_queue() is not None and self._running:
                time.sleep(0.001)
                if time.monotonic() > deadline:
                    break
            if self._running:
                self._channel.queue(snd)
            time.sleep(chunk_secs * 0.75)


_engine: SoundEngine | None = None
_sound_failed = False


def get_engine():
    """Process-wide engine, opened on first use. None when no audio device is available."""
    global _engine, _sound_failed
    if _engine is None and not _sound_failed:
        try:
            pygame.mixer.pre_init(SAMPLE_RATE, -16, 2, CHUNK_SIZE)
            pygame.mixer.init()
        except pygame.error as e:
            logger.warning("Audio unavailable, continuing without sound: %s", e)
            _sound_failed = True
            return None
        _engine = SoundEngine()
        _engine.start()
    return _engine


def stop_sound():
    global _engine
    if _engine:
        _engine.stop()
        _engine = None
