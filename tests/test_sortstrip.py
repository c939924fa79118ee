"""Tests for configuration handling and the shuffle -> sort -> accent show."""

import asyncio
import json
import logging
import random

import pytest

import sortstrip
from sortstrip import ShowConfig, build_parser, config_from_mapping, load_preset, resolve_config, run_show


def test_mapping_coerces_numbers():
    cfg = config_from_mapping({"frameDuration": "35", "slowInterval": 4, "slowN": "12.0", "fastN": 7.9})
    assert cfg.frame_duration == 35.0
    assert cfg.slow_interval == 4.0
    assert cfg.slow_n == 12
    assert cfg.fast_n == 7
    assert cfg.fast_interval == sortstrip.FAST_INTERVAL


def test_mapping_rejects_non_numeric():
    with pytest.raises(ValueError):
        config_from_mapping({"fastInterval": "quick"})


def test_mapping_overlays_base():
    base = ShowConfig(slow_n=99, sound=False)
    cfg = config_from_mapping({"algorithms": "heap,quick"}, base)
    assert cfg.algorithms == ["heap", "quick"]
    assert cfg.slow_n == 99
    assert cfg.sound is False
    assert base.algorithms == sortstrip.DEFAULT_ALGORITHMS


def test_load_preset(tmp_path):
    path = tmp_path / "preset.json"
    path.write_text(json.dumps({"frameDuration": 16, "fastN": 30, "algorithms": ["gnome"], "sound": False}))
    cfg = load_preset(path)
    assert (cfg.frame_duration, cfg.fast_n, cfg.algorithms, cfg.sound) == (16.0, 30, ["gnome"], False)


def test_flags_override_preset(tmp_path):
    path = tmp_path / "preset.json"
    path.write_text(json.dumps({"slowN": 64, "fastN": 30}))
    parser = build_parser()
    args = parser.parse_args(["--preset", str(path), "--fast-n", "10", "--mute"])
    cfg = resolve_config(args, parser)
    assert (cfg.slow_n, cfg.fast_n, cfg.sound) == (64, 10, False)


def test_unknown_algorithm_is_a_usage_error():
    parser = build_parser()
    args = parser.parse_args(["--algorithms", "merge,stooge"])
    with pytest.raises(SystemExit):
        resolve_config(args, parser)


def test_bad_number_is_a_usage_error():
    parser = build_parser()
    args = parser.parse_args(["--slow-interval", "fast"])
    with pytest.raises(SystemExit):
        resolve_config(args, parser)


def test_list_prints_algorithms(capsys):
    sortstrip.main(["--list"])
    out = capsys.readouterr().out
    assert "merge" in out and "lsd_radix" in out and "(efficient)" in out


def show_config(**kw):
    defaults = dict(frame_duration=1, slow_interval=1, fast_interval=1, slow_n=8, fast_n=5,
                    algorithms=["merge", "bubble"], sound=False)
    defaults.update(kw)
    return ShowConfig(**defaults)


def test_show_chains_phases(presenter, fake_sleep):
    results = asyncio.run(run_show(show_config(), presenter, sleep=fake_sleep, rng=random.Random(2)))
    assert results == [("merge", tuple(range(8))), ("bubble", tuple(range(5)))]
    assert presenter.labels == ["Merge Sort", "Bubble Sort"]

    frames = presenter.frames
    settle_at = [i for i, f in enumerate(frames) if f.settled]
    assert len(settle_at) == 6  # shuffle, sort, accent per algorithm

    shuffle_end, sort_end, accent_end = settle_at[:3]
    # one step per frame: the first sort frame shows the shuffled array untouched
    assert frames[shuffle_end + 1].array == frames[shuffle_end].array
    assert frames[sort_end].array == tuple(range(8))
    assert frames[sort_end + 1].array == frames[sort_end].array
    assert frames[sort_end + 1].highlights[1].indexes == (0,)
    assert frames[accent_end].array == tuple(range(8))


def test_show_pauses_between_phases(presenter, fake_sleep):
    asyncio.run(run_show(show_config(algorithms=["insertion"]), presenter, sleep=fake_sleep))
    pauses = [d for d in fake_sleep.delays if d >= 1]
    assert pauses == [sortstrip.SHUFFLE_PAUSE, sortstrip.ACCENT_PAUSE]


def test_show_picks_size_and_pacing_by_class(presenter, fake_sleep):
    cfg = show_config(algorithms=["selection"], fast_n=6, fast_interval=3, slow_interval=1, frame_duration=1)
    results = asyncio.run(run_show(cfg, presenter, sleep=fake_sleep))
    assert results == [("selection", tuple(range(6)))]
    assert 0.003 in fake_sleep.delays


def test_show_warns_on_bitonic_size(presenter, fake_sleep, caplog):
    with caplog.at_level(logging.WARNING, logger="sortstrip"):
        asyncio.run(run_show(show_config(algorithms=["bitonic"], slow_n=6), presenter, sleep=fake_sleep))
    assert "power-of-two" in caplog.text
