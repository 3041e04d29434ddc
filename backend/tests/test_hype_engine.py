import pytest

from models import HypeLevel, WinProbabilitySample
from services.hype_engine import HAPTIC_PATTERNS, HypeEngine, level_of, score


def _sample(drama=None, leverage=None, home=None, inning=None) -> WinProbabilitySample:
    return WinProbabilitySample(
        home_win_prob=home,
        away_win_prob=None if home is None else 100.0 - home,
        drama_index=drama,
        leverage_index=leverage,
        inning=inning,
    )


def test_blended_score_for_typical_sample() -> None:
    value = score(_sample(drama=128, leverage=2))
    assert value == pytest.approx(59.27, abs=0.01)
    assert level_of(value) is HypeLevel.HOT


@pytest.mark.parametrize(
    ("value", "level"),
    [
        (0.0, HypeLevel.CALM),
        (24.9, HypeLevel.CALM),
        (25.0, HypeLevel.WARM),
        (49.9, HypeLevel.WARM),
        (50.0, HypeLevel.HOT),
        (74.9, HypeLevel.HOT),
        (75.0, HypeLevel.INSANE),
        (100.0, HypeLevel.INSANE),
    ],
)
def test_level_thresholds(value: float, level: HypeLevel) -> None:
    assert level_of(value) is level


def test_single_signal_is_used_unweighted() -> None:
    assert score(_sample(drama=320)) == pytest.approx(100.0)
    assert score(_sample(leverage=2)) == pytest.approx(50.0)
    # Leverage saturates at 4.0 even though the range goes to 6.
    assert score(_sample(leverage=5.5)) == pytest.approx(100.0)


def test_no_signal_means_no_value() -> None:
    assert score(None) is None
    assert score(_sample(home=60.0)) is None


def test_out_of_range_inputs_are_clamped() -> None:
    assert score(_sample(drama=-10, leverage=-1)) == pytest.approx(0.0)
    assert score(_sample(drama=1000, leverage=99)) == pytest.approx(100.0)


def test_score_is_monotonic_in_each_input() -> None:
    dramas = [score(_sample(drama=d, leverage=1.0)) for d in range(0, 321, 20)]
    leverages = [score(_sample(drama=100, leverage=lev / 2)) for lev in range(0, 13)]
    assert dramas == sorted(dramas)
    assert leverages == sorted(leverages)


def test_live_update_builds_display_state() -> None:
    engine = HypeEngine()
    state = engine.update(_sample(drama=128, leverage=2, home=61.6, inning=8), is_live=True, inning_state="Top")
    assert state.level is HypeLevel.HOT
    assert state.is_live is True
    assert state.tag == "LIVE"
    assert "Inning 8 (Top)" in state.subtext
    assert "Home 62%" in state.subtext
    assert state.narrative == "Tension is rising!"


def test_live_without_numbers_shows_no_data() -> None:
    state = HypeEngine().update(None, is_live=True, inning=3)
    assert state.value == 0.0
    assert state.level is HypeLevel.CALM
    assert "No win-probability data yet." in state.subtext


def test_not_live_shows_waiting_state() -> None:
    state = HypeEngine(lang="ja").update(_sample(drama=300), is_live=False)
    assert state.value == 0.0
    assert state.level is HypeLevel.CALM
    assert state.tag == ""
    assert "試合中に自動更新します。" in state.subtext


def test_final_keeps_value_and_tag() -> None:
    state = HypeEngine().update(_sample(drama=320), is_live=False, is_final=True)
    assert state.tag == "FINAL"
    assert state.level is HypeLevel.INSANE
    assert state.is_live is False


def test_unknown_language_falls_back_to_english() -> None:
    state = HypeEngine(lang="fr").update(_sample(drama=0), is_live=True)
    assert state.narrative == "Quiet at the park."


class _Recorder:
    def __init__(self) -> None:
        self.patterns: list[list[int]] = []

    def __call__(self, pattern) -> None:
        self.patterns.append(list(pattern))


def test_first_observation_never_pulses(clock) -> None:
    vibrate = _Recorder()
    engine = HypeEngine(vibrate=vibrate, now=clock)
    state = engine.update(_sample(drama=320), is_live=True)
    assert state.level is HypeLevel.INSANE
    assert state.bump is False
    assert vibrate.patterns == []


def test_rise_pulses_and_is_throttled(clock) -> None:
    vibrate = _Recorder()
    engine = HypeEngine(vibrate=vibrate, now=clock)
    engine.update(_sample(drama=0), is_live=True)                 # calm
    assert engine.update(_sample(drama=30), is_live=True).bump    # warm
    assert vibrate.patterns == [list(HAPTIC_PATTERNS[HypeLevel.WARM])]

    clock.advance(10)
    assert engine.update(_sample(drama=100), is_live=True).bump   # hot, inside cooldown
    assert len(vibrate.patterns) == 1

    clock.advance(30)
    engine.update(_sample(drama=320), is_live=True)               # insane, cooldown over
    assert vibrate.patterns[-1] == list(HAPTIC_PATTERNS[HypeLevel.INSANE])
    assert len(vibrate.patterns) == 2


def test_falling_level_never_pulses(clock) -> None:
    vibrate = _Recorder()
    engine = HypeEngine(vibrate=vibrate, now=clock)
    engine.update(_sample(drama=320), is_live=True)
    clock.advance(60)
    state = engine.update(_sample(drama=0), is_live=True)
    assert state.bump is False
    assert vibrate.patterns == []


def test_no_pulse_when_not_live(clock) -> None:
    vibrate = _Recorder()
    engine = HypeEngine(vibrate=vibrate, now=clock)
    engine.update(_sample(drama=0), is_live=False, is_final=True)
    engine.update(_sample(drama=320), is_live=False, is_final=True)
    assert vibrate.patterns == []


def test_reduced_motion_disables_haptics(clock) -> None:
    vibrate = _Recorder()
    engine = HypeEngine(vibrate=vibrate, reduced_motion=True, now=clock)
    assert engine.haptics_enabled is False
    engine.update(_sample(drama=0), is_live=True)
    assert engine.update(_sample(drama=320), is_live=True).bump is True
    assert vibrate.patterns == []


def test_reset_forgets_last_level(clock) -> None:
    vibrate = _Recorder()
    engine = HypeEngine(vibrate=vibrate, now=clock)
    engine.update(_sample(drama=0), is_live=True)
    engine.reset()
    assert engine.last_level is None
    assert engine.update(_sample(drama=320), is_live=True).bump is False
