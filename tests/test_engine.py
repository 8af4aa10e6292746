import pytest

from tetris_engine import Achievement, Origin, ProgressionEngine
from tetris_piece import Piece
from tetris_scoring import ScoringRules


def test_three_of_a_kind_starts_a_combo(engine, play) -> None:
    reports = play("TTT")
    s = engine.state
    assert [r.score_gained for r in reports] == [90, 90, 108]
    assert s.current_combo == 1
    assert s.best_combo >= s.current_combo
    assert s.total_combos == 1
    assert reports[-1].combo_multiplier == pytest.approx(1.2)


def test_different_type_breaks_the_combo(engine, play) -> None:
    play("TTTT")
    assert engine.state.current_combo == 2
    play("I")
    s = engine.state
    assert s.current_combo == 0
    assert s.type_streak == 1
    assert s.best_combo == 2
    assert s.last_kind == "I"


def test_combo_count_grows_with_the_streak(engine, play) -> None:
    reports = play("IIIII")
    assert [r.combo for r in reports] == [0, 0, 1, 2, 3]
    assert engine.state.total_combos == 1


def test_total_score_never_decreases_and_personal_best_tracks_it(engine, play) -> None:
    last = 0
    for kind in "IOTSZJLLLTTI":
        r = play(kind)[0]
        assert r.total_score >= last
        last = r.total_score
        assert engine.state.personal_best == r.total_score


def test_level_up_at_first_threshold(engine, play) -> None:
    reports = play("IIIIII")
    assert engine.state.total_score == 800
    assert not any(r.leveled_up for r in reports)
    assert engine.state.points_to_next_level == 200

    prior_multiplier = engine.state.score_multiplier
    r = play("I")[0]
    s = engine.state
    assert s.total_score == 1000
    assert r.leveled_up and r.level == 2
    assert s.level == 2
    assert s.level_threshold == 1500
    assert s.difficulty_factor == pytest.approx(1.2)
    assert s.score_multiplier == pytest.approx(prior_multiplier + 0.5)
    assert s.milestones_reached == 1
    assert s.points_to_next_level == 500
    assert s.level_score == 0


def test_multipliers_feed_into_the_next_play(engine, play) -> None:
    play("IIIIIII")
    r = play("O")[0]
    assert r.score_gained == round(80 * 1.5 * 1.2)


def test_achievements_unlock_once(engine, play) -> None:
    unlocked = []
    for _ in range(5000):
        if engine.state.level >= 10:
            break
        unlocked.extend(play("I")[0].unlocked)
    s = engine.state
    assert s.level == 10
    assert unlocked == [Achievement.VETERAN, Achievement.MASTER]
    assert s.achievements == {Achievement.VETERAN, Achievement.MASTER}
    assert s.difficulty_factor <= 3.0
    assert s.score_multiplier <= 10.0


def test_most_played_type_uses_strict_greater(engine, play) -> None:
    play("IIO")
    assert engine.state.most_played_kind == "I"
    play("O")
    assert engine.state.most_played_kind == "I"
    play("O")
    assert engine.state.most_played_kind == "O"


def test_untracked_types_score_but_are_not_counted(engine, play) -> None:
    r = play("S")[0]
    s = engine.state
    assert r.score_gained == 85
    assert s.total_plays == 1
    assert "S" not in s.kind_counts
    assert s.most_played_kind is None


def test_reserve_efficiency(engine, play) -> None:
    assert engine.state.reserve_efficiency == 0.0
    play("I")
    play("OT", origin=Origin.STACK)
    s = engine.state
    assert s.plays_from_queue == 1 and s.plays_from_stack == 2
    assert s.reserve_efficiency == pytest.approx(200 / 3)


def test_origin_does_not_change_the_score() -> None:
    a, b = ProgressionEngine(), ProgressionEngine()
    ra = a.process(Piece("T", 1), Origin.QUEUE)
    rb = b.process(Piece("T", 1), Origin.STACK)
    assert ra.score_gained == rb.score_gained


def test_process_rejects_non_pieces(engine) -> None:
    with pytest.raises(TypeError):
        engine.process(None, Origin.QUEUE)
    with pytest.raises(TypeError):
        engine.process(Piece("T", 1), "queue")
    assert engine.state.total_plays == 0


def test_optimize_on_fresh_engine_is_a_no_op(engine) -> None:
    assert engine.optimize() is False


def test_optimize_clamps_multiplier_and_is_idempotent(engine, play) -> None:
    play("IO")
    engine.state.score_multiplier = 12.0
    assert engine.optimize() is True
    assert engine.state.score_multiplier == 10.0
    assert engine.optimize() is False

    engine.state.score_multiplier = 0.5
    assert engine.optimize() is True
    assert engine.state.score_multiplier == 1.0


def test_optimize_recomputes_drifted_efficiency(engine, play) -> None:
    play("IO", origin=Origin.STACK)
    play("TL")
    engine.state.reserve_efficiency = 10.0
    assert engine.optimize() is True
    assert engine.state.reserve_efficiency == pytest.approx(50.0)
    engine.state.reserve_efficiency = 50.5
    assert engine.optimize() is False


def test_optimize_repairs_lagging_difficulty(engine) -> None:
    engine.state.level = 7
    engine.state.difficulty_factor = 1.4
    assert engine.optimize() is True
    assert engine.state.difficulty_factor == pytest.approx(2.2)
    assert engine.optimize() is False


def test_snapshot_is_read_only(engine, play) -> None:
    play("II")
    snap = engine.snapshot()
    assert snap.total_score == engine.state.total_score == 200
    assert snap.level_progress == pytest.approx(0.2)
    with pytest.raises(TypeError):
        snap.kind_counts["I"] = 99
    play("I")
    assert snap.kind_counts["I"] == 2
    assert engine.state.kind_counts["I"] == 3


def test_report_recommendations(engine, play) -> None:
    play("IOT")
    rep = engine.report()
    assert rep.average_per_play == pytest.approx(270 / 3)
    assert rep.levels_gained == 0
    assert rep.points_to_next_level == 730
    assert rep.combo_potential == 270
    assert len(rep.recommendations) == 3


def test_reset_restores_initial_state(engine, play) -> None:
    play("IIIIIII")
    engine.reset()
    s = engine.state
    assert (s.total_score, s.level, s.level_threshold, s.total_plays) == (0, 1, 1000, 0)
    assert s.kind_counts == {"I": 0, "O": 0, "T": 0, "L": 0}


def test_optimize_repairs_efficiency_before_any_play(engine) -> None:
    engine.state.reserve_efficiency = 50.0
    assert engine.optimize() is True
    assert engine.state.reserve_efficiency == 0.0
    assert engine.optimize() is False


def test_optimize_difficulty_repair_is_idempotent_with_small_steps() -> None:
    engine = ProgressionEngine(ScoringRules(difficulty_step=0.1))
    engine.state.level = 7
    engine.state.difficulty_factor = 1.2
    assert engine.optimize() is True
    assert engine.state.difficulty_factor == pytest.approx(1.6)
    assert engine.optimize() is False
