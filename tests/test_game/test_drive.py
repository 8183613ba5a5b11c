"""Tests for the drive ledger and game clock."""

import pytest

from pocketqb.config import RulesConfig
from pocketqb.game.difficulty import difficulty_for_week, pocket_time_for
from pocketqb.game.drive import (
    DriveState,
    PlayLog,
    Score,
    Side,
    apply_play,
    run_clock,
    summarize,
)
from pocketqb.simulation.systems.passing import PlayOutcome


@pytest.fixture
def rules() -> RulesConfig:
    return RulesConfig()


class TestCompletions:
    """Gains move the chains or the down."""

    def test_first_down(self, make_drive, rules):
        state, result = apply_play(make_drive(1, 10, 20), PlayOutcome.COMPLETE, 12, rules=rules)

        assert (state.down, state.yards_to_go, state.yard_line) == (1, 10, 32)
        assert result.outcome == PlayOutcome.FIRST_DOWN
        assert result.is_first_down
        assert result.new_yard_line == 32

    def test_short_gain(self, make_drive, rules):
        state, result = apply_play(make_drive(2, 8, 40), PlayOutcome.COMPLETE, 5, rules=rules)

        assert (state.down, state.yards_to_go, state.yard_line) == (3, 3, 45)
        assert result.outcome == PlayOutcome.COMPLETE
        assert not result.is_first_down

    def test_exactly_the_line_to_gain(self, make_drive, rules):
        state, result = apply_play(make_drive(3, 4, 50), PlayOutcome.COMPLETE, 4, rules=rules)
        assert result.is_first_down
        assert state.down == 1

    def test_goal_to_go_after_first_down(self, make_drive, rules):
        state, _ = apply_play(make_drive(1, 10, 80), PlayOutcome.COMPLETE, 15, rules=rules)
        assert state.yard_line == 95
        assert state.yards_to_go == 5
        assert state.is_goal_to_go

    def test_touchdown(self, make_drive, rules):
        state, result = apply_play(make_drive(1, 5, 95), PlayOutcome.COMPLETE, 5, rules=rules)

        assert result.outcome == PlayOutcome.TOUCHDOWN
        assert result.is_touchdown
        assert result.points_scored == 6
        assert state.score == Score(home=6, away=0)
        assert state.possession == Side.AWAY
        assert (state.down, state.yards_to_go, state.yard_line) == (1, 10, 20)

    def test_touchdown_outcome_credits_remaining_distance(self, make_drive, rules):
        _, result = apply_play(make_drive(1, 10, 70), PlayOutcome.TOUCHDOWN, 12, rules=rules)
        assert result.yards_gained == 30


class TestIncompleteAndDowns:
    """Incompletions spend a down; fourth down turns the ball over."""

    def test_incomplete(self, make_drive, rules):
        state, result = apply_play(make_drive(2, 7, 35), PlayOutcome.INCOMPLETE, rules=rules)
        assert (state.down, state.yards_to_go, state.yard_line) == (3, 7, 35)
        assert result.yards_gained == 0

    def test_turnover_on_downs(self, make_drive, rules):
        state, result = apply_play(make_drive(4, 3, 50), PlayOutcome.INCOMPLETE, rules=rules)

        assert result.turnover_on_downs
        assert result.is_turnover
        assert state.possession == Side.AWAY
        assert (state.down, state.yards_to_go, state.yard_line) == (1, 10, 50)

    def test_turnover_on_downs_mirrors_the_spot(self, make_drive, rules):
        state, result = apply_play(make_drive(4, 10, 30), PlayOutcome.COMPLETE, 4, rules=rules)
        assert state.yard_line == 66
        assert result.new_yard_line == 66


class TestSacks:
    """Sacks lose yards; in the end zone they are a safety."""

    def test_default_sack_loss(self, make_drive, rules):
        state, result = apply_play(make_drive(1, 10, 40), PlayOutcome.SACK, rules=rules)

        assert result.outcome == PlayOutcome.SACK
        assert result.yards_gained == -rules.sack_yards
        assert (state.down, state.yards_to_go, state.yard_line) == (2, 17, 33)

    def test_explicit_loss(self, make_drive, rules):
        state, _ = apply_play(make_drive(1, 10, 40), PlayOutcome.SACK, -3, rules=rules)
        assert state.yard_line == 37

    def test_safety(self, make_drive, rules):
        state, result = apply_play(make_drive(2, 10, 5), PlayOutcome.SACK, rules=rules)

        assert result.is_safety
        assert result.points_scored == 2
        assert state.score == Score(home=0, away=2)
        assert state.possession == Side.AWAY
        assert state.yard_line == rules.kickoff_yard_line


class TestInterceptions:
    """The defence takes over at the mirrored spot."""

    def test_interception_at_catch_point(self, make_drive, rules):
        state, result = apply_play(
            make_drive(1, 10, 30), PlayOutcome.INTERCEPTION, spot=45, rules=rules
        )
        assert result.is_turnover
        assert state.possession == Side.AWAY
        assert state.yard_line == 55
        assert state.down == 1

    def test_interception_in_end_zone_is_touchback(self, make_drive, rules):
        state, _ = apply_play(make_drive(1, 10, 85), PlayOutcome.INTERCEPTION, spot=104, rules=rules)
        assert state.yard_line == rules.touchback_yard_line

    def test_interception_never_lands_on_goal_line(self, make_drive, rules):
        state, _ = apply_play(make_drive(1, 10, 90), PlayOutcome.INTERCEPTION, spot=99.8, rules=rules)
        assert state.yard_line == 1


class TestInvariants:
    """The ledger is a pure reducer over valid states."""

    def test_input_state_unchanged(self, make_drive, rules):
        before = make_drive(1, 10, 20)
        apply_play(before, PlayOutcome.COMPLETE, 30, rules=rules)
        assert before.yard_line == 20

    def test_cannot_play_after_final(self, make_drive, rules):
        with pytest.raises(AssertionError):
            apply_play(make_drive(is_final=True), PlayOutcome.INCOMPLETE, rules=rules)

    def test_line_to_gain_past_goal_rejected(self):
        with pytest.raises(AssertionError):
            DriveState(down=1, yards_to_go=10, yard_line=95)

    def test_down_out_of_range_rejected(self):
        with pytest.raises(AssertionError):
            DriveState(down=5)

    def test_down_and_distance(self, make_drive):
        assert make_drive(3, 4, 65).down_and_distance() == "3rd & 4 at opp 35"
        assert make_drive(1, 5, 95).down_and_distance() == "1st & goal at opp 5"


class TestClock:
    """Quarter rollover, final whistle and overtime."""

    def test_runoff(self, make_drive, rules):
        assert run_clock(make_drive(time_remaining=50), 8, rules).time_remaining == 42

    def test_quarter_rolls_over(self, make_drive, rules):
        state = run_clock(make_drive(quarter=2, time_remaining=5), 8, rules)
        assert state.quarter == 3
        assert state.time_remaining == rules.quarter_duration

    def test_game_ends_after_fourth(self, make_drive, rules):
        state = run_clock(make_drive(quarter=4, time_remaining=5, score=Score(7, 0)), 8, rules)
        assert state.is_final

    def test_tied_game_goes_to_overtime(self, make_drive, rules):
        state = run_clock(make_drive(quarter=4, time_remaining=5), 8, rules)
        assert state.quarter == 5
        assert state.is_overtime
        assert not state.is_final

    def test_no_overtime_when_disabled(self, make_drive):
        rules = RulesConfig(overtime_enabled=False)
        assert run_clock(make_drive(quarter=4, time_remaining=5), 8, rules).is_final

    def test_overtime_score_ends_game(self, make_drive, rules):
        state, _ = apply_play(
            make_drive(1, 5, 95, quarter=5), PlayOutcome.COMPLETE, 5, rules=rules
        )
        assert state.is_final

    def test_final_state_is_fixed_point(self, make_drive, rules):
        final = make_drive(is_final=True)
        assert run_clock(final, 30, rules) is final


class TestDifficulty:
    """Difficulty curve and pocket time."""

    def test_curve_increases(self):
        values = [difficulty_for_week(w) for w in range(1, 23)]
        assert values == sorted(values)
        assert difficulty_for_week(1) == 0.8
        assert difficulty_for_week(17) == 1.6

    def test_pocket_time_shrinks_with_floor(self):
        assert pocket_time_for(0.8) == pytest.approx(5.0)
        assert pocket_time_for(1.6) == pytest.approx(2.5)
        assert pocket_time_for(5.0) == 1.8

    def test_week_must_be_positive(self):
        with pytest.raises(AssertionError):
            difficulty_for_week(0)


class TestPlayLog:
    """Box score over a list of plays."""

    def test_summarize(self, make_drive, rules):
        log = []
        state = make_drive(1, 10, 20)
        for n, (outcome, yards) in enumerate([
            (PlayOutcome.COMPLETE, 12),
            (PlayOutcome.INCOMPLETE, 0),
            (PlayOutcome.SACK, 0),
            (PlayOutcome.COMPLETE, 30),
        ], start=1):
            before = state
            state, result = apply_play(state, outcome, yards, rules=rules)
            log.append(PlayLog(
                play_number=n,
                quarter=before.quarter,
                down=before.down,
                distance=before.yards_to_go,
                los=before.yard_line,
                possession=before.possession,
                play_call="mesh",
                coverage="zone",
                result=result,
            ))

        totals = summarize(log)

        assert totals["attempts"] == 3
        assert totals["completions"] == 2
        assert totals["yards"] == 42
        assert totals["sacks"] == 1
        assert totals["big_plays"] == 1
        assert "#1 Q1 home 1&10 @20 [mesh vs zone]" in log[0].format()
