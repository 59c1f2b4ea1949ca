from datetime import date, datetime

import pytest

from scilingo.services.scoring_service import ScoringService, round_half_up


@pytest.mark.parametrize('xp, level, title', [
    (0, 1, 'Lab Intern'),
    (499, 1, 'Lab Intern'),
    (500, 2, 'Field Researcher'),
    (1199, 2, 'Field Researcher'),
    (1200, 3, 'Scientist'),
    (2500, 4, 'Senior Scientist'),
    (4500, 5, 'Lead Researcher'),
    (7500, 6, 'Professor'),
    (100000, 6, 'Professor'),
])
def test_level_for_xp_picks_largest_threshold(xp, level, title):
    entry = ScoringService.level_for_xp(xp)
    assert entry.level == level
    assert entry.title == title


def test_level_progress_midway_and_at_max():
    progress = ScoringService.level_progress(250)
    assert progress['level'] == 1
    assert progress['next_level_xp'] == 500
    assert progress['progress_percent'] == 50

    top = ScoringService.level_progress(8000)
    assert top['level'] == 6
    assert top['next_level_xp'] is None
    assert top['progress_percent'] == 100


def test_first_scored_session_starts_streak():
    assert ScoringService.evaluate_streak(None, date(2026, 3, 2), 0) == 1


@pytest.mark.parametrize('days, expected', [(0, 5), (3, 5), (7, 5), (8, 1)])
def test_streak_window_is_seven_days(days, expected):
    last = date(2026, 3, 1)
    today = date.fromordinal(last.toordinal() + days)
    assert ScoringService.evaluate_streak(last, today, 4) == expected


def test_shield_preserves_streak_without_extending_it():
    assert ScoringService.evaluate_streak(date(2026, 3, 1), date(2026, 3, 20), 4, has_shield=True) == 4


def test_shield_within_window_still_increments():
    assert ScoringService.evaluate_streak(date(2026, 3, 1), date(2026, 3, 5), 4, has_shield=True) == 5


@pytest.mark.parametrize('days, has_shield, expected', [(5, False, 4), (10, False, 1), (10, True, 3)])
def test_streak_from_prior_three_weeks(days, has_shield, expected):
    last = date(2026, 3, 1)
    today = date.fromordinal(last.toordinal() + days)
    assert ScoringService.evaluate_streak(last, today, 3, has_shield=has_shield) == expected


def test_streak_ignores_time_of_day():
    # 7 days and 23 hours apart is still 7 whole days
    last = datetime(2026, 3, 1, 0, 30)
    today = datetime(2026, 3, 8, 23, 30)
    assert ScoringService.evaluate_streak(last, today, 2) == 3


@pytest.mark.parametrize('accuracy, streak, expected', [
    (100, 1, 250),
    (100, 2, 275),
    (95, 1, 200),
    (90, 1, 150),
    (80, 3, 175),
    (85, 2, 175),
    (79, 1, 100),
    (0, 0, 100),
])
def test_competition_xp(accuracy, streak, expected):
    assert ScoringService.compute_xp(accuracy, 'competition', streak) == expected


@pytest.mark.parametrize('accuracy, expected', [(100, 125), (96, 100), (85, 75), (50, 50)])
def test_practice_xp_never_gets_streak_bonus(accuracy, expected):
    assert ScoringService.compute_xp(accuracy, 'practice', new_streak=9) == expected


def test_compute_xp_rejects_unknown_mode():
    with pytest.raises(ValueError):
        ScoringService.compute_xp(90, 'homework')


def test_overall_accuracy_rounds_half_up():
    # (80 * 3 + 98) / 4 = 84.5
    assert ScoringService.update_overall_accuracy(80, 3, 98) == 85
    assert ScoringService.update_overall_accuracy(0, 0, 70) == 70
    assert ScoringService.update_overall_accuracy(90, 1, 79) == 85


def test_overall_accuracy_is_count_weighted():
    # (80 * 4 + 100) / 5 = 84
    assert ScoringService.update_overall_accuracy(80, 4, 100) == 84


def test_accuracy_for():
    assert ScoringService.accuracy_for(9, 10) == 90
    assert ScoringService.accuracy_for(1, 8) == 13  # 12.5
    assert ScoringService.accuracy_for(2, 3) == 67
    assert ScoringService.accuracy_for(0, 0) == 0


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2
    assert round_half_up(0.5) == 1
