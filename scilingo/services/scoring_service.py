"""
Scoring Service for gamification
"""
import math
from collections import namedtuple
from datetime import date
from typing import Optional

from scilingo.models.quiz_session import COMPETITION, PRACTICE, SESSION_MODES

Level = namedtuple('Level', ['threshold', 'level', 'title'])


class ScoringService:
    """Leveling, streak, XP and accuracy rules applied when a quiz is completed"""

    # Ascending XP thresholds
    LEVELS = (
        Level(0, 1, 'Lab Intern'),
        Level(500, 2, 'Field Researcher'),
        Level(1200, 3, 'Scientist'),
        Level(2500, 4, 'Senior Scientist'),
        Level(4500, 5, 'Lead Researcher'),
        Level(7500, 6, 'Professor'),
    )

    # Days a streak survives between scored sessions
    STREAK_WINDOW_DAYS = 7

    # Base XP and accuracy tiers, highest threshold first
    BASE_XP = {
        COMPETITION: 100,
        PRACTICE: 50,
    }
    ACCURACY_TIERS = {
        COMPETITION: ((100, 150), (95, 100), (80, 50)),
        PRACTICE: ((100, 75), (95, 50), (80, 25)),
    }
    STREAK_BONUS = 25

    @classmethod
    def level_for_xp(cls, xp: int) -> Level:
        """
        Find the level reached with the given XP

        Args:
            xp: Total (non-negative) XP

        Returns:
            Level tuple with the largest threshold <= xp
        """
        current = cls.LEVELS[0]
        for entry in cls.LEVELS:
            if xp >= entry.threshold:
                current = entry
            else:
                break
        return current

    @classmethod
    def level_progress(cls, xp: int) -> dict:
        """Level, title and progress towards the next threshold"""
        current = cls.level_for_xp(xp)
        next_level = next((entry for entry in cls.LEVELS if entry.threshold > xp), None)

        if next_level is None:
            progress = 100
        else:
            span = next_level.threshold - current.threshold
            progress = int((xp - current.threshold) * 100 / span)

        return {
            'level': current.level,
            'title': current.title,
            'xp': xp,
            'next_level_xp': next_level.threshold if next_level else None,
            'progress_percent': progress
        }

    @classmethod
    def evaluate_streak(cls, last_session_date: Optional[date], today: date,
                        prior_streak: int, has_shield: bool = False) -> int:
        """
        Decide the weekly streak after a scored session

        Args:
            last_session_date: Date of the previous scored session, or None
            today: Date of this session
            prior_streak: Streak before this session
            has_shield: Whether a streak shield was bought for this session

        Returns:
            New streak count
        """
        if last_session_date is None:
            return 1

        # Whole days only: two sessions on the same day are 0 days apart
        elapsed = (_as_date(today) - _as_date(last_session_date)).days

        if elapsed <= cls.STREAK_WINDOW_DAYS:
            return prior_streak + 1
        if has_shield:
            # A shield preserves the streak, it does not extend it
            return prior_streak
        return 1

    @classmethod
    def compute_xp(cls, accuracy: int, mode: str, new_streak: int = 0) -> int:
        """
        Calculate XP for a completed session

        Args:
            accuracy: Accuracy percentage (0-100)
            mode: 'practice' or 'competition'
            new_streak: Streak after this session (ignored for practice)

        Returns:
            XP awarded
        """
        if mode not in SESSION_MODES:
            raise ValueError(f"Unknown session mode: {mode}")

        xp = cls.BASE_XP[mode]
        for threshold, bonus in cls.ACCURACY_TIERS[mode]:
            if accuracy >= threshold:
                xp += bonus
                break

        if mode == COMPETITION and new_streak > 1:
            xp += cls.STREAK_BONUS

        return xp

    @staticmethod
    def accuracy_for(correct: int, total: int) -> int:
        """Accuracy percentage, 0 when nothing was attempted"""
        if total <= 0:
            return 0
        return round_half_up(100 * correct / total)

    @staticmethod
    def update_overall_accuracy(prior_average: float, prior_count: int, new_accuracy: int) -> int:
        """
        Fold a session's accuracy into the running count-weighted average

        Args:
            prior_average: Overall accuracy before this session
            prior_count: Scored sessions before this session
            new_accuracy: This session's accuracy

        Returns:
            New overall accuracy, rounded to a whole percentage point
        """
        return round_half_up((prior_average * prior_count + new_accuracy) / (prior_count + 1))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up"""
    return int(math.floor(value + 0.5))


def _as_date(value) -> date:
    # datetime is a subclass of date; drop the time part
    if hasattr(value, 'date') and callable(value.date):
        return value.date()
    return value
