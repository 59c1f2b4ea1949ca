"""
Badge Service
"""
import logging
from collections import namedtuple
from typing import Iterable, List, Sequence

from scilingo import db
from scilingo.models.badge import Badge
from scilingo.models.quiz_session import QuizSession, COMPETITION

logger = logging.getLogger(__name__)

BadgeContext = namedtuple('BadgeContext', [
    'accuracy', 'streak', 'total_sessions', 'recent_competition_accuracies'
])

SCIENCE_BRAIN_SESSIONS = 3
SCIENCE_BRAIN_ACCURACY = 90


def _science_brain(ctx: BadgeContext) -> bool:
    recent = list(ctx.recent_competition_accuracies)[:SCIENCE_BRAIN_SESSIONS]
    return (len(recent) == SCIENCE_BRAIN_SESSIONS
            and all((accuracy or 0) >= SCIENCE_BRAIN_ACCURACY for accuracy in recent))


# Independent rules, checked in this order
BADGE_RULES = (
    ('first_session', lambda ctx: ctx.total_sessions == 1),
    ('perfectionist', lambda ctx: ctx.accuracy == 100),
    ('on_fire', lambda ctx: ctx.streak >= 3),
    ('veteran', lambda ctx: ctx.total_sessions >= 10),
    ('science_brain', _science_brain),
)

BADGE_INFO = {
    'first_session': {'emoji': '🔬', 'label': 'First Session', 'desc': 'Completed your first session'},
    'perfectionist': {'emoji': '⚡', 'label': 'Perfectionist', 'desc': 'Scored 100% accuracy on a session'},
    'on_fire': {'emoji': '🔥', 'label': 'On Fire', 'desc': 'Maintained a 3-week streak'},
    'top_of_class': {'emoji': '🏆', 'label': 'Top of the Class', 'desc': '#1 on the weekly leaderboard'},
    'most_improved': {'emoji': '📈', 'label': 'Most Improved', 'desc': 'Biggest accuracy gain this week'},
    'science_brain': {'emoji': '🧠', 'label': 'Science Brain', 'desc': 'Scored 90%+ for 3 sessions in a row'},
    'veteran': {'emoji': '💎', 'label': 'Veteran', 'desc': 'Completed 10 total sessions'},
}


class BadgeService:
    """Service for achievement badges"""

    @classmethod
    def evaluate_badges(cls, existing: Iterable[str], accuracy: int, streak: int,
                        total_sessions: int, recent_competition_accuracies: Sequence[int]) -> List[str]:
        """
        Determine newly earned badges

        Args:
            existing: Badge types the student already holds
            accuracy: This session's accuracy
            streak: Streak after this session
            total_sessions: Scored sessions including this one
            recent_competition_accuracies: Accuracies of the latest completed
                competition sessions, newest first

        Returns:
            Badge types that qualify and are not yet held
        """
        held = set(existing)
        ctx = BadgeContext(accuracy, streak, total_sessions, recent_competition_accuracies)
        return [badge_type for badge_type, rule in BADGE_RULES
                if badge_type not in held and rule(ctx)]

    @staticmethod
    def existing_badge_types(student_id: int) -> set:
        rows = db.session.query(Badge.badge_type).filter_by(student_id=student_id).all()
        return {row.badge_type for row in rows}

    @staticmethod
    def recent_competition_accuracies(student_id: int, limit: int = SCIENCE_BRAIN_SESSIONS) -> List[int]:
        """Accuracies of the latest completed competition sessions, newest first"""
        rows = db.session.query(QuizSession.accuracy_score).filter(
            QuizSession.student_id == student_id,
            QuizSession.session_type == COMPETITION,
            QuizSession.is_complete.is_(True)
        ).order_by(QuizSession.completed_at.desc(), QuizSession.id.desc()).limit(limit).all()
        return [row.accuracy_score or 0 for row in rows]

    @classmethod
    def award_badges(cls, student_id: int, badge_types: Iterable[str]) -> List[Badge]:
        """Add badge rows to the current transaction (caller commits)"""
        badges = [Badge(student_id=student_id, badge_type=badge_type) for badge_type in badge_types]
        for badge in badges:
            db.session.add(badge)
        if badges:
            logger.info("[BadgeService] Student %s earned %s", student_id,
                        ', '.join(badge.badge_type for badge in badges))
        return badges

    @staticmethod
    def badges_for(student_id: int) -> List[dict]:
        """Earned badges with display metadata, oldest first"""
        badges = Badge.query.filter_by(student_id=student_id).order_by(Badge.earned_at).all()
        result = []
        for badge in badges:
            info = BADGE_INFO.get(badge.badge_type, {'emoji': '🏅', 'label': badge.badge_type, 'desc': ''})
            result.append({
                'badge_type': badge.badge_type,
                'earned_at': badge.earned_at.isoformat() if badge.earned_at else None,
                **info
            })
        return result
