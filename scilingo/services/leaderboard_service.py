"""
Leaderboard Service
"""
from scilingo import db
from scilingo.models.student_stats import StudentStats
from scilingo.models.user import User
from scilingo.services.scoring_service import ScoringService

ALL_SECTIONS = 'all'


class LeaderboardService:
    """Class ranking by overall accuracy, then XP"""

    @staticmethod
    def leaderboard(section: str = ALL_SECTIONS, limit: int = None) -> list:
        """
        Ranked students, optionally for one class section

        Args:
            section: Class section, or 'all'
            limit: Maximum rows to return

        Returns:
            List of dicts ordered by accuracy desc, XP desc
        """
        query = db.session.query(User, StudentStats).join(
            StudentStats, StudentStats.user_id == User.id
        ).filter(User.role == 'student')

        if section and section != ALL_SECTIONS:
            query = query.filter(User.class_section == section)

        query = query.order_by(
            StudentStats.overall_accuracy.desc(),
            StudentStats.xp.desc(),
            User.id
        )
        if limit:
            query = query.limit(limit)

        board = []
        for rank, (user, stats) in enumerate(query.all(), start=1):
            board.append({
                'rank': rank,
                'student_id': user.id,
                'name': user.name,
                'avatar': user.avatar,
                'class_section': user.class_section,
                'overall_accuracy': stats.overall_accuracy,
                'xp': stats.xp,
                'streak_weeks': stats.streak_weeks,
                'level_title': ScoringService.level_for_xp(stats.xp).title
            })
        return board

    @classmethod
    def rank_of(cls, student_id: int, section: str = ALL_SECTIONS):
        for row in cls.leaderboard(section):
            if row['student_id'] == student_id:
                return row['rank']
        return None
