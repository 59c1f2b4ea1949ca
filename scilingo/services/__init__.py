"""
Services package
"""
from scilingo.services.scoring_service import ScoringService
from scilingo.services.badge_service import BadgeService
from scilingo.services.competition_service import CompetitionService
from scilingo.services.session_service import SessionService
from scilingo.services.power_up_service import PowerUpService
from scilingo.services.leaderboard_service import LeaderboardService

__all__ = [
    'ScoringService',
    'BadgeService',
    'CompetitionService',
    'SessionService',
    'PowerUpService',
    'LeaderboardService'
]
