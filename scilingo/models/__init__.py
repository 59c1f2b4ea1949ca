"""
Database models
"""
from scilingo.models.user import User
from scilingo.models.student_stats import StudentStats
from scilingo.models.topic import Topic
from scilingo.models.question import Question
from scilingo.models.lesson_card import LessonCard
from scilingo.models.quiz_session import QuizSession
from scilingo.models.answer import Answer
from scilingo.models.badge import Badge
from scilingo.models.competition_round import CompetitionRound
from scilingo.models.power_up_purchase import PowerUpPurchase

__all__ = [
    'User',
    'StudentStats',
    'Topic',
    'Question',
    'LessonCard',
    'QuizSession',
    'Answer',
    'Badge',
    'CompetitionRound',
    'PowerUpPurchase'
]
