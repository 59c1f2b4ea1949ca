"""
Competition round management
"""
import logging
from typing import Tuple

from flask import current_app

from scilingo import db
from scilingo.errors import NotFoundError, ValidationError
from scilingo.models.competition_round import CompetitionRound
from scilingo.models.quiz_session import QuizSession, COMPETITION
from scilingo.models.topic import Topic

logger = logging.getLogger(__name__)


class CompetitionService:
    """Open and close per-section competition windows"""

    @staticmethod
    def _sections():
        return list(current_app.config['CLASS_SECTIONS'])

    @classmethod
    def _check(cls, topic_id: int, class_section: str = None):
        if db.session.get(Topic, topic_id) is None:
            raise NotFoundError('Topic not found')
        if class_section is not None and class_section not in cls._sections():
            raise ValidationError(f"Unknown class section: {class_section}")

    @staticmethod
    def get_round(topic_id: int, class_section: str):
        return CompetitionRound.query.filter_by(topic_id=topic_id, class_section=class_section).first()

    @classmethod
    def round_state(cls, topic_id: int, class_section: str) -> Tuple[bool, int]:
        """
        Current round for a topic and section

        Returns:
            Tuple (is_open, round_number); (False, 0) if never opened
        """
        if not class_section:
            return False, 0
        row = cls.get_round(topic_id, class_section)
        if row is None:
            return False, 0
        return row.is_open, row.round_number

    @classmethod
    def open_round(cls, topic_id: int, class_section: str) -> CompetitionRound:
        """Start a new round: increment the round number and open it"""
        cls._check(topic_id, class_section)
        row = cls._open(topic_id, class_section)
        db.session.commit()
        logger.info("[Competition] Opened round %s for topic %s section %s",
                    row.round_number, topic_id, class_section)
        return row

    @classmethod
    def close_round(cls, topic_id: int, class_section: str) -> CompetitionRound:
        """Close the current round without touching its number"""
        cls._check(topic_id, class_section)
        row = cls.get_round(topic_id, class_section)
        if row is None:
            raise NotFoundError('No competition round for this section')
        row.is_open = False
        db.session.commit()
        logger.info("[Competition] Closed round %s for topic %s section %s",
                    row.round_number, topic_id, class_section)
        return row

    @classmethod
    def open_all(cls, topic_id: int) -> list:
        cls._check(topic_id)
        rows = [cls._open(topic_id, section) for section in cls._sections()]
        db.session.commit()
        logger.info("[Competition] Opened all sections for topic %s", topic_id)
        return rows

    @classmethod
    def close_all(cls, topic_id: int) -> int:
        cls._check(topic_id)
        closed = CompetitionRound.query.filter_by(topic_id=topic_id).update({'is_open': False})
        db.session.commit()
        logger.info("[Competition] Closed %s sections for topic %s", closed, topic_id)
        return closed

    @classmethod
    def _open(cls, topic_id: int, class_section: str) -> CompetitionRound:
        row = CompetitionRound.query.filter_by(
            topic_id=topic_id, class_section=class_section
        ).with_for_update().first()
        if row is None:
            row = CompetitionRound(topic_id=topic_id, class_section=class_section, round_number=0)
            db.session.add(row)
        row.round_number = (row.round_number or 0) + 1
        row.is_open = True
        return row

    @staticmethod
    def completed_session(student_id: int, topic_id: int, round_number: int):
        """Completed competition session for (student, topic, round), if any"""
        return QuizSession.query.filter_by(
            student_id=student_id,
            topic_id=topic_id,
            session_type=COMPETITION,
            competition_round=round_number,
            is_complete=True
        ).first()

    @classmethod
    def has_competed(cls, student_id: int, topic_id: int, round_number: int) -> bool:
        return cls.completed_session(student_id, topic_id, round_number) is not None

    @classmethod
    def rounds_for_topic(cls, topic_id: int) -> list:
        """State of every configured section, including never-opened ones"""
        rows = {row.class_section: row for row in CompetitionRound.query.filter_by(topic_id=topic_id).all()}
        result = []
        for section in cls._sections():
            row = rows.get(section)
            result.append({
                'class_section': section,
                'is_open': row.is_open if row else False,
                'round_number': row.round_number if row else 0,
            })
        return result
