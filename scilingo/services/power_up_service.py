"""
Power-up purchases paid with XP
"""
import logging
import random
from typing import Iterable

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from scilingo import db
from scilingo.errors import NotFoundError, PersistenceError, PreconditionError, ScilingoError, ValidationError
from scilingo.models.power_up_purchase import PowerUpPurchase
from scilingo.models.question import Question, OPTIONS
from scilingo.services.session_service import SessionService

logger = logging.getLogger(__name__)


class PowerUpService:
    """Service for buying and using competition power-ups"""

    @staticmethod
    def costs() -> dict:
        return dict(current_app.config['POWER_UP_COSTS'])

    @classmethod
    def purchase(cls, student_id: int, session_id: int, power_ups: Iterable[str]) -> dict:
        """
        Buy power-ups for a competition session before it starts

        Args:
            student_id: Student user ID
            session_id: Competition session the power-ups apply to
            power_ups: Power-up types to buy

        Returns:
            Dict with the session's power-ups and remaining XP
        """
        costs = cls.costs()
        requested = list(dict.fromkeys(power_ups or []))
        if not requested:
            raise ValidationError('No power-ups selected')

        unknown = [name for name in requested if name not in costs]
        if unknown:
            raise ValidationError(f"Unknown power-up: {', '.join(unknown)}")

        try:
            session = SessionService.get_owned_session(student_id, session_id, lock=True)
            if not session.is_competition:
                raise PreconditionError('Power-ups are only available in competition mode')
            if session.is_complete:
                raise PreconditionError('Session already completed')
            if session.answers.first() is not None:
                raise PreconditionError('Power-ups must be bought before the first question')

            owned = set(session.power_ups or [])
            duplicates = [name for name in requested if name in owned]
            if duplicates:
                raise PreconditionError(f"Already bought for this session: {', '.join(duplicates)}")

            total_cost = sum(costs[name] for name in requested)
            stats = SessionService.get_or_create_stats(student_id, lock=True)
            if not stats.spend_xp(total_cost):
                raise PreconditionError(
                    f"Not enough XP. You need {total_cost} XP, you have {stats.available_xp}"
                )

            # Reassign so the JSON column is flagged dirty
            session.power_ups = list(session.power_ups or []) + requested
            for name in requested:
                db.session.add(PowerUpPurchase(
                    student_id=student_id,
                    session_id=session.id,
                    power_up=name,
                    xp_paid=costs[name]
                ))
            db.session.commit()
        except ScilingoError:
            db.session.rollback()
            raise
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("[PowerUpService] Purchase failed for session %s", session_id, exc_info=True)
            raise PersistenceError() from e

        logger.info("[PowerUpService] Student %s bought %s for session %s (%s XP)",
                    student_id, ', '.join(requested), session_id, total_cost)
        return {
            'power_ups': list(session.power_ups),
            'xp_spent': total_cost,
            'available_xp': stats.available_xp,
            'session': SessionService.session_payload(session)
        }

    @classmethod
    def use_fifty_fifty(cls, student_id: int, session_id: int, question_id: int, rng=random) -> dict:
        """
        Spend the session's 50/50 on one question

        Returns:
            Dict with the two wrong options to hide
        """
        session = SessionService.get_owned_session(student_id, session_id)
        if not session.has_power_up('fifty_fifty'):
            raise PreconditionError('50/50 was not bought for this session')
        if session.fifty_fifty_question_id is not None:
            raise PreconditionError('50/50 already used in this session')
        if session.is_complete:
            raise PreconditionError('Session already completed')
        if question_id not in (session.question_ids or []):
            raise ValidationError('Question is not part of this session')
        if session.answers.filter_by(question_id=question_id).first() is not None:
            raise PreconditionError('Question already answered')

        question = db.session.get(Question, question_id)
        if question is None:
            raise NotFoundError('Question not found')
        wrong = [option for option in OPTIONS if option != question.correct_option]
        eliminated = sorted(rng.sample(wrong, 2))

        session.fifty_fifty_question_id = question_id
        db.session.commit()
        return {'question_id': question_id, 'eliminated_options': eliminated}
