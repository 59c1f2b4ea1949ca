"""
Quiz session lifecycle: start, answer, complete
"""
import logging
import random
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from scilingo import db
from scilingo.errors import (
    NotFoundError, PersistenceError, PreconditionError, ScilingoError, ValidationError
)
from scilingo.models.answer import Answer
from scilingo.models.question import Question, OPTIONS
from scilingo.models.quiz_session import QuizSession, COMPETITION, PRACTICE, SESSION_MODES
from scilingo.models.student_stats import StudentStats
from scilingo.models.topic import Topic
from scilingo.services.badge_service import BadgeService
from scilingo.services.competition_service import CompetitionService
from scilingo.services.scoring_service import ScoringService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatsSnapshot:
    """Aggregate stats as read before a completion is applied"""
    xp: int
    level: int
    streak_weeks: int
    last_session_date: Optional[date]
    overall_accuracy: int
    total_sessions: int

    @classmethod
    def from_row(cls, row: StudentStats) -> 'StatsSnapshot':
        return cls(
            xp=row.xp or 0,
            level=row.level or 1,
            streak_weeks=row.streak_weeks or 0,
            last_session_date=row.last_session_date,
            overall_accuracy=row.overall_accuracy or 0,
            total_sessions=row.total_sessions or 0,
        )


def pick_questions(questions: list, count: int, rng=random) -> list:
    """Draw up to count questions in random order without replacement"""
    return rng.sample(list(questions), min(count, len(questions)))


class SessionService:
    """Service for quiz sessions and their completion"""

    @staticmethod
    def get_owned_session(student_id: int, session_id: int, lock: bool = False) -> QuizSession:
        query = QuizSession.query.filter_by(id=session_id)
        if lock:
            query = query.with_for_update()
        session = query.first()
        if session is None or session.student_id != student_id:
            raise NotFoundError('Session not found')
        return session

    @staticmethod
    def get_or_create_stats(student_id: int, lock: bool = False) -> StudentStats:
        query = StudentStats.query.filter_by(user_id=student_id)
        if lock:
            query = query.with_for_update()
        stats = query.first()
        if stats is None:
            stats = StudentStats(
                user_id=student_id, xp=0, xp_spent=0, level=1,
                streak_weeks=0, overall_accuracy=0, total_sessions=0
            )
            db.session.add(stats)
        return stats

    # ------------------------------------------------------------------ start

    @classmethod
    def start_session(cls, student, topic_id: int, mode: str) -> dict:
        """
        Resume the student's in-progress session for a topic or create one

        Args:
            student: Authenticated student (User)
            topic_id: Topic to quiz on
            mode: 'practice' or 'competition'

        Returns:
            Session payload for the quiz client
        """
        if mode not in SESSION_MODES:
            raise ValidationError(f"Unknown mode: {mode}")

        topic = db.session.get(Topic, topic_id)
        if topic is None:
            raise NotFoundError('Topic not found')

        questions = topic.questions.all()
        if not questions:
            raise PreconditionError('This topic has no questions yet')

        round_number = None
        if mode == COMPETITION:
            is_open, round_number = CompetitionService.round_state(topic_id, student.class_section)
            if not is_open:
                raise PreconditionError('Competition round is not open')
            if CompetitionService.has_competed(student.id, topic_id, round_number):
                raise PreconditionError('Competition already completed for this round')

        query = QuizSession.query.filter_by(
            student_id=student.id,
            topic_id=topic_id,
            session_type=mode,
            is_complete=False
        )
        if mode == COMPETITION:
            query = query.filter_by(competition_round=round_number)
        session = query.order_by(QuizSession.started_at.desc()).first()

        by_id = {question.id: question for question in questions}
        resumed = session is not None

        if resumed:
            # Restore the exact order saved when the session was created
            ordered = [by_id[qid] for qid in session.question_ids or [] if qid in by_id]
        else:
            if mode == PRACTICE:
                count = current_app.config['PRACTICE_QUESTION_COUNT']
            else:
                count = topic.competition_limit or len(questions)
            ordered = pick_questions(questions, count)

            session = QuizSession(
                student_id=student.id,
                topic_id=topic_id,
                session_type=mode,
                question_ids=[question.id for question in ordered],
                competition_round=round_number,
                power_ups=[],
                is_complete=False,
                correct_answers=0,
                total_attempts=0
            )
            db.session.add(session)
            try:
                db.session.commit()
            except IntegrityError as e:
                db.session.rollback()
                logger.warning("[SessionService] Duplicate competition session for student %s topic %s round %s",
                               student.id, topic_id, round_number)
                raise PreconditionError('Competition already started for this round') from e
            logger.info("[SessionService] Started %s session %s for student %s on topic %s",
                        mode, session.id, student.id, topic_id)

        return cls.session_payload(session, ordered)

    @classmethod
    def session_payload(cls, session: QuizSession, ordered: List[Question] = None) -> dict:
        if ordered is None:
            by_id = {q.id: q for q in Question.query.filter(Question.id.in_(session.question_ids or [])).all()}
            ordered = [by_id[qid] for qid in session.question_ids or [] if qid in by_id]

        # Practice always shows hints; competition only with the hint power-up
        show_hints = not session.is_competition or session.has_power_up('hint')
        answered = [answer.question_id for answer in session.answers]
        stats = StudentStats.query.filter_by(user_id=session.student_id).first()

        payload = {
            'session': session.to_dict(),
            'questions': [question.to_dict(include_hint=show_hints) for question in ordered],
            'answered_question_ids': answered,
            'lesson_cards': [card.to_dict() for card in session.topic.lesson_cards.all()],
            'available_xp': stats.available_xp if stats else 0,
        }
        if session.is_competition:
            payload['seconds_per_question'] = current_app.config['COMPETITION_SECONDS_PER_QUESTION']
        return payload

    # ----------------------------------------------------------------- answer

    @classmethod
    def record_answer(cls, student_id: int, session_id: int, question_id: int,
                      selected_option: Optional[str]) -> dict:
        """
        Record one answer; a None option is a timed-out (incorrect) answer

        Returns:
            Dict with correctness, the correct option and the explanation
        """
        session = cls.get_owned_session(student_id, session_id, lock=True)
        if session.is_complete:
            raise PreconditionError('Session already completed')
        if question_id not in (session.question_ids or []):
            raise ValidationError('Question is not part of this session')

        if selected_option is not None:
            selected_option = str(selected_option).strip().lower()
            if selected_option not in OPTIONS:
                raise ValidationError(f"Invalid option: {selected_option}")

        if session.answers.filter_by(question_id=question_id).first() is not None:
            raise PreconditionError('Question already answered')

        question = db.session.get(Question, question_id)
        if question is None:
            raise NotFoundError('Question not found')

        is_correct = selected_option is not None and selected_option == question.correct_option
        db.session.add(Answer(
            session_id=session.id,
            question_id=question_id,
            selected_option=selected_option,
            is_correct=is_correct,
            attempt_number=1
        ))
        session.total_attempts = (session.total_attempts or 0) + 1
        if is_correct:
            session.correct_answers = (session.correct_answers or 0) + 1

        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise PreconditionError('Question already answered') from e

        return {
            'is_correct': is_correct,
            'correct_option': question.correct_option,
            'explanation': question.explanation,
            'timed_out': selected_option is None,
            'answered': session.total_attempts,
            'remaining': len(session.question_ids or []) - session.total_attempts
        }

    # --------------------------------------------------------------- complete

    @classmethod
    def complete_session(cls, student_id: int, session_id: int, correct_answers: int = None,
                         total_attempts: int = None, today: date = None) -> dict:
        """
        Complete a session and apply XP, streak, accuracy and badges

        Session, aggregate stats and badges are written in one transaction;
        the session row is locked and a completed session is rejected, so
        a retried request never applies its effects twice.

        Args:
            student_id: Authenticated student
            session_id: Session to complete
            correct_answers: Correct answers (defaults to the recorded tally)
            total_attempts: Answers given (defaults to the recorded tally)
            today: Completion date (defaults to today)

        Returns:
            Dict with xp_earned, accuracy, new_streak, level and new_badges
        """
        today = today or date.today()
        try:
            session = cls.get_owned_session(student_id, session_id, lock=True)
            if session.is_complete:
                raise PreconditionError('Session already completed')
            if session.session_type not in SESSION_MODES:
                raise ValidationError(f"Session has no valid mode: {session.session_type}")

            if correct_answers is None or total_attempts is None:
                correct_answers = session.correct_answers or 0
                total_attempts = session.total_attempts or 0
            cls._validate_counts(correct_answers, total_attempts)

            accuracy = ScoringService.accuracy_for(correct_answers, total_attempts)
            stats = cls.get_or_create_stats(student_id, lock=True)
            before = StatsSnapshot.from_row(stats)

            if session.session_type == PRACTICE:
                result = cls._apply_practice(session, stats, before, accuracy)
            else:
                result = cls._apply_competition(session, stats, before, accuracy, today)

            session.correct_answers = correct_answers
            session.total_attempts = total_attempts
            session.accuracy_score = accuracy
            session.is_complete = True
            session.completed_at = datetime.utcnow()

            if session.is_competition:
                db.session.flush()
                result['new_badges'] = cls._award_badges(student_id, accuracy, stats)

            db.session.commit()
        except ScilingoError:
            db.session.rollback()
            raise
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("[SessionService] Failed to complete session %s for student %s",
                         session_id, student_id, exc_info=True)
            raise PersistenceError() from e

        logger.info("[SessionService] Completed %s session %s: accuracy=%s xp=%s streak=%s",
                    session.session_type, session.id, accuracy, result['xp_earned'], result['new_streak'])
        return result

    @staticmethod
    def _validate_counts(correct_answers, total_attempts):
        for value in (correct_answers, total_attempts):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValidationError('Answer counts must be non-negative integers')
        if correct_answers > total_attempts:
            raise ValidationError('Correct answers cannot exceed total attempts')

    @staticmethod
    def _apply_practice(session, stats, before: StatsSnapshot, accuracy: int) -> dict:
        # Practice touches XP and level only
        xp_earned = ScoringService.compute_xp(accuracy, PRACTICE)
        stats.xp = before.xp + xp_earned
        stats.level = ScoringService.level_for_xp(stats.xp).level
        session.xp_earned = xp_earned

        return {
            'xp_earned': xp_earned,
            'accuracy': accuracy,
            'new_streak': before.streak_weeks,
            'level': stats.level,
            'level_up': stats.level > before.level,
            'new_badges': []
        }

    @staticmethod
    def _apply_competition(session, stats, before: StatsSnapshot, accuracy: int, today: date) -> dict:
        new_streak = ScoringService.evaluate_streak(
            before.last_session_date,
            today,
            before.streak_weeks,
            has_shield=session.has_power_up('streak_shield')
        )
        xp_earned = ScoringService.compute_xp(accuracy, COMPETITION, new_streak)
        new_accuracy = ScoringService.update_overall_accuracy(
            before.overall_accuracy, before.total_sessions, accuracy
        )

        stats.xp = before.xp + xp_earned
        stats.level = ScoringService.level_for_xp(stats.xp).level
        stats.streak_weeks = new_streak
        stats.last_session_date = today
        stats.overall_accuracy = new_accuracy
        stats.total_sessions = before.total_sessions + 1
        session.xp_earned = xp_earned

        return {
            'xp_earned': xp_earned,
            'accuracy': accuracy,
            'new_streak': new_streak,
            'overall_accuracy': new_accuracy,
            'level': stats.level,
            'level_up': stats.level > before.level,
        }

    @staticmethod
    def _award_badges(student_id: int, accuracy: int, stats: StudentStats) -> List[str]:
        new_badges = BadgeService.evaluate_badges(
            BadgeService.existing_badge_types(student_id),
            accuracy,
            stats.streak_weeks,
            stats.total_sessions,
            BadgeService.recent_competition_accuracies(student_id)
        )
        BadgeService.award_badges(student_id, new_badges)
        return new_badges

    # ---------------------------------------------------------------- summary

    @classmethod
    def session_summary(cls, student_id: int, session_id: int) -> dict:
        session = cls.get_owned_session(student_id, session_id)
        stats = StudentStats.query.filter_by(user_id=student_id).first()
        xp = stats.xp if stats else 0

        answers = session.answers.order_by(Answer.id).all()
        return {
            'session': session.to_dict(),
            'topic': session.topic.to_dict(),
            'answers': [{
                'question_id': answer.question_id,
                'selected_option': answer.selected_option,
                'is_correct': answer.is_correct,
            } for answer in answers],
            'level': ScoringService.level_progress(xp),
        }
