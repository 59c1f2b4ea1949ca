"""
Student routes
"""
import logging
from flask import jsonify, request
from flask_login import current_user
from scilingo.student import student_bp
from scilingo.errors import LessonFormatError, ScilingoError
from scilingo.models.quiz_session import QuizSession, COMPETITION
from scilingo.models.student_stats import StudentStats
from scilingo.models.topic import Topic
from scilingo.services.badge_service import BadgeService
from scilingo.services.competition_service import CompetitionService
from scilingo.services.leaderboard_service import LeaderboardService
from scilingo.services.power_up_service import PowerUpService
from scilingo.services.scoring_service import ScoringService
from scilingo.services.session_service import SessionService
from scilingo.services.tutor_service import TutorService
from scilingo.utils import (
    error_response, int_field, json_body, student_required, unexpected_error
)

logger = logging.getLogger(__name__)


def _stats_payload(student_id):
    stats = StudentStats.query.filter_by(user_id=student_id).first()
    if not stats:
        return {
            'xp': 0,
            'available_xp': 0,
            'streak_weeks': 0,
            'overall_accuracy': 0,
            'total_sessions': 0,
            'last_session_date': None,
            'level': ScoringService.level_progress(0)
        }

    return {
        'xp': stats.xp,
        'available_xp': stats.available_xp,
        'streak_weeks': stats.streak_weeks,
        'overall_accuracy': stats.overall_accuracy,
        'total_sessions': stats.total_sessions,
        'last_session_date': stats.last_session_date.isoformat() if stats.last_session_date else None,
        'level': ScoringService.level_progress(stats.xp)
    }


@student_bp.route('/dashboard')
@student_required
def dashboard():
    """Stats, active topics and competition state for the student's section"""
    try:
        topics = []
        for topic in Topic.query.filter_by(is_active=True).order_by(Topic.week_number, Topic.id).all():
            is_open, round_number = CompetitionService.round_state(topic.id, current_user.class_section)
            topics.append({
                **topic.to_dict(),
                'question_count': topic.questions.count(),
                'competition_open': is_open,
                'competition_round': round_number,
                'competed_this_round': is_open and CompetitionService.has_competed(
                    current_user.id, topic.id, round_number
                )
            })

        return jsonify({
            'success': True,
            'stats': _stats_payload(current_user.id),
            'topics': topics,
            'badge_count': len(BadgeService.existing_badge_types(current_user.id)),
            'rank': LeaderboardService.rank_of(current_user.id, current_user.class_section)
        })

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('dashboard')


@student_bp.route('/profile')
@student_required
def profile():
    """Level progress, badges and recent sessions"""
    try:
        recent_sessions = QuizSession.query.filter_by(
            student_id=current_user.id, is_complete=True
        ).order_by(QuizSession.completed_at.desc()).limit(10).all()

        return jsonify({
            'success': True,
            'user': {
                'id': current_user.id,
                'name': current_user.name,
                'avatar': current_user.avatar,
                'class_section': current_user.class_section
            },
            'stats': _stats_payload(current_user.id),
            'badges': BadgeService.badges_for(current_user.id),
            'recent_sessions': [s.to_dict() for s in recent_sessions]
        })

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('profile')


@student_bp.route('/topics/<int:topic_id>/sessions', methods=['POST'])
@student_required
def start_session(topic_id):
    """Start or resume a practice or competition session"""
    try:
        data = json_body()
        mode = data.get('mode', COMPETITION)
        payload = SessionService.start_session(current_user, topic_id, mode)
        return jsonify({'success': True, **payload})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('start_session')


@student_bp.route('/sessions/<int:session_id>')
@student_required
def session_summary(session_id):
    """Results of one session"""
    try:
        summary = SessionService.session_summary(current_user.id, session_id)
        return jsonify({'success': True, **summary})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('session_summary')


@student_bp.route('/sessions/<int:session_id>/answers', methods=['POST'])
@student_required
def record_answer(session_id):
    """Record one answer; a missing option means the timer ran out"""
    try:
        data = json_body()
        result = SessionService.record_answer(
            current_user.id,
            session_id,
            int_field(data, 'question_id'),
            data.get('selected_option')
        )
        return jsonify({'success': True, **result})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('record_answer')


@student_bp.route('/sessions/<int:session_id>/complete', methods=['POST'])
@student_required
def complete_session(session_id):
    """Complete a session and apply XP, streak, accuracy and badges"""
    try:
        data = json_body()
        result = SessionService.complete_session(
            current_user.id,
            session_id,
            correct_answers=int_field(data, 'correct_answers', required=False),
            total_attempts=int_field(data, 'total_attempts', required=False)
        )
        return jsonify({'success': True, **result})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('complete_session')


@student_bp.route('/sessions/<int:session_id>/power-ups', methods=['POST'])
@student_required
def purchase_power_ups(session_id):
    """Buy power-ups with XP before a competition starts"""
    try:
        data = json_body()
        power_ups = data.get('power_ups', [])
        if isinstance(power_ups, str):
            power_ups = [power_ups]

        result = PowerUpService.purchase(current_user.id, session_id, power_ups)
        return jsonify({'success': True, **result})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('purchase_power_ups')


@student_bp.route('/power-ups')
@student_required
def power_up_prices():
    return jsonify({'success': True, 'costs': PowerUpService.costs()})


@student_bp.route('/sessions/<int:session_id>/fifty-fifty', methods=['POST'])
@student_required
def use_fifty_fifty(session_id):
    """Remove two wrong options from one question"""
    try:
        data = json_body()
        result = PowerUpService.use_fifty_fifty(current_user.id, session_id, int_field(data, 'question_id'))
        return jsonify({'success': True, **result})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('use_fifty_fifty')


@student_bp.route('/lesson', methods=['POST'])
@student_required
def lesson():
    """AI mini-lesson shown before the quiz"""
    try:
        data = json_body()
        lesson_content = TutorService.lesson(int_field(data, 'topic_id'))
        return jsonify({'success': True, 'lesson': lesson_content})

    except LessonFormatError as e:
        # The quiz must never be blocked by a broken lesson
        logger.warning("[Lesson] Unusable lesson for student %s: %s", current_user.id, e.message)
        return jsonify({'success': False, 'message': e.public_message, 'skip_to_quiz': True}), e.status_code
    except ScilingoError as e:
        if e.status_code < 500:
            return error_response(e)
        logger.error("[Lesson] Completion API unavailable: %s", e.message)
        return jsonify({'success': False, 'message': e.public_message, 'skip_to_quiz': True}), e.status_code
    except Exception:
        return unexpected_error('lesson')


@student_bp.route('/chat', methods=['POST'])
@student_required
def chat():
    """Ask the topic tutor a question"""
    try:
        data = json_body()
        reply = TutorService.chat(
            int_field(data, 'topic_id'),
            data.get('message'),
            data.get('history')
        )
        return jsonify({'success': True, 'reply': reply})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('chat')


@student_bp.route('/leaderboard')
@student_required
def leaderboard():
    """Ranking for the student's own class section"""
    try:
        section = current_user.class_section or request.args.get('section', 'all')
        return jsonify({
            'success': True,
            'section': section,
            'leaderboard': LeaderboardService.leaderboard(section)
        })

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('leaderboard')
