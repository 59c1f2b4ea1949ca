"""
Teacher routes
"""
import logging
from flask import jsonify, request
from flask_login import current_user
from sqlalchemy import func
from scilingo.teacher import teacher_bp
from scilingo import db
from scilingo.errors import NotFoundError, PreconditionError, ScilingoError, ValidationError
from scilingo.models.answer import Answer
from scilingo.models.lesson_card import LessonCard
from scilingo.models.question import Question
from scilingo.models.topic import Topic
from scilingo.services.competition_service import CompetitionService
from scilingo.services.leaderboard_service import LeaderboardService
from scilingo.teacher.forms import CompetitionLimitForm, LessonCardForm, QuestionForm, TopicForm
from scilingo.utils import (
    error_response, first_form_error, form_data, int_field, json_body, teacher_required, unexpected_error
)

logger = logging.getLogger(__name__)


def _get_topic(topic_id):
    topic = db.session.get(Topic, topic_id)
    if topic is None:
        raise NotFoundError('Topic not found')
    return topic


def _next_order_index(topic_id):
    current = db.session.query(func.max(Question.order_index)).filter_by(topic_id=topic_id).scalar()
    return 0 if current is None else current + 1


def _question_fields(form):
    return {
        'question_text': form.question_text.data,
        'option_a': form.option_a.data,
        'option_b': form.option_b.data,
        'option_c': form.option_c.data,
        'option_d': form.option_d.data,
        'correct_option': form.correct_option.data,
        'explanation': form.explanation.data or None,
        'hint': form.hint.data or None
    }


def _question_dict(question):
    data = question.to_dict()
    data['correct_option'] = question.correct_option
    data['explanation'] = question.explanation
    return data


def _section_arg(data):
    section = data.get('class_section')
    if not section:
        raise ValidationError('Missing class_section')
    return section


@teacher_bp.route('/dashboard')
@teacher_required
def dashboard():
    """Topics with their question pools and competition rounds"""
    try:
        topic_stats = []
        for topic in Topic.query.order_by(Topic.week_number, Topic.id).all():
            topic_stats.append({
                **topic.to_dict(),
                'question_count': topic.questions.count(),
                'lesson_card_count': topic.lesson_cards.count(),
                'rounds': CompetitionService.rounds_for_topic(topic.id)
            })

        return jsonify({'success': True, 'topics': topic_stats})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('teacher_dashboard')


@teacher_bp.route('/topics', methods=['POST'])
@teacher_required
def create_topic():
    """Create a topic (inactive until the teacher activates it)"""
    try:
        form = TopicForm(formdata=form_data())
        if not form.validate():
            raise ValidationError(first_form_error(form))

        topic = Topic(
            title=form.title.data,
            standard=form.standard.data or None,
            description=form.description.data or None,
            week_number=form.week_number.data,
            created_by=current_user.id,
            is_active=False
        )
        db.session.add(topic)
        db.session.commit()

        logger.info("[Teacher] Topic %s created by %s", topic.id, current_user.id)
        return jsonify({'success': True, 'topic': topic.to_dict()}), 201

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('create_topic')


@teacher_bp.route('/topics/<int:topic_id>')
@teacher_required
def view_topic(topic_id):
    """Topic with questions (including answers), lesson cards and rounds"""
    try:
        topic = _get_topic(topic_id)
        return jsonify({
            'success': True,
            'topic': topic.to_dict(),
            'questions': [_question_dict(q) for q in topic.questions.all()],
            'lesson_cards': [card.to_dict() for card in topic.lesson_cards.all()],
            'rounds': CompetitionService.rounds_for_topic(topic.id)
        })

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('view_topic')


@teacher_bp.route('/topics/<int:topic_id>/activate', methods=['POST'])
@teacher_required
def activate_topic(topic_id):
    """Make this the only active topic"""
    try:
        topic = _get_topic(topic_id)
        Topic.query.filter(Topic.id != topic.id).update({'is_active': False})
        topic.is_active = True
        db.session.commit()

        return jsonify({'success': True, 'topic': topic.to_dict()})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('activate_topic')


@teacher_bp.route('/topics/<int:topic_id>/competition-limit', methods=['POST'])
@teacher_required
def update_competition_limit(topic_id):
    """Set how many questions a competition draws from the pool"""
    try:
        topic = _get_topic(topic_id)
        form = CompetitionLimitForm(formdata=form_data())
        if not form.validate():
            raise ValidationError(first_form_error(form))

        topic.competition_limit = form.limit.data
        db.session.commit()

        return jsonify({'success': True, 'topic': topic.to_dict()})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('update_competition_limit')


@teacher_bp.route('/topics/<int:topic_id>/questions', methods=['POST'])
@teacher_required
def add_question(topic_id):
    """Add one question to a topic's pool"""
    try:
        _get_topic(topic_id)
        form = QuestionForm(formdata=form_data())
        if not form.validate():
            raise ValidationError(first_form_error(form))

        order_index = form.order_index.data
        question = Question(
            topic_id=topic_id,
            order_index=order_index if order_index is not None else _next_order_index(topic_id),
            **_question_fields(form)
        )
        db.session.add(question)
        db.session.commit()

        return jsonify({'success': True, 'question': _question_dict(question)}), 201

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('add_question')


@teacher_bp.route('/topics/<int:topic_id>/questions/bulk', methods=['POST'])
@teacher_required
def bulk_add_questions(topic_id):
    """Import a list of questions; nothing is saved if any row is invalid"""
    try:
        _get_topic(topic_id)
        items = json_body().get('questions')
        if not isinstance(items, list) or not items:
            raise ValidationError('Expected a non-empty list of questions')

        start = _next_order_index(topic_id)
        questions = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise ValidationError(f'Question {index + 1}: expected an object')
            form = QuestionForm(formdata=form_data(item))
            if not form.validate():
                raise ValidationError(f'Question {index + 1}: {first_form_error(form)}')
            questions.append(Question(topic_id=topic_id, order_index=start + index, **_question_fields(form)))

        db.session.add_all(questions)
        db.session.commit()

        logger.info("[Teacher] Imported %s questions into topic %s", len(questions), topic_id)
        return jsonify({
            'success': True,
            'message': f'{len(questions)} questions imported',
            'question_ids': [q.id for q in questions]
        }), 201

    except ScilingoError as e:
        db.session.rollback()
        return error_response(e)
    except Exception:
        return unexpected_error('bulk_add_questions')


@teacher_bp.route('/questions/<int:question_id>/edit', methods=['POST'])
@teacher_required
def edit_question(question_id):
    """Edit a question"""
    try:
        question = db.session.get(Question, question_id)
        if question is None:
            raise NotFoundError('Question not found')

        form = QuestionForm(formdata=form_data())
        if not form.validate():
            raise ValidationError(first_form_error(form))

        for field, value in _question_fields(form).items():
            setattr(question, field, value)
        if form.order_index.data is not None:
            question.order_index = form.order_index.data
        db.session.commit()

        return jsonify({'success': True, 'question': _question_dict(question)})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('edit_question')


@teacher_bp.route('/questions/<int:question_id>/delete', methods=['POST'])
@teacher_required
def delete_question(question_id):
    """Delete a question from the pool"""
    try:
        question = db.session.get(Question, question_id)
        if question is None:
            raise NotFoundError('Question not found')

        if Answer.query.filter_by(question_id=question.id).first() is not None:
            raise PreconditionError('Question already has answers and cannot be deleted')

        db.session.delete(question)
        db.session.commit()

        return jsonify({'success': True, 'message': 'Question deleted'})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('delete_question')


@teacher_bp.route('/topics/<int:topic_id>/lesson-cards', methods=['POST'])
@teacher_required
def add_lesson_card(topic_id):
    try:
        _get_topic(topic_id)
        form = LessonCardForm(formdata=form_data())
        if not form.validate():
            raise ValidationError(first_form_error(form))

        card = LessonCard(
            topic_id=topic_id,
            title=form.title.data,
            body=form.body.data,
            order_index=form.order_index.data or 0
        )
        db.session.add(card)
        db.session.commit()

        return jsonify({'success': True, 'lesson_card': card.to_dict()}), 201

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('add_lesson_card')


@teacher_bp.route('/lesson-cards/<int:card_id>/delete', methods=['POST'])
@teacher_required
def delete_lesson_card(card_id):
    try:
        card = db.session.get(LessonCard, card_id)
        if card is None:
            raise NotFoundError('Lesson card not found')

        db.session.delete(card)
        db.session.commit()

        return jsonify({'success': True})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('delete_lesson_card')


@teacher_bp.route('/topics/<int:topic_id>/competition/open', methods=['POST'])
@teacher_required
def open_competition(topic_id):
    """Open a new competition round for one class section"""
    try:
        row = CompetitionService.open_round(topic_id, _section_arg(json_body()))
        return jsonify({'success': True, 'round': row.to_dict()})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('open_competition')


@teacher_bp.route('/topics/<int:topic_id>/competition/close', methods=['POST'])
@teacher_required
def close_competition(topic_id):
    """Close the current round for one class section"""
    try:
        row = CompetitionService.close_round(topic_id, _section_arg(json_body()))
        return jsonify({'success': True, 'round': row.to_dict()})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('close_competition')


@teacher_bp.route('/topics/<int:topic_id>/competition/open-all', methods=['POST'])
@teacher_required
def open_all_competitions(topic_id):
    try:
        rows = CompetitionService.open_all(topic_id)
        return jsonify({'success': True, 'rounds': [row.to_dict() for row in rows]})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('open_all_competitions')


@teacher_bp.route('/topics/<int:topic_id>/competition/close-all', methods=['POST'])
@teacher_required
def close_all_competitions(topic_id):
    try:
        closed = CompetitionService.close_all(topic_id)
        return jsonify({'success': True, 'closed': closed})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('close_all_competitions')


@teacher_bp.route('/leaderboard')
@teacher_required
def leaderboard():
    """Ranking for one section, or the whole grade with section=all"""
    try:
        section = request.args.get('section', 'all')
        limit = int_field(request.args, 'limit', required=False)
        return jsonify({
            'success': True,
            'section': section,
            'leaderboard': LeaderboardService.leaderboard(section, limit=limit)
        })

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('teacher_leaderboard')
