import random
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from scilingo import db
from scilingo.errors import NotFoundError, PersistenceError, PreconditionError, ValidationError
from scilingo.models.badge import Badge
from scilingo.models.quiz_session import QuizSession
from scilingo.models.student_stats import StudentStats
from scilingo.models.user import User
from scilingo.services.competition_service import CompetitionService
from scilingo.services.session_service import SessionService, pick_questions


def _start(student_id, topic_id, mode='competition'):
    return SessionService.start_session(db.session.get(User, student_id), topic_id, mode)


def _answer(student_id, payload, correct):
    """Answer the first `correct` questions right and the rest wrong"""
    for index, question in enumerate(payload['questions']):
        option = 'a' if index < correct else 'b'
        SessionService.record_answer(student_id, payload['session']['id'], question['id'], option)


def _stats(student_id):
    return StudentStats.query.filter_by(user_id=student_id).one()


def test_pick_questions_draws_without_replacement():
    pool = list(range(20))
    picked = pick_questions(pool, 10, rng=random.Random(7))
    assert len(picked) == 10
    assert len(set(picked)) == 10
    assert set(picked) <= set(pool)

    assert sorted(pick_questions(pool[:4], 10)) == pool[:4]


def test_first_competition_session(ctx, make_student, make_topic):
    student_id = make_student()
    topic_id = make_topic(question_count=10)
    CompetitionService.open_round(topic_id, '8A')

    payload = _start(student_id, topic_id)
    assert len(payload['questions']) == 10
    assert payload['seconds_per_question'] == 15
    assert 'hint' not in payload['questions'][0]
    assert 'correct_option' not in payload['questions'][0]

    _answer(student_id, payload, correct=9)
    result = SessionService.complete_session(student_id, payload['session']['id'], today=date(2026, 3, 2))

    assert result['accuracy'] == 90
    assert result['xp_earned'] == 150
    assert result['new_streak'] == 1
    assert result['new_badges'] == ['first_session']
    assert result['level'] == 1
    assert result['level_up'] is False

    stats = _stats(student_id)
    assert stats.xp == 150
    assert stats.streak_weeks == 1
    assert stats.total_sessions == 1
    assert stats.overall_accuracy == 90
    assert stats.last_session_date == date(2026, 3, 2)

    session = db.session.get(QuizSession, payload['session']['id'])
    assert session.is_complete is True
    assert session.accuracy_score == 90
    assert session.xp_earned == 150


def test_practice_changes_xp_and_level_only(ctx, make_student, make_topic):
    student_id = make_student(xp=480, level=1, streak_weeks=2, overall_accuracy=70,
                              total_sessions=4, last_session_date=date(2026, 3, 1))
    topic_id = make_topic(question_count=12)

    payload = _start(student_id, topic_id, 'practice')
    assert len(payload['questions']) == 10
    assert payload['questions'][0]['hint']
    assert 'seconds_per_question' not in payload

    _answer(student_id, payload, correct=10)
    result = SessionService.complete_session(student_id, payload['session']['id'], today=date(2026, 3, 30))

    assert result['xp_earned'] == 125
    assert result['level'] == 2
    assert result['level_up'] is True
    assert result['new_streak'] == 2
    assert result['new_badges'] == []

    stats = _stats(student_id)
    assert stats.xp == 605
    assert stats.streak_weeks == 2
    assert stats.overall_accuracy == 70
    assert stats.total_sessions == 4
    assert stats.last_session_date == date(2026, 3, 1)
    assert Badge.query.filter_by(student_id=student_id).count() == 0


def test_completing_twice_is_rejected(ctx, make_student, make_topic):
    student_id = make_student()
    topic_id = make_topic()
    CompetitionService.open_round(topic_id, '8A')
    payload = _start(student_id, topic_id)
    _answer(student_id, payload, correct=5)

    first = SessionService.complete_session(student_id, payload['session']['id'], today=date(2026, 3, 2))
    with pytest.raises(PreconditionError, match='already completed'):
        SessionService.complete_session(student_id, payload['session']['id'], today=date(2026, 3, 2))

    stats = _stats(student_id)
    assert stats.xp == first['xp_earned']
    assert stats.total_sessions == 1
    assert Badge.query.filter_by(student_id=student_id).count() == len(first['new_badges'])


def test_explicit_counts_override_recorded_answers(ctx, make_student, make_topic):
    student_id = make_student()
    topic_id = make_topic()
    payload = _start(student_id, topic_id, 'practice')

    result = SessionService.complete_session(student_id, payload['session']['id'],
                                             correct_answers=8, total_attempts=10)
    assert result['accuracy'] == 80
    assert result['xp_earned'] == 75


def test_invalid_counts_leave_session_open(ctx, make_student, make_topic):
    student_id = make_student()
    topic_id = make_topic()
    payload = _start(student_id, topic_id, 'practice')

    with pytest.raises(ValidationError):
        SessionService.complete_session(student_id, payload['session']['id'],
                                        correct_answers=6, total_attempts=5)
    with pytest.raises(ValidationError):
        SessionService.complete_session(student_id, payload['session']['id'],
                                        correct_answers=-1, total_attempts=5)

    assert db.session.get(QuizSession, payload['session']['id']).is_complete is False


def test_empty_session_scores_zero(ctx, make_student, make_topic):
    student_id = make_student()
    topic_id = make_topic()
    payload = _start(student_id, topic_id, 'practice')

    result = SessionService.complete_session(student_id, payload['session']['id'])
    assert result['accuracy'] == 0
    assert result['xp_earned'] == 50


def test_session_without_valid_mode_fails_fast(ctx, make_student, make_topic):
    student_id = make_student()
    topic_id = make_topic()
    session = QuizSession(student_id=student_id, topic_id=topic_id, session_type='homework',
                          question_ids=[], power_ups=[])
    db.session.add(session)
    db.session.commit()

    with pytest.raises(ValidationError):
        SessionService.complete_session(student_id, session.id)
    assert _stats(student_id).xp == 0


def test_storage_failure_rolls_back_completion(ctx, make_student, make_topic, monkeypatch):
    student_id = make_student()
    topic_id = make_topic()
    CompetitionService.open_round(topic_id, '8A')
    payload = _start(student_id, topic_id)
    _answer(student_id, payload, correct=5)

    def failing_commit(self):
        raise OperationalError('COMMIT', {}, Exception('disk I/O error'))

    monkeypatch.setattr(Session, 'commit', failing_commit)
    with pytest.raises(PersistenceError):
        SessionService.complete_session(student_id, payload['session']['id'], today=date(2026, 3, 2))
    monkeypatch.undo()

    assert db.session.get(QuizSession, payload['session']['id']).is_complete is False
    stats = _stats(student_id)
    assert stats.xp == 0
    assert stats.total_sessions == 0
    assert Badge.query.filter_by(student_id=student_id).count() == 0


def test_streak_badges_over_three_weeks(ctx, make_student, make_topic):
    student_id = make_student()
    topic_id = make_topic(question_count=10)

    results = []
    for today in (date(2026, 3, 2), date(2026, 3, 9), date(2026, 3, 16)):
        CompetitionService.open_round(topic_id, '8A')
        payload = _start(student_id, topic_id)
        _answer(student_id, payload, correct=9)
        results.append(SessionService.complete_session(student_id, payload['session']['id'], today=today))

    assert [r['new_streak'] for r in results] == [1, 2, 3]
    assert [r['xp_earned'] for r in results] == [150, 175, 175]
    assert results[0]['new_badges'] == ['first_session']
    assert results[1]['new_badges'] == []
    assert results[2]['new_badges'] == ['on_fire', 'science_brain']
    assert results[2]['level'] == 2
    assert results[2]['level_up'] is True
    assert _stats(student_id).overall_accuracy == 90


def test_competition_requires_open_round(ctx, make_student, make_topic):
    student_id = make_student()
    topic_id = make_topic()

    with pytest.raises(PreconditionError, match='not open'):
        _start(student_id, topic_id)

    CompetitionService.open_round(topic_id, '8B')
    with pytest.raises(PreconditionError, match='not open'):
        _start(student_id, topic_id)


def test_one_competition_per_round(ctx, make_student, make_topic):
    student_id = make_student()
    topic_id = make_topic()
    CompetitionService.open_round(topic_id, '8A')

    payload = _start(student_id, topic_id)
    assert payload['session']['competition_round'] == 1
    SessionService.complete_session(student_id, payload['session']['id'], today=date(2026, 3, 2))

    with pytest.raises(PreconditionError, match='already completed'):
        _start(student_id, topic_id)

    CompetitionService.open_round(topic_id, '8A')
    again = _start(student_id, topic_id)
    assert again['session']['competition_round'] == 2
    assert again['session']['id'] != payload['session']['id']


def test_practice_is_not_gated_by_rounds(ctx, make_student, make_topic):
    student_id = make_student()
    topic_id = make_topic()

    first = _start(student_id, topic_id, 'practice')
    SessionService.complete_session(student_id, first['session']['id'])
    second = _start(student_id, topic_id, 'practice')
    assert second['session']['id'] != first['session']['id']


def test_start_resumes_in_progress_session(ctx, make_student, make_topic):
    student_id = make_student()
    topic_id = make_topic(question_count=12)

    first = _start(student_id, topic_id, 'practice')
    SessionService.record_answer(student_id, first['session']['id'], first['questions'][0]['id'], 'a')
    resumed = _start(student_id, topic_id, 'practice')

    assert resumed['session']['id'] == first['session']['id']
    assert [q['id'] for q in resumed['questions']] == [q['id'] for q in first['questions']]
    assert resumed['answered_question_ids'] == [first['questions'][0]['id']]


def test_competition_limit_caps_question_count(ctx, make_student, make_topic):
    student_id = make_student()
    topic_id = make_topic(question_count=8, competition_limit=3)
    CompetitionService.open_round(topic_id, '8A')

    payload = _start(student_id, topic_id)
    assert len(payload['questions']) == 3


def test_start_validation(ctx, make_student, make_topic):
    student_id = make_student()
    empty_topic = make_topic(question_count=0)

    with pytest.raises(ValidationError):
        _start(student_id, empty_topic, 'homework')
    with pytest.raises(NotFoundError):
        _start(student_id, 9999, 'practice')
    with pytest.raises(PreconditionError):
        _start(student_id, empty_topic, 'practice')


def test_record_answer_rules(ctx, make_student, make_topic):
    student_id = make_student()
    other_id = make_student('s2002', 'Leo')
    topic_id = make_topic(question_count=3)
    payload = _start(student_id, topic_id, 'practice')
    session_id = payload['session']['id']
    first, second, third = [q['id'] for q in payload['questions']]

    result = SessionService.record_answer(student_id, session_id, first, 'A')
    assert result['is_correct'] is True
    assert result['correct_option'] == 'a'
    assert result['remaining'] == 2

    timed_out = SessionService.record_answer(student_id, session_id, second, None)
    assert timed_out['is_correct'] is False
    assert timed_out['timed_out'] is True

    with pytest.raises(PreconditionError):
        SessionService.record_answer(student_id, session_id, first, 'b')
    with pytest.raises(ValidationError):
        SessionService.record_answer(student_id, session_id, third, 'e')
    with pytest.raises(ValidationError):
        SessionService.record_answer(student_id, session_id, 9999, 'a')
    with pytest.raises(NotFoundError):
        SessionService.record_answer(other_id, session_id, third, 'a')

    result = SessionService.complete_session(student_id, session_id)
    assert result['accuracy'] == 50

    with pytest.raises(PreconditionError):
        SessionService.record_answer(student_id, session_id, third, 'a')


def test_record_answer_locks_the_session_row(ctx, make_student, make_topic, monkeypatch):
    student_id = make_student()
    payload = _start(student_id, make_topic(question_count=2), 'practice')
    locks = []
    original = SessionService.get_owned_session

    def spy(student_id, session_id, lock=False):
        locks.append(lock)
        return original(student_id, session_id, lock=lock)

    monkeypatch.setattr(SessionService, 'get_owned_session', staticmethod(spy))
    _answer(student_id, payload, correct=1)

    assert locks == [True, True]
    session = db.session.get(QuizSession, payload['session']['id'])
    assert (session.correct_answers, session.total_attempts) == (1, 2)


def test_session_summary(ctx, make_student, make_topic):
    student_id = make_student()
    topic_id = make_topic(question_count=2)
    payload = _start(student_id, topic_id, 'practice')
    _answer(student_id, payload, correct=1)
    SessionService.complete_session(student_id, payload['session']['id'])

    summary = SessionService.session_summary(student_id, payload['session']['id'])
    assert summary['session']['is_complete'] is True
    assert summary['topic']['id'] == topic_id
    assert [a['is_correct'] for a in summary['answers']] == [True, False]
    assert summary['level']['xp'] == 50
