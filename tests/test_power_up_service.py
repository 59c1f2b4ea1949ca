import random
from datetime import date

import pytest

from scilingo import db
from scilingo.errors import PreconditionError, ValidationError
from scilingo.models.power_up_purchase import PowerUpPurchase
from scilingo.models.student_stats import StudentStats
from scilingo.models.user import User
from scilingo.services.competition_service import CompetitionService
from scilingo.services.power_up_service import PowerUpService
from scilingo.services.session_service import SessionService


@pytest.fixture
def competition(ctx, make_student, make_topic):
    """Start a competition for a student; returns (student_id, payload)"""
    def _start(**stats):
        student_id = make_student(**stats)
        topic_id = make_topic()
        CompetitionService.open_round(topic_id, '8A')
        payload = SessionService.start_session(db.session.get(User, student_id), topic_id, 'competition')
        return student_id, payload
    return _start


def test_purchase_spends_xp_without_lowering_total(competition):
    student_id, payload = competition(xp=600, level=2)

    result = PowerUpService.purchase(student_id, payload['session']['id'], ['hint', 'fifty_fifty'])

    assert result['power_ups'] == ['hint', 'fifty_fifty']
    assert result['xp_spent'] == 80
    assert result['available_xp'] == 520
    # Hints become visible once bought
    assert result['session']['questions'][0]['hint']

    stats = StudentStats.query.filter_by(user_id=student_id).one()
    assert stats.xp == 600
    assert stats.level == 2
    assert stats.xp_spent == 80
    assert PowerUpPurchase.query.filter_by(session_id=payload['session']['id']).count() == 2


def test_purchase_needs_enough_xp(competition):
    student_id, payload = competition(xp=120)

    with pytest.raises(PreconditionError, match='Not enough XP'):
        PowerUpService.purchase(student_id, payload['session']['id'], ['streak_shield', 'hint'])

    stats = StudentStats.query.filter_by(user_id=student_id).one()
    assert stats.xp_spent == 0
    assert PowerUpPurchase.query.count() == 0


def test_purchase_rules(competition, make_topic):
    student_id, payload = competition(xp=1000)
    session_id = payload['session']['id']

    with pytest.raises(ValidationError):
        PowerUpService.purchase(student_id, session_id, [])
    with pytest.raises(ValidationError):
        PowerUpService.purchase(student_id, session_id, ['double_xp'])

    PowerUpService.purchase(student_id, session_id, ['hint'])
    with pytest.raises(PreconditionError, match='Already bought'):
        PowerUpService.purchase(student_id, session_id, ['hint'])

    SessionService.record_answer(student_id, session_id, payload['questions'][0]['id'], 'a')
    with pytest.raises(PreconditionError, match='before the first question'):
        PowerUpService.purchase(student_id, session_id, ['fifty_fifty'])

    practice = SessionService.start_session(db.session.get(User, student_id), make_topic(), 'practice')
    with pytest.raises(PreconditionError, match='competition'):
        PowerUpService.purchase(student_id, practice['session']['id'], ['hint'])


def test_streak_shield_preserves_streak(competition):
    student_id, payload = competition(xp=300, streak_weeks=3, last_session_date=date(2026, 3, 1))
    session_id = payload['session']['id']

    PowerUpService.purchase(student_id, session_id, ['streak_shield'])
    for question in payload['questions']:
        SessionService.record_answer(student_id, session_id, question['id'], 'a')
    result = SessionService.complete_session(student_id, session_id, today=date(2026, 3, 20))

    assert result['new_streak'] == 3
    assert result['xp_earned'] == 275


def test_streak_resets_without_shield(competition):
    student_id, payload = competition(streak_weeks=3, last_session_date=date(2026, 3, 1))

    result = SessionService.complete_session(student_id, payload['session']['id'], today=date(2026, 3, 20))
    assert result['new_streak'] == 1


def test_fifty_fifty_removes_two_wrong_options_once(competition):
    student_id, payload = competition(xp=100)
    session_id = payload['session']['id']
    first, second = payload['questions'][0]['id'], payload['questions'][1]['id']

    with pytest.raises(PreconditionError, match='not bought'):
        PowerUpService.use_fifty_fifty(student_id, session_id, first)

    PowerUpService.purchase(student_id, session_id, ['fifty_fifty'])
    result = PowerUpService.use_fifty_fifty(student_id, session_id, first, rng=random.Random(3))

    assert result['question_id'] == first
    assert len(result['eliminated_options']) == 2
    assert 'a' not in result['eliminated_options']

    with pytest.raises(PreconditionError, match='already used'):
        PowerUpService.use_fifty_fifty(student_id, session_id, second)
