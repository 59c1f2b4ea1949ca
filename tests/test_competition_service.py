import pytest

from scilingo.errors import NotFoundError, ValidationError
from scilingo.services.competition_service import CompetitionService


def test_round_state_defaults_to_closed(ctx, make_topic):
    topic_id = make_topic()
    assert CompetitionService.round_state(topic_id, '8A') == (False, 0)
    assert CompetitionService.round_state(topic_id, None) == (False, 0)


def test_open_increments_and_close_keeps_number(ctx, make_topic):
    topic_id = make_topic()

    assert CompetitionService.open_round(topic_id, '8A').round_number == 1
    CompetitionService.close_round(topic_id, '8A')
    assert CompetitionService.round_state(topic_id, '8A') == (False, 1)

    assert CompetitionService.open_round(topic_id, '8A').round_number == 2
    assert CompetitionService.round_state(topic_id, '8A') == (True, 2)
    assert CompetitionService.round_state(topic_id, '8B') == (False, 0)


def test_open_all_and_close_all(ctx, make_topic):
    topic_id = make_topic()
    CompetitionService.open_round(topic_id, '8C')

    rows = CompetitionService.open_all(topic_id)
    assert len(rows) == 6
    numbers = {row.class_section: row.round_number for row in rows}
    assert numbers['8C'] == 2
    assert numbers['8A'] == 1

    assert CompetitionService.close_all(topic_id) == 6
    state = CompetitionService.rounds_for_topic(topic_id)
    assert [row['class_section'] for row in state] == ['8A', '8B', '8C', '8D', '8E', '8F']
    assert not any(row['is_open'] for row in state)


def test_unknown_section_and_topic(ctx, make_topic):
    topic_id = make_topic()

    with pytest.raises(ValidationError):
        CompetitionService.open_round(topic_id, '9Z')
    with pytest.raises(NotFoundError):
        CompetitionService.open_round(9999, '8A')
    with pytest.raises(NotFoundError):
        CompetitionService.close_round(topic_id, '8A')
