import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scilingo import create_app, db  # noqa: E402
from scilingo.models.question import Question  # noqa: E402
from scilingo.models.student_stats import StudentStats  # noqa: E402
from scilingo.models.topic import Topic  # noqa: E402
from scilingo.models.user import User  # noqa: E402

PASSWORD = 'secret1'
TEACHER_EMAIL = 'teacher@school.test'


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """Application context for calling services directly"""
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_student(app):
    def _make(student_number='s1001', name='Maya', class_section='8A', **stats):
        with app.app_context():
            user = User(
                email=f"{student_number.lower()}@{app.config['STUDENT_EMAIL_DOMAIN']}",
                name=name,
                role='student',
                class_section=class_section,
                student_number=student_number
            )
            user.set_password(PASSWORD)
            db.session.add(user)
            db.session.flush()

            values = {'xp': 0, 'xp_spent': 0, 'level': 1, 'streak_weeks': 0,
                      'overall_accuracy': 0, 'total_sessions': 0}
            values.update(stats)
            db.session.add(StudentStats(user_id=user.id, **values))
            db.session.commit()
            return user.id
    return _make


@pytest.fixture
def make_teacher(app):
    def _make(email=TEACHER_EMAIL, name='Ms. Rivera'):
        with app.app_context():
            user = User(email=email, name=name, role='teacher')
            user.set_password(PASSWORD)
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make


@pytest.fixture
def make_topic(app):
    """Topic whose questions all have 'a' as the correct option"""
    def _make(question_count=5, title='Atoms and Molecules', competition_limit=None, is_active=True):
        with app.app_context():
            topic = Topic(
                title=title,
                standard='MS-PS1-1',
                description='Matter is made of atoms.',
                week_number=1,
                is_active=is_active,
                competition_limit=competition_limit
            )
            db.session.add(topic)
            db.session.flush()
            for index in range(question_count):
                db.session.add(Question(
                    topic_id=topic.id,
                    question_text=f'Question {index + 1}?',
                    option_a='Right', option_b='Wrong', option_c='Wrong', option_d='Wrong',
                    correct_option='a',
                    explanation=f'Explanation {index + 1}',
                    hint=f'Hint {index + 1}',
                    order_index=index
                ))
            db.session.commit()
            return topic.id
    return _make


@pytest.fixture
def login(client):
    def _login(identifier, password=PASSWORD):
        response = client.post('/auth/login', json={'identifier': identifier, 'password': password})
        assert response.status_code == 200, response.get_json()
        return response
    return _login
