"""
Authentication routes
"""
import logging
from flask import current_app, jsonify
from flask_login import login_user, logout_user, current_user
from scilingo.auth import auth_bp
from scilingo.auth.forms import LoginForm, SignupForm
from scilingo.errors import AuthenticationError, PreconditionError, ScilingoError, ValidationError
from scilingo.models.student_stats import StudentStats
from scilingo.models.user import User
from scilingo.utils import error_response, first_form_error, form_data, unexpected_error
from scilingo import db

logger = logging.getLogger(__name__)


def student_id_to_email(student_id):
    """Students have no real email; build a deterministic internal one"""
    domain = current_app.config['STUDENT_EMAIL_DOMAIN']
    return f"{student_id.strip().lower()}@{domain}"


def _user_payload(user):
    return {
        'id': user.id,
        'name': user.name,
        'role': user.role,
        'class_section': user.class_section,
        'avatar': user.avatar
    }


@auth_bp.route('/login', methods=['POST'])
def login():
    """Login with a student ID (students) or an email (teachers)"""
    if current_user.is_authenticated:
        return jsonify({'success': True, 'user': _user_payload(current_user)})

    try:
        form = LoginForm(formdata=form_data())
        if not form.validate():
            raise ValidationError('All fields are required.')

        identifier = form.identifier.data
        email = identifier.lower() if '@' in identifier else student_id_to_email(identifier)

        user = User.query.filter_by(email=email).first()
        if not user or not user.check_password(form.password.data):
            raise AuthenticationError('Invalid login credentials')

        login_user(user)
        logger.info("[Auth] %s %s logged in", user.role, user.id)
        return jsonify({'success': True, 'user': _user_payload(user)})

    except ScilingoError as e:
        return error_response(e)
    except Exception:
        return unexpected_error('login')


@auth_bp.route('/signup', methods=['POST'])
def signup():
    """Create a student account and sign in"""
    try:
        form = SignupForm(formdata=form_data())
        form.class_section.choices = [(s, s) for s in current_app.config['CLASS_SECTIONS']]
        if not form.validate():
            raise ValidationError(first_form_error(form))

        student_id = form.student_id.data
        email = student_id_to_email(student_id)
        if User.query.filter((User.email == email) | (User.student_number == student_id)).first():
            raise PreconditionError('This student ID is already registered')

        user = User(
            email=email,
            name=form.name.data,
            role='student',
            avatar='flask',
            class_section=form.class_section.data,
            student_number=student_id
        )
        user.set_password(form.password.data)
        db.session.add(user)
        db.session.flush()

        db.session.add(StudentStats(
            user_id=user.id, xp=0, xp_spent=0, level=1,
            streak_weeks=0, overall_accuracy=0, total_sessions=0
        ))
        db.session.commit()

        login_user(user)
        logger.info("[Auth] Student %s signed up in section %s", user.id, user.class_section)
        return jsonify({'success': True, 'user': _user_payload(user)}), 201

    except ScilingoError as e:
        db.session.rollback()
        return error_response(e)
    except Exception:
        return unexpected_error('signup')


@auth_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    """Logout route"""
    logout_user()
    return jsonify({'success': True})
