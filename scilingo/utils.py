"""
Helpers shared by the request handlers
"""
import logging
from functools import wraps

from flask import jsonify, request
from flask_login import current_user, login_required
from werkzeug.datastructures import MultiDict

from scilingo import db
from scilingo.errors import GENERIC_MESSAGE, ValidationError

logger = logging.getLogger(__name__)


def role_required(role):
    """Decorator to require an authenticated user with the given role"""
    def decorator(f):
        @wraps(f)
        @login_required
        def decorated_function(*args, **kwargs):
            if current_user.role != role:
                return jsonify({
                    'success': False,
                    'message': f'Access denied. This area is for {role}s only.'
                }), 403
            return f(*args, **kwargs)
        return decorated_function
    return decorator


student_required = role_required('student')
teacher_required = role_required('teacher')


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Expected a JSON object')
    return data


def int_field(data: dict, name: str, required: bool = True):
    """Read an integer field from a JSON payload"""
    value = data.get(name)
    if value is None:
        if required:
            raise ValidationError(f'Missing {name}')
        return None
    if isinstance(value, bool):
        raise ValidationError(f'{name} must be an integer')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{name} must be an integer')


def first_form_error(form) -> str:
    for field_name, errors in form.errors.items():
        if errors:
            label = getattr(form, field_name).label.text if hasattr(form, field_name) else field_name
            return f'{label}: {errors[0]}'
    return 'Invalid form data'


def error_response(error):
    """JSON body for a domain error"""
    if not error.expose_message:
        logger.error("[%s] %s", request.endpoint, error.message)
    return jsonify({'success': False, 'message': error.public_message}), error.status_code


def unexpected_error(operation: str):
    """Roll back, log the detail and answer with a generic message"""
    db.session.rollback()
    logger.exception("[%s] Unexpected error", operation)
    return jsonify({'success': False, 'message': GENERIC_MESSAGE}), 500


def form_data(data: dict = None) -> MultiDict:
    """JSON payload as form data: nulls dropped, scalars as strings"""
    data = json_body() if data is None else data
    return MultiDict({
        key: str(value) for key, value in data.items()
        if value is not None and not isinstance(value, (list, dict))
    })
