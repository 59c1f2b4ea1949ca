"""
Teacher blueprint
"""
from flask import Blueprint

teacher_bp = Blueprint('teacher', __name__)

from scilingo.teacher import routes  # noqa: E402,F401
