"""
Authentication blueprint
"""
from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from scilingo.auth import routes  # noqa: E402,F401
