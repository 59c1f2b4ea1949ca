"""
User model
"""
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime
from scilingo import db


class User(UserMixin, db.Model):
    """Student or teacher profile used for authentication"""
    __tablename__ = 'profiles'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='student')  # 'teacher' or 'student'
    avatar = db.Column(db.String(20), default='flask')  # flask, atom, microscope, rocket, star
    class_section = db.Column(db.String(10), nullable=True, index=True)  # e.g. "8A"
    student_number = db.Column(db.String(40), unique=True, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    stats = db.relationship('StudentStats', backref='student', uselist=False, cascade='all, delete-orphan')
    sessions = db.relationship('QuizSession', backref='student', lazy='dynamic', cascade='all, delete-orphan')
    badges = db.relationship('Badge', backref='student', lazy='dynamic', cascade='all, delete-orphan')

    @property
    def is_teacher(self):
        return self.role == 'teacher'

    def set_password(self, password):
        """Hash and set password"""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Check if password matches hash"""
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f'<User {self.email} ({self.role})>'
