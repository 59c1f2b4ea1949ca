"""
Topic model
"""
from datetime import datetime
from scilingo import db


class Topic(db.Model):
    """Weekly science topic with its question pool"""
    __tablename__ = 'topics'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    standard = db.Column(db.String(100))  # e.g. "MS-PS1-1"
    description = db.Column(db.Text)
    week_number = db.Column(db.Integer)
    is_active = db.Column(db.Boolean, nullable=False, default=False)
    competition_limit = db.Column(db.Integer, nullable=True)  # None = whole pool
    created_by = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    questions = db.relationship('Question', backref='topic', lazy='dynamic', cascade='all, delete-orphan',
                                order_by='Question.order_index')
    lesson_cards = db.relationship('LessonCard', backref='topic', lazy='dynamic', cascade='all, delete-orphan',
                                   order_by='LessonCard.order_index')
    competition_rounds = db.relationship('CompetitionRound', backref='topic', lazy='dynamic',
                                         cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'standard': self.standard,
            'description': self.description,
            'week_number': self.week_number,
            'is_active': self.is_active,
            'competition_limit': self.competition_limit,
        }

    def __repr__(self):
        return f'<Topic {self.title}>'
