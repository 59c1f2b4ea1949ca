"""
Quiz session model
"""
from datetime import datetime
from scilingo import db

PRACTICE = 'practice'
COMPETITION = 'competition'
SESSION_MODES = (PRACTICE, COMPETITION)


class QuizSession(db.Model):
    """One attempt at a topic's question set (in_progress -> complete)"""
    __tablename__ = 'sessions'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=False, index=True)
    topic_id = db.Column(db.Integer, db.ForeignKey('topics.id'), nullable=False)
    session_type = db.Column(db.String(20), nullable=False)  # 'practice' or 'competition'

    # Question order fixed at creation so a restart resumes the same set
    question_ids = db.Column(db.JSON, nullable=False, default=list)
    competition_round = db.Column(db.Integer, nullable=True)  # NULL for practice

    # Power-ups bought for this session
    power_ups = db.Column(db.JSON, nullable=False, default=list)
    fifty_fifty_question_id = db.Column(db.Integer, nullable=True)

    # Results
    is_complete = db.Column(db.Boolean, nullable=False, default=False)
    correct_answers = db.Column(db.Integer, nullable=False, default=0)
    total_attempts = db.Column(db.Integer, nullable=False, default=0)
    accuracy_score = db.Column(db.Integer, nullable=True)
    xp_earned = db.Column(db.Integer, nullable=True)

    # Timestamps
    started_at = db.Column(db.DateTime, default=datetime.utcnow)
    completed_at = db.Column(db.DateTime, nullable=True)

    # Relationships
    topic = db.relationship('Topic')
    answers = db.relationship('Answer', backref='session', lazy='dynamic', cascade='all, delete-orphan')

    # One competition attempt per (student, topic, round); practice rows carry
    # a NULL round and never collide
    __table_args__ = (
        db.UniqueConstraint('student_id', 'topic_id', 'competition_round', name='uq_session_competition_round'),
    )

    @property
    def is_competition(self):
        return self.session_type == COMPETITION

    def has_power_up(self, power_up):
        return power_up in (self.power_ups or [])

    def to_dict(self):
        return {
            'id': self.id,
            'topic_id': self.topic_id,
            'session_type': self.session_type,
            'question_ids': list(self.question_ids or []),
            'competition_round': self.competition_round,
            'power_ups': list(self.power_ups or []),
            'is_complete': self.is_complete,
            'correct_answers': self.correct_answers,
            'total_attempts': self.total_attempts,
            'accuracy_score': self.accuracy_score,
            'xp_earned': self.xp_earned,
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
        }

    def __repr__(self):
        return f'<QuizSession {self.id} student={self.student_id} {self.session_type} complete={self.is_complete}>'
