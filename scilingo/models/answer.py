"""
Answer model
"""
from datetime import datetime
from scilingo import db


class Answer(db.Model):
    """Append-only answer to one question of a session"""
    __tablename__ = 'answers'

    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey('sessions.id'), nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey('questions.id'), nullable=False)
    selected_option = db.Column(db.String(1), nullable=True)  # NULL when the timer ran out
    is_correct = db.Column(db.Boolean, nullable=False, default=False)
    attempt_number = db.Column(db.Integer, nullable=False, default=1)
    answered_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('session_id', 'question_id', name='uq_answer_session_question'),
    )

    def __repr__(self):
        return f'<Answer session={self.session_id} question={self.question_id} correct={self.is_correct}>'
