"""
Badge model
"""
from datetime import datetime
from scilingo import db


class Badge(db.Model):
    """Achievement earned at most once per student"""
    __tablename__ = 'badges'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=False, index=True)
    badge_type = db.Column(db.String(40), nullable=False)
    earned_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('student_id', 'badge_type', name='uq_badge_student_type'),
    )

    def __repr__(self):
        return f'<Badge {self.badge_type} student={self.student_id}>'
