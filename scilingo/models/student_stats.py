"""
Student aggregate stats model
"""
from datetime import datetime
from scilingo import db


class StudentStats(db.Model):
    """Per-student XP, level, streak and accuracy aggregate"""
    __tablename__ = 'student_stats'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=False, unique=True)

    # XP (total never decreases; power-ups are paid from xp - xp_spent)
    xp = db.Column(db.Integer, nullable=False, default=0)
    xp_spent = db.Column(db.Integer, nullable=False, default=0)
    level = db.Column(db.Integer, nullable=False, default=1)

    # Weekly streak tracking
    streak_weeks = db.Column(db.Integer, nullable=False, default=0)
    last_session_date = db.Column(db.Date)

    # Scored (competition) sessions only
    overall_accuracy = db.Column(db.Integer, nullable=False, default=0)
    total_sessions = db.Column(db.Integer, nullable=False, default=0)

    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def available_xp(self):
        return self.xp - self.xp_spent

    def __repr__(self):
        return f'<StudentStats user={self.user_id} xp={self.xp} streak={self.streak_weeks}>'

    def spend_xp(self, amount):
        """Spend XP on power-ups"""
        if self.available_xp >= amount:
            self.xp_spent += amount
            self.updated_at = datetime.utcnow()
            return True
        return False
