"""
Power-up purchase model
"""
from datetime import datetime
from scilingo import db


class PowerUpPurchase(db.Model):
    """
    Model to track power-up purchases by students.

    Each purchase creates a new record to maintain complete history.
    """
    __tablename__ = 'power_up_purchases'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=False)
    session_id = db.Column(db.Integer, db.ForeignKey('sessions.id'), nullable=False)

    power_up = db.Column(db.String(20), nullable=False)  # fifty_fifty, hint, streak_shield
    xp_paid = db.Column(db.Integer, nullable=False)

    # Timestamp
    purchased_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<PowerUpPurchase Student {self.student_id} - Session {self.session_id} - {self.power_up}>'
