"""
Competition round model
"""
from scilingo import db


class CompetitionRound(db.Model):
    """Open/closed competition window for one topic and class section"""
    __tablename__ = 'competition_rounds'

    id = db.Column(db.Integer, primary_key=True)
    topic_id = db.Column(db.Integer, db.ForeignKey('topics.id'), nullable=False)
    class_section = db.Column(db.String(10), nullable=False)
    is_open = db.Column(db.Boolean, nullable=False, default=False)
    round_number = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        db.UniqueConstraint('topic_id', 'class_section', name='uq_round_topic_section'),
    )

    def to_dict(self):
        return {
            'topic_id': self.topic_id,
            'class_section': self.class_section,
            'is_open': self.is_open,
            'round_number': self.round_number,
        }

    def __repr__(self):
        return f'<CompetitionRound topic={self.topic_id} {self.class_section} #{self.round_number} open={self.is_open}>'
