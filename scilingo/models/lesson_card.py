"""
Lesson card model
"""
from scilingo import db


class LessonCard(db.Model):
    """Teacher-written card shown before a quiz"""
    __tablename__ = 'lesson_cards'

    id = db.Column(db.Integer, primary_key=True)
    topic_id = db.Column(db.Integer, db.ForeignKey('topics.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    body = db.Column(db.Text, nullable=False)
    order_index = db.Column(db.Integer, default=0)

    def to_dict(self):
        return {'id': self.id, 'title': self.title, 'body': self.body, 'order_index': self.order_index}

    def __repr__(self):
        return f'<LessonCard {self.title}>'
