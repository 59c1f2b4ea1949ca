"""
Question model
"""
from scilingo import db

OPTIONS = ('a', 'b', 'c', 'd')


class Question(db.Model):
    """Multiple-choice question in a topic pool"""
    __tablename__ = 'questions'

    id = db.Column(db.Integer, primary_key=True)
    topic_id = db.Column(db.Integer, db.ForeignKey('topics.id'), nullable=False, index=True)
    question_text = db.Column(db.Text, nullable=False)
    option_a = db.Column(db.Text, nullable=False)
    option_b = db.Column(db.Text, nullable=False)
    option_c = db.Column(db.Text, nullable=False)
    option_d = db.Column(db.Text, nullable=False)
    correct_option = db.Column(db.String(1), nullable=False)  # 'a'..'d'
    explanation = db.Column(db.Text)
    hint = db.Column(db.Text)
    order_index = db.Column(db.Integer, default=0)

    def options(self):
        return {key: getattr(self, f'option_{key}') for key in OPTIONS}

    def to_dict(self, include_hint=True):
        """Client payload; the correct option stays on the server"""
        data = {
            'id': self.id,
            'question_text': self.question_text,
            'options': self.options(),
            'order_index': self.order_index,
        }
        if include_hint:
            data['hint'] = self.hint
        return data

    def __repr__(self):
        return f'<Question {self.id} topic={self.topic_id}>'
