"""
Teacher forms
"""
from flask_wtf import FlaskForm
from wtforms import StringField, SelectField, TextAreaField, IntegerField
from wtforms.validators import DataRequired, Length, Optional, NumberRange


def _strip(value):
    return value.strip() if isinstance(value, str) else value


def _lower(value):
    return value.strip().lower() if isinstance(value, str) else value


class TopicForm(FlaskForm):
    """Form for creating a weekly topic"""
    title = StringField('Title', validators=[DataRequired(), Length(max=200)], filters=[_strip])
    standard = StringField('Standard', validators=[Optional(), Length(max=100)],
                           filters=[_strip], render_kw={"placeholder": "MS-PS1-1"})
    description = TextAreaField('Description', validators=[Optional()], filters=[_strip])
    week_number = IntegerField('Week', validators=[Optional(), NumberRange(min=1, max=60)])


class QuestionForm(FlaskForm):
    """Form for one multiple-choice question"""
    question_text = TextAreaField('Question', validators=[DataRequired()], filters=[_strip])
    option_a = StringField('Option A', validators=[DataRequired()], filters=[_strip])
    option_b = StringField('Option B', validators=[DataRequired()], filters=[_strip])
    option_c = StringField('Option C', validators=[DataRequired()], filters=[_strip])
    option_d = StringField('Option D', validators=[DataRequired()], filters=[_strip])
    correct_option = SelectField('Correct option', choices=[('a', 'A'), ('b', 'B'), ('c', 'C'), ('d', 'D')],
                                 validators=[DataRequired()], filters=[_lower])
    explanation = TextAreaField('Explanation', validators=[Optional()], filters=[_strip])
    hint = StringField('Hint', validators=[Optional()], filters=[_strip])
    order_index = IntegerField('Order', validators=[Optional(), NumberRange(min=0)])


class LessonCardForm(FlaskForm):
    """Form for a lesson card shown before the quiz"""
    title = StringField('Title', validators=[DataRequired(), Length(max=200)], filters=[_strip])
    body = TextAreaField('Body', validators=[DataRequired()], filters=[_strip])
    order_index = IntegerField('Order', validators=[Optional(), NumberRange(min=0)])


class CompetitionLimitForm(FlaskForm):
    """Number of questions drawn for a competition (empty = whole pool)"""
    limit = IntegerField('Question limit', validators=[Optional(), NumberRange(min=1, max=200)])
