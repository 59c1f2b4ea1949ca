"""
Authentication forms
"""
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SelectField
from wtforms.validators import DataRequired, Length


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class LoginForm(FlaskForm):
    """Student number or teacher email plus password"""
    identifier = StringField('Student ID or email', validators=[DataRequired()], filters=[_strip])
    password = PasswordField('Password', validators=[DataRequired()])


class SignupForm(FlaskForm):
    """Form for a student creating an account"""
    student_id = StringField('Student ID', validators=[
        DataRequired(),
        Length(min=3, max=40, message='Student ID must be between 3 and 40 characters')
    ], filters=[_strip])

    name = StringField('Name', validators=[
        DataRequired(),
        Length(max=120)
    ], filters=[_strip])

    password = PasswordField('Password', validators=[
        DataRequired(),
        Length(min=6, message='Password must be at least 6 characters')
    ])

    class_section = SelectField('Class section', validators=[DataRequired()], filters=[_strip])
