from werkzeug.datastructures import MultiDict
from wtforms import Form, PasswordField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Email, Length, Optional

from jobwise.errors import ValidationError


class SignupForm(Form):
    username = StringField('Username', validators=[DataRequired(), Length(min=3, max=150)])
    email = StringField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[DataRequired()])
    role = SelectField('Role', choices=[('candidate', 'Candidate'), ('employer', 'Employer')], validators=[DataRequired()])


class LoginForm(Form):
    email = StringField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[DataRequired()])


class ProfileForm(Form):
    username = StringField('Username', validators=[DataRequired(), Length(min=3, max=150)])


class JobForm(Form):
    title = StringField('Job Title', validators=[DataRequired(), Length(max=200)])
    company = StringField('Company', validators=[DataRequired(), Length(max=200)])
    location = StringField('Location', validators=[Optional(), Length(max=100)])
    description = TextAreaField('Job Description', validators=[DataRequired()])
    # One requirement per line
    requirements = TextAreaField('Requirements', validators=[Optional()])
    # Comma separated
    skills = StringField('Skills', validators=[Optional()])
    salary = StringField('Salary', validators=[Optional(), Length(max=100)])


class ApplicationForm(Form):
    resume = TextAreaField('Resume', validators=[DataRequired()])
    cover_letter = TextAreaField('Cover Letter', validators=[Optional()])


def validated(form_cls, **data):
    """Run ``form_cls`` over ``data`` and return the cleaned values."""
    form = form_cls(formdata=MultiDict({k: v for k, v in data.items() if v is not None}))
    if not form.validate():
        fields = ", ".join(sorted(form.errors))
        raise ValidationError(f"Invalid {fields}", errors=form.errors)
    return form.data
