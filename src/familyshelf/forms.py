from flask import current_app
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import StringField, PasswordField
from wtforms.validators import DataRequired, InputRequired, Email, Length, ValidationError, Optional, AnyOf
from familyshelf.models import User, BOOK_STATUSES


def strip_filter(value):
    return value.strip() if isinstance(value, str) else value


def email_filter(value):
    return value.strip().lower() if isinstance(value, str) else value


def json_formdata(payload):
    """Build form data from a JSON body, keeping only string values."""
    if not isinstance(payload, dict):
        return MultiDict()
    return MultiDict({k: v for k, v in payload.items() if isinstance(v, str)})


def first_error(form):
    for messages in form.errors.values():
        if messages:
            return messages[0]
    return 'Invalid request'


def password_length(form, field):
    min_length = current_app.config['MIN_PASSWORD_LENGTH']
    if len(field.data or '') < min_length:
        raise ValidationError(f'Password must be at least {min_length} characters')


class JSONForm(FlaskForm):
    class Meta:
        csrf = False  # fed from JSON bodies, session cookie guards writes


REGISTRATION_REQUIRED = 'Email, name, and password are required'
BOOK_REQUIRED = 'Title, author, and genre are required'
BOOK_STATUS = "Status must be 'read' or 'want_to_read'"


class RegistrationForm(JSONForm):
    email = StringField('Email', filters=[email_filter],
                        validators=[DataRequired(REGISTRATION_REQUIRED), Length(max=120), Email()])
    name = StringField('Name', filters=[strip_filter],
                       validators=[DataRequired(REGISTRATION_REQUIRED), Length(max=100)])
    password = PasswordField('Password', validators=[InputRequired(REGISTRATION_REQUIRED), password_length])

    def validate_email(self, email):
        user = User.query.filter_by(email=email.data).first()
        if user:
            raise ValidationError('An account with this email already exists')


class LoginForm(JSONForm):
    email = StringField('Email', filters=[email_filter],
                        validators=[DataRequired('Email and password are required')])
    password = PasswordField('Password', validators=[InputRequired('Email and password are required')])


class BookForm(JSONForm):
    title = StringField('Title', filters=[strip_filter], validators=[DataRequired(BOOK_REQUIRED), Length(max=200)])
    author = StringField('Author', filters=[strip_filter], validators=[DataRequired(BOOK_REQUIRED), Length(max=200)])
    genre = StringField('Genre', filters=[strip_filter], validators=[DataRequired(BOOK_REQUIRED), Length(max=100)])
    status = StringField('Status', validators=[AnyOf(BOOK_STATUSES, message=BOOK_STATUS)])


class BookEditForm(JSONForm):
    # Blank or missing fields leave the book unchanged
    title = StringField('Title', filters=[strip_filter], validators=[Optional(), Length(max=200)])
    author = StringField('Author', filters=[strip_filter], validators=[Optional(), Length(max=200)])
    genre = StringField('Genre', filters=[strip_filter], validators=[Optional(), Length(max=100)])
    status = StringField('Status', validators=[Optional(), AnyOf(BOOK_STATUSES, message=BOOK_STATUS)])
