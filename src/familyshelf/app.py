import click
from flask import Flask, jsonify, request
from flask_login import LoginManager, login_user, logout_user, login_required, current_user
from functools import wraps
from sqlalchemy.orm import selectinload, joinedload
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
from familyshelf.config import Config
from familyshelf.models import db, User, Book, BookReview
from familyshelf.forms import (RegistrationForm, LoginForm, BookForm, BookEditForm,
                               json_formdata, first_error)
from familyshelf.ratings import is_whole_star
from familyshelf.reviews import ReviewService, ReviewValidationError
from familyshelf.upgrade import run_upgrade

COMMON_GENRES = [
    'Fiction', 'Nonfiction', 'Mystery', 'Sci-Fi', 'Fantasy', 'Romance',
    'Biography', 'History', 'Self-Help', 'Young Adult', "Children's", 'Other',
]

app = Flask(__name__)
app.config.from_object(Config)

# Initialize extensions
db.init_app(app)
login_manager = LoginManager()
login_manager.init_app(app)

with app.app_context():
    app.logger.info("Using %s database", db.engine.dialect.name)


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({'error': 'You must be signed in'}), 401


@app.errorhandler(HTTPException)
def http_error(e):
    return jsonify({'error': e.description}), e.code


def signin_required(message):
    """Like login_required, but answers with a route-specific 401 message."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return jsonify({'error': message}), 401
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def json_body():
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def server_error(message, exc):
    db.session.rollback()
    app.logger.exception(message)
    if app.debug or app.config.get('SHOW_ERROR_DETAILS'):
        message = str(exc)
    return jsonify({'error': message}), 500


# Auth routes
@app.route('/api/auth/register', methods=['POST'])
def register():
    form = RegistrationForm(formdata=json_formdata(json_body()))
    try:
        if not form.validate():
            return jsonify({'error': first_error(form)}), 400
        user = User(email=form.email.data, name=form.name.data)
        user.set_password(form.password.data)
        db.session.add(user)
        db.session.commit()
    except SQLAlchemyError as e:
        return server_error('Failed to create account', e)
    app.logger.info("Registered user %s", user.email)
    return jsonify({'ok': True})


@app.route('/api/auth/login', methods=['POST'])
def login():
    payload = json_body()
    form = LoginForm(formdata=json_formdata(payload))
    if not form.validate():
        return jsonify({'error': first_error(form)}), 400

    user = User.query.filter_by(email=form.email.data).first()
    if user is None or not user.check_password(form.password.data):
        return jsonify({'error': 'Invalid email or password'}), 401
    login_user(user, remember=payload.get('remember') is True)
    return jsonify({'user': user.to_dict()})


@app.route('/api/auth/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'ok': True})


@app.route('/api/auth/session')
def session_info():
    if current_user.is_authenticated:
        return jsonify({'user': current_user.to_dict()})
    return jsonify({'user': None})


# Book routes
@app.route('/api/books', methods=['GET'])
def list_books():
    genre = request.args.get('genre')
    try:
        query = Book.query.options(selectinload(Book.reviews).joinedload(BookReview.user))
        if genre and genre != 'all':
            query = query.filter(Book.genre == genre)
        books = query.order_by(Book.created_at.desc(), Book.id.desc()).all()
        return jsonify([book.to_dict() for book in books])
    except SQLAlchemyError as e:
        return server_error('Failed to fetch books', e)


@app.route('/api/books', methods=['POST'])
@signin_required('You must be signed in to add a book')
def create_book():
    payload = json_body()
    form = BookForm(formdata=json_formdata(payload))
    if not form.validate():
        return jsonify({'error': first_error(form)}), 400

    rating = payload.get('rating')
    if rating is not None and not is_whole_star(rating):
        return jsonify({'error': 'Rating must be an integer from 1 to 5'}), 400

    book = Book(
        title=form.title.data,
        author=form.author.data,
        genre=form.genre.data,
        status=form.status.data,
        rating=int(rating) if rating is not None else None,
        added_by=current_user.name,
    )
    try:
        db.session.add(book)
        db.session.commit()
        return jsonify(book.to_dict())
    except SQLAlchemyError as e:
        return server_error('Failed to add book', e)


@app.route('/api/books/<int:book_id>', methods=['GET'])
def get_book(book_id):
    book = db.get_or_404(Book, book_id, description='Book not found')
    return jsonify(book.to_dict())


@app.route('/api/books/<int:book_id>', methods=['PATCH'])
@signin_required('You must be signed in to update a book')
def update_book(book_id):
    payload = json_body()
    rating = payload.get('rating')
    if rating is not None and not is_whole_star(rating):
        return jsonify({'error': 'Rating must be an integer from 1 to 5'}), 400

    form = BookEditForm(formdata=json_formdata(payload))
    if not form.validate():
        return jsonify({'error': first_error(form)}), 400

    book = db.get_or_404(Book, book_id, description='Book not found')
    try:
        for field in (form.title, form.author, form.genre, form.status):
            if field.data:
                setattr(book, field.name, field.data)
        if rating is not None:
            book.rating = int(rating)
        db.session.commit()
        return jsonify(book.to_dict())
    except SQLAlchemyError as e:
        return server_error('Failed to update book', e)


@app.route('/api/genres')
def list_genres():
    """Common genres plus whatever the family has shelved"""
    shelved = {g[0] for g in db.session.query(Book.genre).distinct() if g[0]}
    return jsonify(sorted(set(COMMON_GENRES) | shelved))


# Review routes
@app.route('/api/books/<int:book_id>/reviews', methods=['GET'])
def list_reviews(book_id):
    book = db.get_or_404(Book, book_id, description='Book not found')
    try:
        return jsonify([r.to_dict() for r in ReviewService.visible_for_book(book.id)])
    except SQLAlchemyError as e:
        return server_error('Failed to fetch reviews', e)


@app.route('/api/books/<int:book_id>/reviews', methods=['PUT'])
@signin_required('You must be signed in to add or update a review')
def save_review(book_id):
    book = db.get_or_404(Book, book_id, description='Book not found')
    try:
        review = ReviewService.save(current_user, book, json_body())
        return jsonify(review.to_dict())
    except ReviewValidationError as e:
        return jsonify({'error': str(e)}), 400
    except SQLAlchemyError as e:
        return server_error('Failed to save review', e)


# Management commands
@app.cli.command('init-db')
def init_db():
    """Initialize the database."""
    db.create_all()
    print('Database initialized!')


@app.cli.command('upgrade-db')
def upgrade_db():
    """Create missing tables and migrate old book_review columns."""
    applied = run_upgrade()
    if applied:
        for stmt in applied:
            print(f'OK: {stmt}')
        print(f'Database upgraded ({len(applied)} statement(s)).')
    else:
        print('Database already up to date.')


@app.cli.command('create-user')
@click.option('--email', prompt=True)
@click.option('--name', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
def create_user(email, name, password):
    """Create a family member account."""
    email = email.strip().lower()
    if User.query.filter_by(email=email).first():
        raise click.ClickException(f"Email '{email}' already registered!")
    min_length = app.config['MIN_PASSWORD_LENGTH']
    if len(password) < min_length:
        raise click.ClickException(f'Password must be at least {min_length} characters')

    user = User(email=email, name=name.strip())
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    print(f'User {email} created successfully!')


if __name__ == '__main__':
    app.run(debug=True)
