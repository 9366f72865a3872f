from datetime import datetime
from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

db = SQLAlchemy()

BOOK_STATUSES = ('read', 'want_to_read')


def _iso(value):
    return value.isoformat() if value else None


class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    reviews = db.relationship('BookReview', back_populates='user',
                              cascade='all, delete-orphan')

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'email': self.email}

    def __repr__(self):
        return f'<User {self.email}>'


class Book(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    author = db.Column(db.String(200), nullable=False)
    genre = db.Column(db.String(100), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='want_to_read')  # 'read' or 'want_to_read'
    rating = db.Column(db.Integer)  # 1-5 stars, set by whoever shelved it
    added_by = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    reviews = db.relationship('BookReview', back_populates='book',
                              cascade='all, delete-orphan',
                              order_by='BookReview.created_at')

    def visible_reviews(self):
        """Reviews whose authors have not hidden them"""
        return [r for r in self.reviews if not r.hidden]

    def to_dict(self, include_reviews=True):
        data = {
            'id': self.id,
            'title': self.title,
            'author': self.author,
            'genre': self.genre,
            'status': self.status,
            'rating': self.rating,
            'addedBy': self.added_by,
            'createdAt': _iso(self.created_at),
        }
        if include_reviews:
            data['reviews'] = [r.to_dict() for r in self.visible_reviews()]
        return data

    def __repr__(self):
        return f'<Book {self.title}>'


class BookReview(db.Model):
    __table_args__ = (
        db.UniqueConstraint('user_id', 'book_id', name='uq_review_user_book'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    book_id = db.Column(db.Integer, db.ForeignKey('book.id'), nullable=False)
    rating = db.Column(db.Float)  # 0.5-5 in half-star steps
    notes = db.Column(db.Text)
    hidden = db.Column(db.Boolean, nullable=False, default=False)
    want_to_read = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = db.relationship('User', back_populates='reviews')
    book = db.relationship('Book', back_populates='reviews')

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'bookId': self.book_id,
            'rating': self.rating,
            'notes': self.notes,
            'hidden': self.hidden,
            'wantToRead': self.want_to_read,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
            'user': {'id': self.user.id, 'name': self.user.name},
        }

    def __repr__(self):
        return f'<BookReview User:{self.user_id} Book:{self.book_id} Rating:{self.rating}>'
