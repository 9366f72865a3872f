from familyshelf.models import db, BookReview
from familyshelf.ratings import is_half_star, round_half_star, coerce_flag


class ReviewValidationError(ValueError):
    """Raised when a review payload carries an unusable value."""


class ReviewService:
    """Per-user review upserts, keyed by (user_id, book_id)."""

    @staticmethod
    def get_or_create(user, book, **create_fields):
        review = BookReview.query.filter_by(user_id=user.id, book_id=book.id).first()
        if review is None:
            review = BookReview(user_id=user.id, book_id=book.id,
                                rating=None, notes=None, hidden=False, want_to_read=False)
            for key, value in create_fields.items():
                setattr(review, key, value)
            db.session.add(review)
            return review, True
        return review, False

    @staticmethod
    def save(user, book, payload):
        """Apply a review payload for ``user`` on ``book`` and commit.

        A boolean ``hidden`` only toggles visibility; a boolean
        ``wantToRead`` only toggles the want-to-read mark. Otherwise
        ``rating`` and ``notes`` are written, touching only the keys that
        are present (an explicit null clears the value).
        """
        hidden = coerce_flag(payload.get('hidden'))
        if hidden is not None:
            review, created = ReviewService.get_or_create(user, book, hidden=hidden)
            if not created:
                review.hidden = hidden
            db.session.commit()
            return review

        want_to_read = coerce_flag(payload.get('wantToRead'))
        if want_to_read is not None:
            review, created = ReviewService.get_or_create(user, book, want_to_read=want_to_read)
            if not created:
                review.want_to_read = want_to_read
            db.session.commit()
            return review

        rating = payload.get('rating')
        if rating is not None and not is_half_star(rating):
            raise ReviewValidationError('Rating must be from 0.5 to 5 in half-star steps')
        normalized = round_half_star(rating) if rating is not None else None

        # Non-string notes count as missing, like non-string form fields
        notes = payload.get('notes')
        notes_given = 'notes' in payload and (notes is None or isinstance(notes, str))
        if isinstance(notes, str):
            notes = notes.strip() or None
        else:
            notes = None

        review, created = ReviewService.get_or_create(user, book, rating=normalized, notes=notes)
        if not created:
            if 'rating' in payload:
                review.rating = normalized
            if notes_given:
                review.notes = notes
        db.session.commit()
        return review

    @staticmethod
    def visible_for_book(book_id):
        return (BookReview.query
                .filter_by(book_id=book_id, hidden=False)
                .order_by(BookReview.updated_at.desc(), BookReview.id.desc())
                .all())
