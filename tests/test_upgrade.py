from sqlalchemy import inspect

from familyshelf.models import db
from familyshelf.upgrade import run_upgrade, add_want_to_read_column, replace_hidden_at_with_hidden

LEGACY_REVIEW_TABLE = """
CREATE TABLE book_review (
    id INTEGER PRIMARY KEY,
    user_id INTEGER NOT NULL,
    book_id INTEGER NOT NULL,
    rating FLOAT,
    notes TEXT,
    hidden_at DATETIME,
    created_at DATETIME,
    updated_at DATETIME
)
"""


def install_legacy_reviews():
    db.session.execute(db.text("DROP TABLE book_review"))
    db.session.execute(db.text(LEGACY_REVIEW_TABLE))
    db.session.execute(db.text(
        "INSERT INTO book_review (id, user_id, book_id, rating, hidden_at) VALUES "
        "(1, 1, 1, 4.5, '2024-05-01 10:00:00'), (2, 2, 1, 3.0, NULL)"
    ))
    db.session.commit()


def review_columns():
    return {col['name'] for col in inspect(db.engine).get_columns('book_review')}


def test_current_schema_needs_no_upgrade(app):
    with app.app_context():
        assert run_upgrade() == []


def test_upgrade_migrates_legacy_reviews(app):
    with app.app_context():
        install_legacy_reviews()

        applied = run_upgrade()
        assert len(applied) == 4

        columns = review_columns()
        assert 'hidden_at' not in columns
        assert {'hidden', 'want_to_read'} <= columns

        rows = db.session.execute(db.text(
            "SELECT id, hidden, want_to_read FROM book_review ORDER BY id"
        )).all()
        assert [(r[0], bool(r[1]), bool(r[2])) for r in rows] == [(1, True, False), (2, False, False)]


def test_upgrade_steps_are_idempotent(app):
    with app.app_context():
        install_legacy_reviews()
        assert replace_hidden_at_with_hidden()
        assert replace_hidden_at_with_hidden() == []
        assert add_want_to_read_column()
        assert add_want_to_read_column() == []
