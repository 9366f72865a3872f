"""
In-place schema upgrades for databases created by older releases.

Every step inspects the live table first, so running them again is a no-op.
"""
from sqlalchemy import inspect
from familyshelf.models import db

REVIEW_TABLE = 'book_review'


def _review_columns():
    inspector = inspect(db.engine)
    if REVIEW_TABLE not in inspector.get_table_names():
        return None
    return {col['name'] for col in inspector.get_columns(REVIEW_TABLE)}


def _execute(statements):
    for stmt in statements:
        db.session.execute(db.text(stmt))
    if statements:
        db.session.commit()
    return statements


def add_want_to_read_column():
    """Add book_review.want_to_read when it is missing."""
    columns = _review_columns()
    if columns is None or 'want_to_read' in columns:
        return []
    return _execute([
        f"ALTER TABLE {REVIEW_TABLE} ADD COLUMN want_to_read BOOLEAN NOT NULL DEFAULT FALSE",
    ])


def replace_hidden_at_with_hidden():
    """Turn the old hidden_at timestamp into the hidden flag."""
    columns = _review_columns()
    if columns is None or 'hidden_at' not in columns:
        return []
    statements = []
    if 'hidden' not in columns:
        statements.append(f"ALTER TABLE {REVIEW_TABLE} ADD COLUMN hidden BOOLEAN NOT NULL DEFAULT FALSE")
    statements.append(f"UPDATE {REVIEW_TABLE} SET hidden = TRUE WHERE hidden_at IS NOT NULL")
    statements.append(f"ALTER TABLE {REVIEW_TABLE} DROP COLUMN hidden_at")
    return _execute(statements)


def run_upgrade():
    """Create missing tables, then apply column migrations. Returns the SQL applied."""
    db.create_all()
    applied = []
    applied += replace_hidden_at_with_hidden()
    applied += add_want_to_read_column()
    return applied
