"""
Migration script to replace book_review.hidden_at with the boolean hidden flag.

Reviews that had a hidden_at timestamp are marked hidden; the old column is dropped.
Run this once against a database created before reviews had a hidden flag.
"""
from familyshelf.app import app
from familyshelf.upgrade import replace_hidden_at_with_hidden


def migrate():
    with app.app_context():
        applied = replace_hidden_at_with_hidden()
        if not applied:
            print("Column 'hidden_at' not found; migration already applied.")
            return
        for stmt in applied:
            print(f"OK: {stmt}")
        print("✓ book_review migrated (hidden_at -> hidden)")


if __name__ == '__main__':
    migrate()
