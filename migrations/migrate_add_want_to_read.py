"""
Migration script to add book_review.want_to_read.

Run this after upgrading if your database predates want-to-read marks.
"""
from familyshelf.app import app
from familyshelf.upgrade import add_want_to_read_column


def migrate():
    with app.app_context():
        if add_want_to_read_column():
            print("✓ Added want_to_read to book_review")
        else:
            print("Column want_to_read already exists; migration already applied.")


if __name__ == '__main__':
    migrate()
