"""
Family Shelf

A shared bookshelf for a family: add books, rate and annotate them,
mark what you want to read next.
"""

# Import the Flask app instance so that `flask --app familyshelf` finds it
from familyshelf.app import app

__all__ = ['app']
