import os

# Point the app at a throwaway in-memory database before it is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("TURSO_DATABASE_URL", None)
os.environ.pop("TURSO_AUTH_TOKEN", None)

import pytest

from familyshelf.app import app as flask_app
from familyshelf.models import db, User

PASSWORD = "correct-horse"


@pytest.fixture
def app():
    flask_app.config.update(TESTING=True, SHOW_ERROR_DETAILS=False)
    with flask_app.app_context():
        db.create_all()
    yield flask_app
    with flask_app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Create a user directly in the database and return its id."""
    def _make_user(email="ada@readers.org", name="Ada", password=PASSWORD):
        with app.app_context():
            user = User(email=email, name=name)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make_user


def sign_in(client, email, password=PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


@pytest.fixture
def signed_in(client, make_user):
    make_user()
    response = sign_in(client, "ada@readers.org")
    assert response.status_code == 200
    return client


@pytest.fixture
def book(signed_in):
    response = signed_in.post("/api/books", json={
        "title": "The Hobbit",
        "author": "J.R.R. Tolkien",
        "genre": "Fantasy",
        "status": "read",
    })
    assert response.status_code == 200
    return response.get_json()
