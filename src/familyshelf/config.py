import os
from dotenv import load_dotenv

basedir = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
load_dotenv()


def _database_uri():
    turso_url = os.environ.get('TURSO_DATABASE_URL')
    turso_token = os.environ.get('TURSO_AUTH_TOKEN')
    if turso_url and turso_token:
        # Hosted libSQL goes through the sqlalchemy-libsql dialect
        host = turso_url.split('://', 1)[-1].rstrip('/')
        return f'sqlite+libsql://{host}/?authToken={turso_token}&secure=true'

    # Support DATABASE_URL (Render/Heroku) and DATABASE_URI (local)
    db_url = os.environ.get('DATABASE_URL') or os.environ.get('DATABASE_URI')
    if db_url and db_url.startswith('postgres://'):
        # SQLAlchemy expects postgresql://
        db_url = db_url.replace('postgres://', 'postgresql://', 1)
    return db_url or 'sqlite:///' + os.path.join(basedir, 'familyshelf.db')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MIN_PASSWORD_LENGTH = 8
    SHOW_ERROR_DETAILS = os.environ.get('SHOW_ERROR_DETAILS', '').lower() in ('1', 'true', 'yes')
    MAX_CONTENT_LENGTH = 1 * 1024 * 1024  # JSON bodies only
