from familyshelf.models import User


def test_create_user_command(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=[
        "create-user", "--email", " Mum@Readers.org", "--name", "Mum", "--password", "bookworm-mum",
    ])
    assert result.exit_code == 0, result.output
    assert "created successfully" in result.output

    with app.app_context():
        user = User.query.filter_by(email="mum@readers.org").one()
        assert user.check_password("bookworm-mum")


def test_create_user_rejects_duplicates(app, make_user):
    make_user(email="mum@readers.org")
    runner = app.test_cli_runner()
    result = runner.invoke(args=[
        "create-user", "--email", "mum@readers.org", "--name", "Mum", "--password", "bookworm-mum",
    ])
    assert result.exit_code != 0
    assert "already registered" in result.output


def test_create_user_rejects_short_password(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=[
        "create-user", "--email", "kid@readers.org", "--name", "Kid", "--password", "abc",
    ])
    assert result.exit_code != 0
    assert "at least 8 characters" in result.output


def test_init_and_upgrade_commands(app):
    runner = app.test_cli_runner()
    assert "initialized" in runner.invoke(args=["init-db"]).output
    assert "already up to date" in runner.invoke(args=["upgrade-db"]).output
