import os
import logging

import click
from flask import Flask, jsonify, request
from sqlalchemy import event, select
from werkzeug.exceptions import HTTPException

from taskboard.config import config_by_name
from taskboard.extensions import db, migrate, login_manager, limiter


def create_app(config_name=None):
    """Application factory."""

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    # --- Validate required env vars (skip in testing) ---
    if config_name != "testing":
        try:
            config_by_name[config_name].validate()
        except RuntimeError as e:
            app.logger.warning(f"Config validation: {e}")

    # --- Init extensions ---
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    limiter.init_app(app)

    # --- Import models so Alembic can discover them ---
    with app.app_context():
        from taskboard import models  # noqa: F401

        if db.engine.dialect.name == "sqlite":
            # Cascading deletes rely on FK enforcement, which SQLite
            # leaves off per connection unless asked.
            event.listen(db.engine, "connect", _enable_sqlite_foreign_keys)

    # --- Register blueprints ---
    from taskboard.blueprints.auth import auth_bp
    from taskboard.blueprints.boards import boards_bp
    from taskboard.blueprints.lists import lists_bp
    from taskboard.blueprints.cards import cards_bp

    api_limit = limiter.limit(lambda: app.config["API_RATE_LIMIT"])
    for bp in (boards_bp, lists_bp, cards_bp):
        api_limit(bp)

    app.register_blueprint(auth_bp)
    app.register_blueprint(boards_bp)
    app.register_blueprint(lists_bp)
    app.register_blueprint(cards_bp)

    # --- Root routes ---
    @app.route("/")
    def index():
        return jsonify({
            "name": "Taskboard API",
            "endpoints": {
                "auth": "/auth",
                "boards": "/boards",
                "lists": "/lists",
                "cards": "/cards",
                "health": "/health",
            },
        })

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    # --- Error handlers ---
    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({"error": e.name, "message": e.description}), e.code

    @app.errorhandler(500)
    def server_error(e):
        return jsonify({
            "error": "Internal Server Error",
            "message": "Something went wrong",
        }), 500

    # --- CLI commands ---
    register_cli(app)

    # --- Security + CORS headers ---
    @app.after_request
    def add_response_headers(response):
        """Add security and CORS headers to every response."""
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"
        # Control referrer information
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Strict Transport Security (only in production)
        if not app.debug:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        origin = request.headers.get("Origin")
        if origin and origin in app.config["ALLOWED_ORIGINS"]:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = (
                "Authorization, Content-Type"
            )
            response.headers["Access-Control-Allow-Methods"] = (
                "GET, POST, PUT, DELETE, OPTIONS"
            )
        return response

    # --- Logging ---
    if not app.debug:
        logging.basicConfig(level=logging.INFO)

    return app


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def register_cli(app):
    """Register custom CLI commands with the Flask app."""

    @app.cli.command("seed-demo")
    @click.option("--email", default="demo@taskboard.local", help="Demo user email")
    @click.option("--password", default="demo1234", help="Demo user password")
    def seed_demo(email, password):
        """Create a demo user with one board, three lists and a few cards.

        Usage:
            flask seed-demo
            flask seed-demo --email me@example.com --password s3cret
        """
        from taskboard.services.auth_service import AuthService
        from taskboard.services.board_service import BoardService
        from taskboard.services.card_service import CardService
        from taskboard.services.list_service import ListService

        auth = AuthService(db.session)
        user = auth.find_by_email(email.lower().strip())
        if user:
            click.echo(f"Demo user already exists: {email}")
        else:
            result = auth.register({
                "fullName": "Demo User",
                "email": email,
                "password": password,
            })
            if not result.is_ok:
                raise click.ClickException(f"Could not create demo user: {result.details}")
            user = result.value
            click.echo(f"Created demo user: {email}")

        board = BoardService(db.session).create(user.id, {"title": "Demo Board"}).value
        lists = ListService(db.session)
        cards = CardService(db.session)
        seeded = {
            "To Do": ["Write the README", "Sketch the UI"],
            "In Progress": ["Build the API"],
            "Done": ["Set up the repo"],
        }
        for list_title, card_titles in seeded.items():
            task_list = lists.create(
                user.id, {"title": list_title, "boardId": board.id}
            ).value
            for card_title in card_titles:
                cards.create(user.id, {"title": card_title, "listId": task_list.id})

        click.echo("")
        click.echo("=" * 60)
        click.echo("Seed data created successfully!")
        click.echo("=" * 60)
        click.echo(f"  User:   {email} / {password}")
        click.echo(f"  Board:  {board.title} (id: {board.id})")
        click.echo(f"  Lists:  {', '.join(seeded)}")
        click.echo("=" * 60)

    @app.cli.command("check-positions")
    @click.option("--fix", is_flag=True, help="Renumber containers that have gaps or duplicates.")
    def check_positions(fix):
        """Report boards and lists whose children are not numbered 0..n-1.

        Usage:
            flask check-positions
            flask check-positions --fix
        """
        from taskboard.models.kanban import Board, TaskList
        from taskboard.services.sequencer import PositionSequencer

        checks = [
            ("board", PositionSequencer(db.session, "list"), Board),
            ("list", PositionSequencer(db.session, "card"), TaskList),
        ]
        broken = 0
        for label, sequencer, container_model in checks:
            container_ids = db.session.execute(
                select(container_model.id).order_by(container_model.id)
            ).scalars().all()
            for container_id in container_ids:
                if sequencer.is_dense(container_id):
                    continue
                broken += 1
                if fix:
                    changed = sequencer.compact(container_id)
                    click.echo(f"  {label} {container_id}: renumbered {changed} {sequencer.kind}(s)")
                else:
                    click.echo(f"  {label} {container_id}: positions are not dense")

        if fix:
            db.session.commit()
        click.echo(f"{broken} container(s) {'fixed' if fix else 'with gaps or duplicates'}.")

    @app.cli.command("clear-db")
    @click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
    @click.option("--keep-users", is_flag=True, help="Delete boards only; keep accounts.")
    def clear_db(yes, keep_users):
        """Delete every board, list, card and activity entry (and user).

        Usage:
            flask clear-db
            flask clear-db --yes --keep-users
        """
        from taskboard.models.activity import Activity
        from taskboard.models.kanban import Board, Card, TaskList
        from taskboard.models.user import User

        # Children first; bulk deletes skip ORM cascades.
        tables = [
            ("activities", Activity),
            ("cards", Card),
            ("lists", TaskList),
            ("boards", Board),
        ]
        if not keep_users:
            tables.append(("users", User))

        click.echo("")
        click.echo("  Data to be DELETED:")
        for name, model in tables:
            click.echo(f"    - {db.session.query(model).count()} {name}")
        click.echo("")

        if not yes and not click.confirm("  Proceed?"):
            click.echo("  Aborted.")
            return

        for name, model in tables:
            deleted = db.session.query(model).delete()
            click.echo(f"    {name}: {deleted}")
        db.session.commit()
        app.logger.info(f"Database cleared ({', '.join(name for name, _ in tables)})")
        click.echo("Database cleared.")
