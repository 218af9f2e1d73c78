import os
import logging
from flask import Flask, jsonify
from dotenv import load_dotenv
from marshmallow import ValidationError as SchemaValidationError
from werkzeug.exceptions import HTTPException

from torneo.config import config
from torneo.errors import TorneoError, InvariantViolation
from torneo.extensions import db, migrate, cors, ma, limiter


def create_app(config_name=None):
    load_dotenv()

    if config_name is None:
        config_name = os.getenv("FLASK_ENV", "development")

    app = Flask(__name__)
    config_class = config[config_name]
    app.config.from_object(config_class)

    # Validate production secrets
    if hasattr(config_class, "init_app"):
        config_class.init_app(app)

    # ── Logging ──────────────────────────────────────────────────────────
    level = logging.DEBUG if app.debug else getattr(
        logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO
    )
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    app.logger.setLevel(level)
    logging.getLogger("torneo").setLevel(level)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db, render_as_batch=True)
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"].split(",")}},
    )
    ma.init_app(app)
    limiter.init_app(app)

    # ── SQLite pragmas ───────────────────────────────────────────────────
    from sqlalchemy import event, Engine

    @event.listens_for(Engine, "connect")
    def set_sqlite_pragmas(dbapi_conn, connection_record):
        import sqlite3

        if isinstance(dbapi_conn, sqlite3.Connection):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()

    # ── Error handlers ───────────────────────────────────────────────────
    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(e):
        return jsonify({"error": "Validation failed", "messages": e.messages}), 400

    @app.errorhandler(TorneoError)
    def handle_domain_error(e):
        db.session.rollback()
        if isinstance(e, InvariantViolation):
            app.logger.error("Invariant violation: %s", e.message)
            return jsonify({"error": "Internal consistency error"}), e.status_code
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Resource not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(429)
    def rate_limit_exceeded(e):
        return jsonify({"error": "Rate limit exceeded. Try again later."}), 429

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_generic_exception(e):
        db.session.rollback()
        app.logger.exception("Unhandled exception: %s", e)
        return jsonify({"error": "Internal server error"}), 500

    # ── Models ───────────────────────────────────────────────────────────
    from torneo import models  # noqa: F401

    # ── Blueprints ───────────────────────────────────────────────────────
    from torneo.api.routes import api_bp

    app.register_blueprint(api_bp, url_prefix="/api")

    # ── Health check ─────────────────────────────────────────────────────
    @app.route("/health")
    def health():
        return jsonify({"status": "healthy"}), 200

    # ── CLI ───────────────────────────────────────────────────────────────
    from torneo.seeds.cli import seed_cli

    app.cli.add_command(seed_cli, "seed")

    return app
