import logging

import click
from flask import Flask, jsonify
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from config import Config
from core.errors import BlogError, NotFoundError
from database import close_db, get_store, init_db
from routes.admin_bp import admin_bp
from routes.ai_bp import ai_bp
from routes.blogs_bp import blogs_bp
from routes.profile_bp import profile_bp
from services.ai_service import AIService, build_model
from services.profile_service import ProfileService

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    app = Flask(__name__)  # Creates the central application object
    app.config.from_object(config_class)
    if not app.config.get('JWT_SECRET_KEY'):
        raise RuntimeError("JWT_SECRET_KEY is not set; tokens cannot be verified")

    logging.basicConfig(level=app.config['LOG_LEVEL'],
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    jwt = JWTManager(app)

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({"error": "Missing Authorization header", "details": reason}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        logger.warning("Rejected invalid token: %s", reason)
        return jsonify({"error": "Invalid token", "details": reason}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({"error": "Token has expired"}), 401

    app.extensions['ai'] = AIService(
        build_model(app.config['GEMINI_API_KEY'], app.config['GEMINI_MODEL']),
        excerpt_max_length=app.config['EXCERPT_MAX_LENGTH'])

    """
    Every functional area is its own blueprint, all of them served as a JSON
    API under /api.
    """
    app.register_blueprint(blogs_bp, url_prefix='/api')  # Feed, writing, likes and comments
    app.register_blueprint(admin_bp, url_prefix='/api')  # Moderation queue and actions
    app.register_blueprint(profile_bp, url_prefix='/api')  # Categories and the caller's profile
    app.register_blueprint(ai_bp, url_prefix='/api')  # Gemini excerpt and safety helpers

    app.teardown_appcontext(close_db)

    @app.errorhandler(BlogError)
    def handle_blog_error(err):
        if err.status_code >= 500:
            logger.error("Store failure: %s", err.message)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        if isinstance(err, HTTPException):
            return jsonify({"error": err.description}), err.code
        logger.error("Unhandled exception: %s", err, exc_info=True)
        return jsonify({"error": "Something went wrong on our side."}), 500

    @app.cli.command('init-db')
    def init_db_command():
        """Create the tables and seed the default categories."""
        init_db(app.config['DB_PATH'])
        click.echo("Database initialized.")

    @app.cli.command('make-admin')
    @click.argument('username')
    def make_admin_command(username):
        """Grant administrator rights to an existing profile."""
        try:
            profile = ProfileService(get_store()).make_admin(username)
        except NotFoundError as err:
            raise click.ClickException(err.message)
        click.echo(f"{profile['username']} is now an administrator.")

    return app


if __name__ == '__main__':
    app = create_app()
    init_db(app.config['DB_PATH'])
    app.run(host="0.0.0.0")
