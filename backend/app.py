import logging

from flask import Flask, jsonify
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import Config
from db.errors import DuplicateKeyError, StorageUnavailableError, ValidationError
from db.store import BlogStore, register_shutdown_handlers

logger = logging.getLogger(__name__)


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    # Initialize extensions
    jwt = JWTManager(app)
    CORS(app, origins=app.config['CORS_ORIGINS'])

    # JWT error handlers
    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        logger.info("JWT invalid token: %s", error)
        return jsonify({'error': 'Invalid token', 'details': str(error)}), 422

    @jwt.unauthorized_loader
    def unauthorized_callback(error):
        return jsonify({'error': 'Missing Authorization header', 'details': str(error)}), 401

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({'error': 'Token has expired'}), 401

    # The database is opened lazily on the first query
    store = BlogStore.from_config(app.config)
    store.init_app(app)

    # Error handlers
    @app.errorhandler(DuplicateKeyError)
    def handle_duplicate(error):
        return jsonify({'error': str(error), 'slug': error.slug}), 409

    @app.errorhandler(ValidationError)
    def handle_validation(error):
        return jsonify({'error': str(error), 'field': error.field}), 400

    @app.errorhandler(StorageUnavailableError)
    def handle_storage_unavailable(error):
        logger.error("Storage unavailable: %s", error, exc_info=error.cause)
        return jsonify({'error': 'Service temporarily unavailable'}), 503

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_error(error):
        logger.exception("Unhandled error: %s", error)
        return jsonify({
            'error': str(error),
            'error_type': type(error).__name__
        }), 500

    # Register routes
    from routes import init_routes
    init_routes(app)

    return app


app = create_app()

if __name__ == '__main__':
    # Close the database on SIGTERM/SIGINT; WSGI servers manage their own signals
    register_shutdown_handlers(app.extensions['blog_store'].manager)
    # Disable reloader so only one process owns the database file
    app.run(debug=True, host='0.0.0.0', port=5000, use_reloader=False)
