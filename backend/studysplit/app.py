"""
StudySplit - Web Application
============================
Main application entry point that configures Flask and registers blueprints.

This module:
- Creates the Flask application factory
- Wires the content service and training store into the app
- Registers the training API blueprint
- Defines /health and JSON error handlers

Route Organization:
- /health                        -> Health check
- /api/process                   -> Segment a URL into a training
- /api/training/<id>             -> Load a shared training
- /api/training/<id>/progress    -> Save viewing progress
"""

from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS
from dotenv import load_dotenv

from studysplit.routes import training_bp
from studysplit.services import ContentService
from studysplit.storage import TrainingStore
from studysplit.config import AppConfig, get_config, apply_environment_overrides
from studysplit.logging_config import get_app_logger

# Load environment variables
load_dotenv()

# Initialize configuration with environment overrides
config = get_config()
apply_environment_overrides(config)

logger = get_app_logger("app", log_to_file=False)


def create_app(
    config_override: Optional[AppConfig] = None,
    content_service: Optional[ContentService] = None,
    training_store: Optional[TrainingStore] = None
):
    """
    Application factory function.

    Args:
        config_override: Optional AppConfig instance to use instead of global config
        content_service: Optional service override (tests inject fakes here)
        training_store: Optional store override

    Returns:
        Configured Flask application instance
    """
    app_config = config_override or get_config()

    app = Flask(__name__)
    CORS(app, origins=app_config.flask.cors_origins)

    # Shared collaborators for the route handlers
    app.app_config = app_config
    app.content_service = content_service or ContentService(app_config)
    app.training_store = training_store or TrainingStore(
        app_config.paths.trainings,
        in_memory=app_config.storage.in_memory
    )

    app.register_blueprint(training_bp, url_prefix='/api')

    app.config['MAX_CONTENT_LENGTH'] = app_config.flask.max_content_length
    app.config['SECRET_KEY'] = app_config.flask.secret_key

    logger.info(
        "Initialized Flask app",
        extra={
            'word_budget': app_config.segmentation.max_words_per_segment,
            'window_seconds': app_config.segmentation.video_segment_seconds,
            'in_memory_storage': app_config.storage.in_memory
        }
    )

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint for monitoring."""
        return jsonify({'status': 'ok'}), 200

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(413)
    def request_entity_too_large(error):
        return jsonify({'error': 'Request body is too large.'}), 413

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {error}")
        return jsonify({'error': 'Internal server error'}), 500

    return app


if __name__ == '__main__':
    app = create_app()
    flask_config = get_config().flask
    app.run(
        debug=flask_config.debug,
        host=flask_config.host,
        port=flask_config.port
    )
