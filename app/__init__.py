"""Flask application factory."""
from flask import Flask, jsonify

from app.database import init_db


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Production: Enable ProxyFix for HTTPS behind a reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    # Initialize database (durable side of the key-value store)
    init_db(app)

    # Hydrate the storage cache before serving any request
    from app.services.storage_service import init_storage
    storage = init_storage(app)

    from app.services.review_service import PendingPromptRequester
    app.extensions['review_requester'] = PendingPromptRequester(storage)

    # Error Handlers
    from app.exceptions import VendStatsError

    @app.errorhandler(VendStatsError)
    def handle_vendstats_error(error):
        """Handle custom application exceptions."""
        if error.status_code >= 500:
            app.logger.error(f"VendStatsError [{error.status_code}]: {error.message}")
        else:
            app.logger.info(f"VendStatsError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'status': 'error', 'message': 'Not Found'}), 404

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return jsonify({'status': 'error', 'message': 'Method Not Allowed'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f"Unhandled Exception: {error}")
        return jsonify({'status': 'error', 'message': 'Internal Server Error'}), 500

    # Register blueprints
    from app.blueprints.main import main_bp
    from app.blueprints.events import events_bp
    from app.blueprints.sales import sales_bp
    from app.blueprints.products import products_bp
    from app.blueprints.stats import stats_bp
    from app.blueprints.subscription import subscription_bp
    from app.blueprints.settings import settings_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(events_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(stats_bp)
    app.register_blueprint(subscription_bp)
    app.register_blueprint(settings_bp)

    # Register CLI commands
    from app.cli_commands import init_cli_commands
    init_cli_commands(app)

    return app
