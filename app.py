import os

from config import config
from flask import Flask, jsonify
from flask_cors import CORS
from flask_login import LoginManager
from flask_migrate import Migrate


def create_app(config_name=None):
    """Application factory pattern"""
    if config_name is None:
        config_name = os.getenv("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Initialize CORS for the web frontend

    # Get allowed origins from environment variable
    ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173").split(",")

    CORS(
        app,
        resources={
            r"/auth/*": {"origins": ALLOWED_ORIGINS},
            r"/quiz/*": {"origins": ALLOWED_ORIGINS},
            r"/progress/*": {"origins": ALLOWED_ORIGINS},
            r"/resources/*": {"origins": ALLOWED_ORIGINS},
            r"/settings/*": {"origins": ALLOWED_ORIGINS},
        },
        supports_credentials=True,
    )

    # Initialize SQLAlchemy
    from models import db

    db.init_app(app)

    # Initialize Flask-Migrate
    Migrate(app, db)

    # Initialize Flask-Login
    login_manager = LoginManager()
    login_manager.init_app(app)

    # Import all models to ensure they are registered with SQLAlchemy
    from models.concept import Concept
    from models.learning_progress import LearningProgress
    from models.learning_style_profile import LearningStyleProfile
    from models.question import Question
    from models.resource import ConceptResource, Resource
    from models.resource_interaction import ResourceInteraction
    from models.study_session import StudySession
    from models.user import User

    # User loader callback for Flask-Login
    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"success": False, "error": "Not authenticated"}), 401

    # Register auth blueprint
    from auth.oauth import bp as oauth_bp

    app.register_blueprint(oauth_bp)

    # Register API blueprints
    from routes.progress import bp as progress_bp
    from routes.quiz import bp as quiz_bp
    from routes.resources import bp as resources_bp
    from routes.settings import bp as settings_bp

    app.register_blueprint(quiz_bp)
    app.register_blueprint(progress_bp)
    app.register_blueprint(resources_bp)
    app.register_blueprint(settings_bp)

    # Home route
    @app.route("/")
    def home():
        return jsonify({"message": "Welcome to Synapse!", "version": "1.0.0"})

    # Health check route
    @app.route("/health")
    def health_check():
        try:
            db.session.execute(db.text("SELECT 1"))
            return jsonify({"status": "healthy", "database": "connected"}), 200
        except Exception as e:
            app.logger.error(f"Health check failed: {e}")
            return jsonify({"status": "unhealthy", "error": str(e)}), 500

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True, port=5001)
