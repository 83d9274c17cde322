import os

from dotenv import load_dotenv

load_dotenv()


def _env_int(name, default=None):
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


def _env_float(name, default=None):
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


class Config:
    """Base configuration class"""

    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    FLASK_ENV = os.getenv("FLASK_ENV", "development")
    DEBUG = os.getenv("DEBUG", "True") == "True"

    # SQLAlchemy configuration
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI", "sqlite:///synapse.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Google Identity Services client used to verify sign-in tokens
    GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")

    # Session security
    SESSION_COOKIE_HTTPONLY = True  # Prevent JavaScript access to session cookie
    SESSION_COOKIE_SAMESITE = "Lax"  # Protect against CSRF (development default)

    if os.getenv("SESSION_COOKIE_SAMESITE"):
        SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE")

    # Learning policy overrides (None keeps the defaults in services/learning_policy.py)
    PRACTICE_INCREMENT = _env_int("PRACTICE_INCREMENT")
    MAX_INTERVAL_DAYS = _env_int("MAX_INTERVAL_DAYS")
    QUALITY_PERFORMANCE_WEIGHT = _env_float("QUALITY_PERFORMANCE_WEIGHT")
    QUALITY_SELF_RATING_WEIGHT = _env_float("QUALITY_SELF_RATING_WEIGHT")
    COMPREHENSION_RETENTION_WEIGHT = _env_float("COMPREHENSION_RETENTION_WEIGHT")

    # Number of ranked resources returned when the client does not ask for a limit
    DEFAULT_RESOURCE_LIMIT = _env_int("DEFAULT_RESOURCE_LIMIT", 5)
    DEFAULT_QUESTION_LIMIT = _env_int("DEFAULT_QUESTION_LIMIT", 5)


class DevelopmentConfig(Config):
    """Development environment configuration"""

    DEBUG = True
    SESSION_COOKIE_SECURE = False  # Allow HTTP in development


class ProductionConfig(Config):
    """Production environment configuration"""

    DEBUG = False
    SESSION_COOKIE_SECURE = True  # Require HTTPS in production

    # Cross-domain frontend requires SameSite=None together with Secure=True
    SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "None")

    # Flask-Login specific cookie settings
    REMEMBER_COOKIE_HTTPONLY = True
    REMEMBER_COOKIE_SECURE = True
    REMEMBER_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "None")
    REMEMBER_COOKIE_DURATION = 2592000  # 30 days in seconds
    REMEMBER_COOKIE_PATH = "/"

    SESSION_COOKIE_PATH = "/"

    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_size": 20,
        "max_overflow": 10,
        "pool_recycle": 3600,
        "pool_pre_ping": True,
    }


class TestingConfig(Config):
    """Testing environment configuration"""

    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SESSION_COOKIE_SECURE = False

    # Tests run against the documented policy defaults
    PRACTICE_INCREMENT = None
    MAX_INTERVAL_DAYS = None
    QUALITY_PERFORMANCE_WEIGHT = None
    QUALITY_SELF_RATING_WEIGHT = None
    COMPREHENSION_RETENTION_WEIGHT = None


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
