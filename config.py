import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def _setting(key, default=None):
    # Environment variables win over env.yaml (SMTP credentials come from the environment)
    if key in os.environ:
        return os.environ[key]
    return data.get(key, default)


def _flag(key, default=False) -> bool:
    value = _setting(key, default)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


class ApplicationConfig:
    DB_URI = _setting("DB_URI", "sqlite+aiosqlite:///./test.db")
    API_PREFIX = _setting("API_PREFIX", "/api")
    API_PORT = int(_setting("API_PORT", 8000))
    API_HOST = _setting("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = _flag("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = _setting("LOG_LEVEL", "INFO")
    ENVIRONMENT = _setting("ENVIRONMENT", "development")
    APP_VERSION = _setting("APP_VERSION", "1.0.0")
    AUTO_CREATE_TABLES = _flag("AUTO_CREATE_TABLES", True)

    JWT_SECRET = _setting("JWT_SECRET", "dev-secret-key-change-in-production")
    ACCESS_TOKEN_MINUTES = int(_setting("ACCESS_TOKEN_MINUTES", 60))
    BCRYPT_ROUNDS = int(_setting("BCRYPT_ROUNDS", 12))
    ADMIN_API_KEY = _setting("ADMIN_API_KEY", "test-admin-key-12345")
    DEBUG_ENDPOINTS_ENABLED = _flag("DEBUG_ENDPOINTS_ENABLED", False)

    # Password reset
    RESET_TOKEN_STORE = _setting("RESET_TOKEN_STORE", "memory")  # memory | database
    RESET_TOKEN_TTL_MINUTES = int(_setting("RESET_TOKEN_TTL_MINUTES", 15))
    PUBLIC_BASE_URL = _setting("PUBLIC_BASE_URL", "")
    PLATFORM_URL = _setting("PLATFORM_URL", "")

    # Outbound mail
    SMTP_HOST = _setting("SMTP_HOST", "")
    SMTP_PORT = int(_setting("SMTP_PORT", 587))
    SMTP_USER = _setting("SMTP_USER", "")
    SMTP_PASS = _setting("SMTP_PASS", "")
    SMTP_SECURE = _flag("SMTP_SECURE", False)
    SMTP_TIMEOUT_SECONDS = float(_setting("SMTP_TIMEOUT_SECONDS", 30))
    MAIL_SEND_TIMEOUT_SECONDS = float(_setting("MAIL_SEND_TIMEOUT_SECONDS", 60))
