import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def _get(key, default):
    """
    Environment variables override env.yaml.

    Settings with a string default (secrets, URIs, names) are kept verbatim;
    only numbers, booleans and lists are parsed as YAML.
    """
    raw = os.environ.get(key)
    if raw is None:
        value = data.get(key, default)
    elif isinstance(default, str):
        return raw
    elif not raw.strip():
        return default
    else:
        value = yaml.safe_load(raw)

    if isinstance(default, str) and value is not None and not isinstance(value, str):
        # Unquoted env.yaml scalars such as `JWT_SECRET: 12345` arrive as numbers
        return str(value)
    return value


class ApplicationConfig:
    DB_URI = _get("DB_URI", "sqlite+aiosqlite:///./test.db")
    API_PORT = _get("API_PORT", 4000)
    API_HOST = _get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = _get("CORS_ORIGINS", ["http://localhost:5173"])
    CORS_ALLOW_CREDENTIALS = _get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = _get("LOG_LEVEL", "INFO")
    JWT_SECRET = _get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_EXPIRE_DAYS = _get("JWT_EXPIRE_DAYS", 7)
    ENABLE_DEBUG_ROUTES = bool(_get("ENABLE_DEBUG_ROUTES", False))

    # Password reset
    APP_NAME = _get("APP_NAME", "Feedback Talent")
    RESET_PIN_LENGTH = _get("RESET_PIN_LENGTH", 6)
    RESET_PIN_TTL_MIN = _get("RESET_PIN_TTL_MIN", 10)
    RESET_TOKEN_TTL_MIN = _get("RESET_TOKEN_TTL_MIN", 15)
    RESET_MAX_ATTEMPTS = _get("RESET_MAX_ATTEMPTS", 5)
    RESET_RESEND_COOLDOWN_SECONDS = _get("RESET_RESEND_COOLDOWN_SECONDS", 60)
    RESET_MIN_PASSWORD_LENGTH = _get("RESET_MIN_PASSWORD_LENGTH", 8)

    # Mail transport
    SMTP_HOST = _get("SMTP_HOST", "smtp.gmail.com")
    SMTP_PORT = _get("SMTP_PORT", 465)
    SMTP_SECURE = bool(_get("SMTP_SECURE", True))
    SMTP_USER = _get("SMTP_USER", "")
    SMTP_PASS = _get("SMTP_PASS", "")
    MAIL_FROM = _get("MAIL_FROM", "")
    SMTP_TIMEOUT_SECONDS = _get("SMTP_TIMEOUT_SECONDS", 10)
