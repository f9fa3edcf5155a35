import os
from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Supabase (document store + identity provider)
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY") or SUPABASE_SERVICE_ROLE_KEY

# Origin used when building invitation links
APP_ORIGIN = os.getenv("APP_ORIGIN", "http://localhost:3000").rstrip("/")

# SMTP relay for invitation e-mails
SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USE_TLS = _env_bool("SMTP_USE_TLS", True)
SMTP_EMAIL = os.getenv("SMTP_EMAIL")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
MAIL_SENDER_NAME = os.getenv("MAIL_SENDER_NAME", "Workflow Manager")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

MIN_PASSWORD_LENGTH = 6
