# interview_tracker/core/config.py
import os
from urllib.parse import quote_plus

from dotenv import load_dotenv


def str_to_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def merge_unique(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for v in items:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out


class Settings:
    def __init__(self) -> None:
        self.ENV = os.getenv("ENV", "dev").strip().lower()  # dev | prod
        if self.ENV != "prod":
            # Load .env only for non-prod so prod can't be accidentally influenced by local files.
            load_dotenv()

        # ----------------------------
        # Database
        # ----------------------------
        self.DATABASE_URL = os.getenv("DATABASE_URL", "").strip()
        self.DB_HOST = os.getenv("DB_HOST", "")
        self.DB_PORT = os.getenv("DB_PORT", "5432")
        self.DB_NAME = os.getenv("DB_NAME", "")
        self.DB_APP_USER = os.getenv("DB_APP_USER", "")
        self.DB_APP_PASSWORD = os.getenv("DB_APP_PASSWORD", "")
        self.DB_MIGRATOR_USER = os.getenv("DB_MIGRATOR_USER", "")
        self.DB_MIGRATOR_PASSWORD = os.getenv("DB_MIGRATOR_PASSWORD", "")
        self.DB_SSLMODE = os.getenv("DB_SSLMODE", "require").strip().lower()

        # ----------------------------
        # CORS
        # ----------------------------
        dev_defaults = [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]

        cors_from_env = parse_csv(os.getenv("CORS_ORIGINS"))
        if self.ENV == "prod":
            self.CORS_ORIGINS = merge_unique(cors_from_env)
        else:
            self.CORS_ORIGINS = merge_unique(cors_from_env + dev_defaults)

        # ----------------------------
        # Auth / JWT
        # ----------------------------
        self.JWT_SECRET = os.getenv("JWT_SECRET", "")
        self.JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
        self.ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
        self.PASSWORD_MIN_LENGTH = int(os.getenv("PASSWORD_MIN_LENGTH", "8"))

        if self.ENV == "prod":
            self.FRONTEND_BASE_URL = os.getenv("FRONTEND_BASE_URL", "").strip().rstrip("/")
        else:
            self.FRONTEND_BASE_URL = os.getenv("FRONTEND_BASE_URL", "http://localhost:5173").strip().rstrip("/")

        # ----------------------------
        # Email delivery
        # ----------------------------
        self.EMAIL_PROVIDER = os.getenv("EMAIL_PROVIDER", "resend").strip().lower()
        self.EMAIL_ENABLED = str_to_bool(os.getenv("EMAIL_ENABLED"), default=False)
        self.FROM_EMAIL = os.getenv("FROM_EMAIL", "Interview Tracker <onboarding@resend.dev>")
        self.RESEND_API_KEY = os.getenv("RESEND_API_KEY", "")
        self.AWS_REGION = os.getenv("AWS_REGION", "")

        # ----------------------------
        # OpenAI / question generation
        # ----------------------------
        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
        self.OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self.AI_OPENAI_MAX_RETRIES = max(1, int(os.getenv("AI_OPENAI_MAX_RETRIES", "3")))
        self.AI_QUESTIONS_TEMPERATURE = float(os.getenv("AI_QUESTIONS_TEMPERATURE", "0.9"))
        self.AI_QUESTIONS_MAX_TOKENS = int(os.getenv("AI_QUESTIONS_MAX_TOKENS", "4000"))
        self.QUESTIONS_PER_PAGE = int(os.getenv("QUESTIONS_PER_PAGE", "10"))
        self.QUESTIONS_MAX_PAGES = int(os.getenv("QUESTIONS_MAX_PAGES", "4"))

        # ----------------------------
        # Interview lifecycle / reminders
        # ----------------------------
        self.REMINDER_WINDOW_MINUTES = int(os.getenv("REMINDER_WINDOW_MINUTES", "30"))
        self.STALE_INTERVIEW_RETENTION_HOURS = int(os.getenv("STALE_INTERVIEW_RETENTION_HOURS", "24"))
        self.EXPIRY_SWEEP_ENABLED = str_to_bool(os.getenv("EXPIRY_SWEEP_ENABLED"), default=False)
        self.EXPIRY_SWEEP_INTERVAL_MINUTES = int(os.getenv("EXPIRY_SWEEP_INTERVAL_MINUTES", "60"))
        self.REMINDER_DISPATCH_INTERVAL_MINUTES = int(os.getenv("REMINDER_DISPATCH_INTERVAL_MINUTES", "15"))
        self.SCHEDULER_SHARED_SECRET = os.getenv("SCHEDULER_SHARED_SECRET", "")

        # ----------------------------
        # Celery
        # ----------------------------
        self.CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "").strip()

        self._validate_prod()

    def _validate_prod(self) -> None:
        if self.ENV != "prod":
            return

        missing: list[str] = []

        if not self.JWT_SECRET:
            missing.append("JWT_SECRET")
        if not self.DATABASE_URL:
            if not self.DB_HOST:
                missing.append("DB_HOST")
            if not self.DB_NAME:
                missing.append("DB_NAME")
            if not self.DB_APP_USER:
                missing.append("DB_APP_USER")
            if not self.DB_APP_PASSWORD:
                missing.append("DB_APP_PASSWORD")
            if self.DB_SSLMODE != "require":
                raise RuntimeError("DB_SSLMODE must be 'require' in prod")

        if not self.FRONTEND_BASE_URL:
            missing.append("FRONTEND_BASE_URL")
        if not self.SCHEDULER_SHARED_SECRET:
            missing.append("SCHEDULER_SHARED_SECRET")

        if not self.CORS_ORIGINS:
            missing.append("CORS_ORIGINS")

        cors_joined = ",".join(self.CORS_ORIGINS)
        if "localhost" in cors_joined or "127.0.0.1" in cors_joined:
            raise RuntimeError("CORS_ORIGINS contains localhost/dev origins in prod")

        if self.FRONTEND_BASE_URL and not self.FRONTEND_BASE_URL.startswith("https://"):
            raise RuntimeError("FRONTEND_BASE_URL should be https://... in prod")

        if missing:
            raise RuntimeError(f"Missing required prod env vars: {', '.join(missing)}")

    def _build_database_url(self, user: str, password: str) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if not self.DB_HOST:
            # Local fallback so the app can boot without Postgres (e.g. quick demos).
            return "sqlite:///./interview_tracker.db"
        encoded_password = quote_plus(password)
        return (
            f"postgresql+psycopg2://{user}:{encoded_password}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            f"?sslmode={self.DB_SSLMODE}"
        )

    @property
    def database_url(self) -> str:
        return self._build_database_url(self.DB_APP_USER, self.DB_APP_PASSWORD)

    @property
    def migrations_database_url(self) -> str:
        return self._build_database_url(self.DB_MIGRATOR_USER, self.DB_MIGRATOR_PASSWORD)


settings = Settings()


def require_jwt_secret() -> None:
    if not settings.JWT_SECRET:
        raise RuntimeError("JWT_SECRET must be set")
