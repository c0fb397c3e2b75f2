import os
import logging
from pydantic import BaseModel, Field
from dotenv import load_dotenv

load_dotenv()


class LeaveSettings(BaseModel):
    # UK statutory minimum (5.6 weeks of a five-day week)
    default_annual_entitlement_days: float = Field(
        default=float(os.getenv("DEFAULT_ANNUAL_ENTITLEMENT_DAYS", "28"))
    )

    def default_for(self, leave_type: str) -> float:
        """Entitlement used when no LeaveEntitlement row covers the period."""
        if leave_type == "annual":
            return self.default_annual_entitlement_days
        return 0.0


class Config(BaseModel):
    app_name: str = "Rota Engine"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./rota.db")

    # Scheduling
    holiday_jurisdiction: str = os.getenv("HOLIDAY_JURISDICTION", "GB-ENG")
    leave: LeaveSettings = LeaveSettings()

    version: str = "1.0.0"
    build_id: str = os.getenv("BUILD_ID", "local")
    request_id_header: str = "X-Request-ID"

    # Actor context headers set by the authentication gateway
    company_header: str = "X-Company-Id"
    actor_header: str = "X-Actor-Id"
    role_header: str = "X-Actor-Role"

    rate_limit_per_minute: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "120"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    sql_echo: bool = os.getenv("SQL_ECHO", "false").lower() == "true"


settings = Config()

_logger = logging.getLogger(__name__)
if settings.environment == "production" and settings.database_url.startswith("sqlite"):
    _logger.warning("⚠ Running production with a SQLite database; only acceptable for demos.")
