"""Service settings for the Founder Bottleneck Audit.

Values are read from the environment with the FOUNDER_AUDIT_ prefix
(e.g. FOUNDER_AUDIT_DATABASE_URL).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from founder_audit.core.trends import TrendPeriod


class Settings(BaseSettings):
    """Settings for founder-bottleneck-audit.

    Environment variable prefix: FOUNDER_AUDIT_
    """

    service_name: str = "founder-bottleneck-audit"

    # Database
    database_url: str = "sqlite+aiosqlite:///./founder_audit.db"
    database_echo: bool = False
    auto_create_tables: bool = True

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Reporting
    reporting_timezone: str = "UTC"
    trend_default_period: TrendPeriod = "week"

    # Public endpoint throttling (requests per minute per client IP)
    audit_submit_rate_per_minute: int = 10
    session_beacon_rate_per_minute: int = 120
    # Client IPs remembered per throttle before the least recent are forgotten
    throttle_max_clients: int = 10_000

    model_config = SettingsConfigDict(env_prefix="FOUNDER_AUDIT_")
