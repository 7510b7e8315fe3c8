"""
Runtime configuration using environment variables.
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load .env file
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Audit settings."""

    # Viewport assumed when inspecting static HTML (iPhone width)
    VIEWPORT_WIDTH: int = int(os.getenv("DESIGN_AUDIT_VIEWPORT_WIDTH", "375"))

    # HTTP client settings
    HTTP_TIMEOUT: float = float(os.getenv("DESIGN_AUDIT_HTTP_TIMEOUT", "30"))
    USER_AGENT: str = os.getenv(
        "DESIGN_AUDIT_USER_AGENT",
        "Mozilla/5.0 (compatible; DesignAudit/1.0)",
    )
    FETCH_RESOURCES: bool = _env_bool("DESIGN_AUDIT_FETCH_RESOURCES", "true")

    # Core Web Vitals observation
    VITALS_WINDOW: float = float(os.getenv("DESIGN_AUDIT_VITALS_WINDOW", "1.0"))
    VITALS_TIMEOUT: float = float(os.getenv("DESIGN_AUDIT_VITALS_TIMEOUT", "5.0"))

    LOG_LEVEL: str = os.getenv("DESIGN_AUDIT_LOG_LEVEL", "INFO").upper()


settings = Settings()
