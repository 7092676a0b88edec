from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    """
    Application configuration.

    - Secrets are NEVER stored in code.
    - All sensitive values are injected via environment variables (.env).
    - Validation happens at startup (fail fast).
    """

    # --------------------------------------------------
    # Database
    # --------------------------------------------------
    DATABASE_URL: str = "sqlite:///./billing.db"

    # --------------------------------------------------
    # Logging
    # --------------------------------------------------
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # --------------------------------------------------
    # CORS
    # --------------------------------------------------
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # --------------------------------------------------
    # Company / tax defaults
    # Used only until company_settings row is filled in.
    # --------------------------------------------------
    COMPANY_STATE_CODE: str = "07"
    DEFAULT_GST_RATE: Decimal = Decimal("18")

    # --------------------------------------------------
    # GSTR-1 filing policy (changes with GST rules)
    # --------------------------------------------------
    GSTR1_B2CL_THRESHOLD: Decimal = Decimal("250000")
    GSTR1_DEFAULT_RATE: Decimal = Decimal("18")

    # --------------------------------------------------
    # Internal Cache (seconds)
    # --------------------------------------------------
    DASHBOARD_TTL_SECONDS: int = 15

    # --------------------------------------------------
    # GSTIN lookup (gstincheck.co.in); disabled without a key
    # --------------------------------------------------
    GSTINCHECK_BASE_URL: str = "https://sheet.gstincheck.co.in"
    GSTINCHECK_API_KEY: str | None = None
    GSTINCHECK_TIMEOUT_SECONDS: float = 20.0

    class Config:
        env_file = ".env"
        extra = "ignore"   # Ignore unrelated env vars (Docker / CI friendly)

    def model_post_init(self, __context) -> None:
        """
        Fail fast on values that would make tax math meaningless.
        """
        if self.DEFAULT_GST_RATE < 0 or self.GSTR1_DEFAULT_RATE < 0:
            raise ValueError("DEFAULT_GST_RATE and GSTR1_DEFAULT_RATE must be >= 0")
        if self.GSTR1_B2CL_THRESHOLD <= 0:
            raise ValueError("GSTR1_B2CL_THRESHOLD must be > 0")
        if len(self.COMPANY_STATE_CODE) != 2 or not self.COMPANY_STATE_CODE.isdigit():
            raise ValueError("COMPANY_STATE_CODE must be a 2-digit state code, e.g. 07")


settings = Settings()
