from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "DairyOps"
    description: str = "Farm management API for cattle, milk, feed and health records"
    version: str = "1.0.0"
    docs_url: str = "/docs"
    redoc_url: str = "/redoc"
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"
    log_file: Optional[str] = None

    database_url: str = "sqlite:///./dairyops.db"

    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expiry_minutes: int = 60 * 24  # 1 day

    # "literal" keeps the historical window/average arithmetic, "corrected" fixes it
    compat_profile: Literal["literal", "corrected"] = "literal"
    # previous window for Week/Month/Quarter/Year trend cards
    trend_baseline: Literal["prior_day", "prior_period"] = "prior_day"
    # "cumulative" forces AND-composition on every listing
    listing_composition: Literal["per_entity", "cumulative"] = "per_entity"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "allow"


settings = Settings()
