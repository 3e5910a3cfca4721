from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Apply Assist"
    log_level: str = "INFO"

    data_dir: Path = Path("data")
    profile_path: Path = Path("data/personal-details.json")
    resume_path: Path = Path("data/resume.pdf")
    policy_path: Path = Path("config/policy.yaml")
    targets_path: Path = Path("config/targets.txt")
    log_dir: Path = Path("logs")

    browser_headless: bool = False
    browser_slow_mo_ms: int = 100
    page_timeout_ms: int = 30000
    navigation_timeout_ms: int = 30000
    # Per-control reads and writes; a timeout means "not found / not interactable".
    control_timeout_ms: int = 1500
    autofill_wait_ms: int = 2000
    settle_wait_ms: int = 1500

    max_applications_per_run: int = 10
    # Safety default: never submit without the human confirming each application.
    auto_submit: bool = False
    # Upload the resume before typing so host-page autofill can populate fields.
    upload_resume_first: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
