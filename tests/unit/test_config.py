from pathlib import Path

from applyassist.core.config import Settings, get_settings


def test_safe_defaults():
    settings = Settings(_env_file=None)

    assert settings.auto_submit is False
    assert settings.upload_resume_first is True
    assert settings.browser_headless is False
    assert settings.max_applications_per_run == 10
    assert settings.profile_path == Path("data/personal-details.json")


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("AUTO_SUBMIT", "true")
    monkeypatch.setenv("MAX_APPLICATIONS_PER_RUN", "3")
    monkeypatch.setenv("POLICY_PATH", "/tmp/policy.yaml")

    settings = Settings(_env_file=None)

    assert settings.auto_submit is True
    assert settings.max_applications_per_run == 3
    assert settings.policy_path == Path("/tmp/policy.yaml")


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()
