import pytest

from socialfeed.core.config import Settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    for key in ("JWT_SECRET", "JWT_EXP_MINUTES", "PORT", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(key, raising=False)


def test_missing_secret_is_fatal():
    with pytest.raises(RuntimeError, match="JWT_SECRET"):
        Settings()


def test_defaults(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "config-test-secret-of-decent-length")

    settings = Settings()

    assert settings.jwt_exp_minutes == 60
    assert settings.jwt_algorithm == "HS256"
    assert settings.port == 5000
    assert settings.cors_allow_origins == ["*"]


def test_non_integer_setting(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "config-test-secret-of-decent-length")
    monkeypatch.setenv("JWT_EXP_MINUTES", "soon")

    with pytest.raises(RuntimeError, match="JWT_EXP_MINUTES"):
        Settings()


def test_cors_origins_list(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "config-test-secret-of-decent-length")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test,")

    assert Settings().cors_allow_origins == ["http://a.test", "http://b.test"]
