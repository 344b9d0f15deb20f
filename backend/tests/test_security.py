"""Tests for password hashing, tokens and settings loading."""
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from office_admin.config import Settings
from office_admin.models import Admin
from office_admin.security import (
    ALGORITHM,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_password_hash_round_trip() -> None:
    hashed = hash_password("admin123")

    assert hashed != "admin123"
    assert verify_password("admin123", hashed)
    assert not verify_password("admin124", hashed)


def test_token_carries_admin_id_and_expires_in_an_hour(settings: Settings) -> None:
    token = create_access_token(Admin(id=42, email="a@b.co", password_hash="x"), settings)

    payload = jwt.decode(token.token, settings.jwt_secret, algorithms=[ALGORITHM])
    assert payload["id"] == 42
    assert payload["exp"] - payload["iat"] == pytest.approx(3600, abs=2)
    assert decode_access_token(token.token, settings).id == 42


def test_expired_or_foreign_tokens_are_rejected(settings: Settings) -> None:
    past = datetime.now(timezone.utc) - timedelta(minutes=5)
    expired = jwt.encode({"id": 1, "exp": int(past.timestamp())}, settings.jwt_secret, ALGORITHM)
    foreign = jwt.encode({"id": 1}, "some-other-secret", ALGORITHM)
    anonymous = jwt.encode({"sub": "x"}, settings.jwt_secret, ALGORITHM)

    for token in (expired, foreign, anonymous, "not-a-jwt"):
        with pytest.raises(jwt.PyJWTError):
            decode_access_token(token, settings)


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./other.db")
    monkeypatch.setenv("JWT_SECRET", "s3cret")
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("PORT", "8080")

    settings = Settings.from_env()

    assert settings.database_url == "sqlite+aiosqlite:///./other.db"
    assert settings.jwt_secret == "s3cret"
    assert settings.is_production
    assert settings.port == 8080
    assert settings.access_token_expires_minutes == 60


def test_token_with_out_of_range_id_is_rejected(settings: Settings) -> None:
    oversized = jwt.encode({"id": 2**70}, settings.jwt_secret, ALGORITHM)

    with pytest.raises(jwt.PyJWTError):
        decode_access_token(oversized, settings)
