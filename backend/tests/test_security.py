from datetime import datetime, timedelta, timezone

from jose import jwt

from kanban_api.core.config import DEV_JWT_SECRET, Settings
from kanban_api.core.security import (
    TokenSettings,
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


def test_password_hash_is_salted_and_verifies():
    first = get_password_hash("secret1")
    second = get_password_hash("secret1")

    assert first != "secret1"
    assert first != second
    assert first.startswith("$2b$")
    assert verify_password("secret1", first)
    assert verify_password("secret1", second)
    assert not verify_password("secret2", first)


def test_verify_password_rejects_garbage_hash():
    assert not verify_password("secret1", "not-a-hash")


def test_token_has_three_segments_and_expected_claims(token_settings):
    issued = datetime(2030, 1, 1, tzinfo=timezone.utc)
    token = create_access_token(token_settings, subject="user-1", email="a@example.com", now=issued)

    assert token.count(".") == 2
    claims = jwt.get_unverified_claims(token)
    assert claims["sub"] == "user-1"
    assert claims["email"] == "a@example.com"
    assert claims["iss"] == "kanban_api"
    assert claims["exp"] - claims["iat"] == 3600
    assert jwt.get_unverified_header(token)["alg"] == "HS256"


def test_decode_round_trip(token_settings):
    token = create_access_token(token_settings, subject="user-1", email="a@example.com")
    claims = decode_access_token(token_settings, token)

    assert claims is not None
    assert claims.subject == "user-1"
    assert claims.email == "a@example.com"
    assert claims.expires_at - claims.issued_at == timedelta(hours=1)


def test_decode_rejects_wrong_secret(token_settings):
    token = create_access_token(token_settings, subject="user-1", email="a@example.com")
    other = TokenSettings(secret="another-secret")

    assert decode_access_token(other, token) is None


def test_decode_rejects_wrong_issuer(token_settings):
    foreign = TokenSettings(secret=token_settings.secret, issuer="someone-else")
    token = create_access_token(foreign, subject="user-1", email="a@example.com")

    assert decode_access_token(token_settings, token) is None


def test_decode_rejects_tampered_payload(token_settings):
    token = create_access_token(token_settings, subject="user-1", email="a@example.com")
    header, _, signature = token.split(".")
    forged_payload = create_access_token(
        token_settings, subject="user-2", email="b@example.com"
    ).split(".")[1]

    assert decode_access_token(token_settings, f"{header}.{forged_payload}.{signature}") is None


def test_decode_rejects_malformed_token(token_settings):
    assert decode_access_token(token_settings, "") is None
    assert decode_access_token(token_settings, "abc") is None
    assert decode_access_token(token_settings, "a.b.c") is None


def test_token_valid_just_before_and_invalid_just_after_ttl(token_settings):
    now = datetime.now(timezone.utc)
    ttl = token_settings.ttl

    fresh = create_access_token(token_settings, "user-1", "a@example.com", now=now - ttl + timedelta(seconds=30))
    stale = create_access_token(token_settings, "user-1", "a@example.com", now=now - ttl - timedelta(seconds=30))

    assert decode_access_token(token_settings, fresh) is not None
    assert decode_access_token(token_settings, stale) is None


def test_settings_fall_back_to_dev_secret():
    settings = Settings(JWT_SECRET=None)

    assert settings.uses_insecure_secret
    assert settings.jwt_secret == DEV_JWT_SECRET
    assert TokenSettings.from_settings(settings).secret == DEV_JWT_SECRET


def test_settings_use_configured_secret():
    settings = Settings(JWT_SECRET="s3cret", ACCESS_TOKEN_EXPIRE_MINUTES=5)
    token_settings = TokenSettings.from_settings(settings)

    assert not settings.uses_insecure_secret
    assert token_settings.secret == "s3cret"
    assert token_settings.ttl == timedelta(minutes=5)


def test_cors_origins_parsing():
    assert Settings(CORS_ORIGINS="http://a, http://b,").get_cors_origins() == ["http://a", "http://b"]
    assert Settings(CORS_ORIGINS=["http://c"]).get_cors_origins() == ["http://c"]
