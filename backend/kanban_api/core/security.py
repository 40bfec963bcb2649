from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from kanban_api.core.config import Settings

# CryptContext handles password hashing using bcrypt
# bcrypt is slow by design to prevent brute-force attacks
# Cost factor is the passlib default (12 rounds)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class TokenSettings:
    """Signing configuration shared by token issuance and verification.

    Built once at startup and passed to both the auth service and the
    bearer-token dependency, so they always agree on secret and issuer.
    """
    secret: str
    algorithm: str = "HS256"
    issuer: str = "kanban_api"
    ttl: timedelta = timedelta(hours=24)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenSettings":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.JWT_ALGORITHM,
            issuer=settings.JWT_ISSUER,
            ttl=settings.access_token_ttl,
        )


@dataclass(frozen=True)
class TokenClaims:
    subject: str
    email: str
    issuer: str
    issued_at: datetime
    expires_at: datetime


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash using constant-time comparison"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognizable hash
        return False


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt"""
    # bcrypt generates a salt per call, so equal passwords give different hashes
    return pwd_context.hash(password)


def dummy_verify() -> None:
    """Spend the same time as a real verification when there is no user to check"""
    pwd_context.dummy_verify()


def create_access_token(
    config: TokenSettings,
    subject: str,
    email: str,
    now: Optional[datetime] = None,
) -> str:
    """Create a signed JWT for the given user"""
    issued_at = now or datetime.now(timezone.utc)
    to_encode = {
        "sub": subject,
        "email": email,
        "iss": config.issuer,
        "iat": issued_at,
        "exp": issued_at + config.ttl,
    }
    # Compact header.payload.signature form
    return jwt.encode(to_encode, config.secret, algorithm=config.algorithm)


def decode_access_token(config: TokenSettings, token: str) -> Optional[TokenClaims]:
    """Decode and verify a JWT token"""
    try:
        # Verifies signature, expiry and issuer; rejects any other algorithm
        payload = jwt.decode(
            token,
            config.secret,
            algorithms=[config.algorithm],
            issuer=config.issuer,
        )
    except JWTError:
        return None

    subject = payload.get("sub")
    email = payload.get("email")
    if not isinstance(subject, str) or not subject or not isinstance(email, str):
        return None

    try:
        return TokenClaims(
            subject=subject,
            email=email,
            issuer=payload["iss"],
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError, OverflowError):
        return None
