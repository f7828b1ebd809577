from datetime import datetime, timedelta, timezone
import hmac
from typing import Sequence

import jwt
from jwt import InvalidTokenError

ADMIN_SUBJECT = "admin"
ADMIN_SCOPE = "reservations:admin"


def pin_matches(candidate: str, expected: str) -> bool:
    return hmac.compare_digest(candidate.encode(), expected.encode())


def create_access_token(
    *,
    secret: str,
    subject: str = ADMIN_SUBJECT,
    algorithm: str = "HS256",
    expires_delta: timedelta | None = None,
    now: datetime | None = None,
) -> str:
    issued = now or datetime.now(timezone.utc)
    exp = issued + (expires_delta or timedelta(minutes=120))
    payload = {"sub": subject, "scope": ADMIN_SCOPE, "iat": issued, "exp": exp}
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(
    token: str,
    *,
    secret: str,
    algorithms: Sequence[str],
) -> str:
    try:
        payload = jwt.decode(token, secret, algorithms=list(algorithms))
    except InvalidTokenError as exc:  # includes ExpiredSignatureError
        raise ValueError("invalid token") from exc

    sub = payload.get("sub")
    if not sub:
        raise ValueError("token missing sub")
    if payload.get("scope") != ADMIN_SCOPE:
        raise ValueError("token lacks admin scope")
    return str(sub)
