# jwt_handler.py
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError
from jobboard.config import Settings, settings as default_settings
from jobboard.errors import AuthOperationFailure


def create_custom_token(uid: str, expires_delta: timedelta | None = None, settings: Settings | None = None) -> str:
    cfg = settings or default_settings
    delta = expires_delta or timedelta(minutes=cfg.custom_token_expire_minutes)
    to_encode = {"sub": uid, "exp": datetime.now(timezone.utc) + delta}
    return jwt.encode(to_encode, cfg.jwt_secret, algorithm=cfg.jwt_algorithm)


def decode_custom_token(token: str, settings: Settings | None = None) -> dict:
    cfg = settings or default_settings
    try:
        return jwt.decode(token, cfg.jwt_secret, algorithms=[cfg.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise AuthOperationFailure("Token expired") from exc
    except JWTError as exc:
        raise AuthOperationFailure("Invalid token") from exc


def identity_from_token(token: str, settings: Settings | None = None) -> str:
    payload = decode_custom_token(token, settings)
    uid = payload.get("sub") or payload.get("uid")
    if not uid:
        raise AuthOperationFailure("Invalid token payload")
    return str(uid)
