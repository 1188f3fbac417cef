# /namer/core/security.py

from typing import Optional

import bcrypt
from fastapi import Header


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> Optional[str]:
    """
    Resolves the caller's identity for the current request.

    Authentication is handled upstream; the gateway forwards the user id in
    the `X-User-Id` header. Anonymous callers get `None`.
    """
    if x_user_id is None:
        return None
    x_user_id = x_user_id.strip()
    return x_user_id or None


def hash_password(plain_password: str) -> str:
    return bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
