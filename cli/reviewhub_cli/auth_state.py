from __future__ import annotations

from dataclasses import dataclass

from reviewhub_client import ApiError, AuthError, NetworkError

from .config import load_config
from .http import make_client


@dataclass
class AuthContext:
    state: str
    role: str | None = None


def _role_of(profile) -> str | None:
    if not isinstance(profile, dict):
        return None
    user = profile.get("user") if isinstance(profile.get("user"), dict) else profile
    if user.get("is_admin"):
        return "admin"
    role = user.get("role")
    return str(role) if role else "user"


def resolve_auth_context(check_remote: bool = True, base_url_override: str | None = None) -> AuthContext:
    cfg = load_config()
    token = (cfg.auth.access_token or "").strip()
    if not token:
        return AuthContext(state="no_token")
    if not check_remote:
        return AuthContext(state="token_present")

    client = make_client(cfg, base_url_override=base_url_override)
    try:
        profile = client.get_profile()
    except AuthError:
        return AuthContext(state="invalid_token")
    except (ApiError, NetworkError):
        return AuthContext(state="unreachable")
    finally:
        client.close()

    return AuthContext(state="authed", role=_role_of(profile))
