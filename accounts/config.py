"""Configuration management for the account service."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml

from .passwords import DEFAULT_BCRYPT_ROUNDS
from .tokens import DEFAULT_TOKEN_TTL


@dataclass(frozen=True)
class Settings:
    """Process-wide settings read once at startup."""

    secret_key: str
    token_ttl: timedelta = DEFAULT_TOKEN_TTL
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS
    seed_path: Optional[Path] = None


def _int_setting(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from environment variables."""

    env = os.environ if environ is None else environ
    secret = (env.get("ACCOUNTS_SECRET_KEY") or env.get("SECRET_KEY") or "").strip()
    if not secret:
        raise ValueError("ACCOUNTS_SECRET_KEY (or SECRET_KEY) must be set to sign tokens")

    ttl_hours = _int_setting(env, "ACCOUNTS_TOKEN_TTL_HOURS", int(DEFAULT_TOKEN_TTL.total_seconds() // 3600))
    rounds = _int_setting(env, "ACCOUNTS_BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS)

    return Settings(
        secret_key=secret,
        token_ttl=timedelta(hours=ttl_hours),
        bcrypt_rounds=rounds,
        seed_path=resolve_seed_path(env.get("ACCOUNTS_SEED_PATH")),
    )


@dataclass(frozen=True)
class SeedAccount:
    """An account created when the service starts."""

    email: str
    name: str
    password: Optional[str] = None
    password_hash: Optional[str] = None
    uuid: Optional[str] = None
    is_adm: bool = False
    profile: Dict[str, object] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Dict[str, object]) -> "SeedAccount":
        """Create a :class:`SeedAccount` from raw dictionary data."""
        required_fields = {"email", "name"}
        missing = required_fields - data.keys()
        if missing:
            raise ValueError(f"Missing required account fields: {', '.join(sorted(missing))}")
        if not data.get("password") and not data.get("password_hash"):
            raise ValueError(f"Seed account {data['email']} needs a password or password_hash")

        known = {"email", "name", "password", "password_hash", "uuid", "is_adm"}
        return SeedAccount(
            email=str(data["email"]).strip(),
            name=str(data["name"]),
            password=str(data["password"]) if data.get("password") else None,
            password_hash=str(data["password_hash"]) if data.get("password_hash") else None,
            uuid=str(data["uuid"]) if data.get("uuid") else None,
            is_adm=bool(data.get("is_adm", False)),
            profile={key: value for key, value in data.items() if key not in known},
        )


def load_seed_accounts(path: Path) -> List[SeedAccount]:
    """Load bootstrap accounts from a YAML file."""
    with path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    accounts_raw = raw.get("accounts") or []
    if not isinstance(accounts_raw, list):
        raise ValueError("Seed file must define a list under the 'accounts' key")
    return [SeedAccount.from_dict(item) for item in accounts_raw]


def resolve_seed_path(env_value: Optional[str]) -> Optional[Path]:
    if not env_value or not env_value.strip():
        return None
    return Path(env_value.strip()).expanduser().resolve(strict=False)


__all__ = [
    "SeedAccount",
    "Settings",
    "load_seed_accounts",
    "load_settings",
    "resolve_seed_path",
]
