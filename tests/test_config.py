from __future__ import annotations

import sys
import textwrap
from datetime import timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from accounts.api import create_app
from accounts.config import SeedAccount, load_seed_accounts, load_settings


def test_load_settings_defaults() -> None:
    settings = load_settings({"SECRET_KEY": "from-legacy-variable"})
    assert settings.secret_key == "from-legacy-variable"
    assert settings.token_ttl == timedelta(hours=24)
    assert settings.bcrypt_rounds == 10
    assert settings.seed_path is None


def test_load_settings_overrides(tmp_path: Path) -> None:
    settings = load_settings(
        {
            "ACCOUNTS_SECRET_KEY": "primary",
            "SECRET_KEY": "ignored",
            "ACCOUNTS_TOKEN_TTL_HOURS": "2",
            "ACCOUNTS_BCRYPT_ROUNDS": "4",
            "ACCOUNTS_SEED_PATH": str(tmp_path / "seed.yaml"),
        }
    )
    assert settings.secret_key == "primary"
    assert settings.token_ttl == timedelta(hours=2)
    assert settings.bcrypt_rounds == 4
    assert settings.seed_path == (tmp_path / "seed.yaml").resolve()


def test_load_settings_requires_secret() -> None:
    with pytest.raises(ValueError):
        load_settings({})


def test_load_settings_rejects_bad_integers() -> None:
    with pytest.raises(ValueError):
        load_settings({"SECRET_KEY": "s", "ACCOUNTS_BCRYPT_ROUNDS": "ten"})


def test_seed_account_requires_fields() -> None:
    with pytest.raises(ValueError):
        SeedAccount.from_dict({"email": "a@example.com", "password": "pw"})
    with pytest.raises(ValueError):
        SeedAccount.from_dict({"email": "a@example.com", "name": "A"})


def test_load_seed_accounts(tmp_path: Path) -> None:
    seed = tmp_path / "seed.yaml"
    seed.write_text(
        textwrap.dedent(
            """
            accounts:
              - email: root@example.com
                name: Root
                password: root-password
                uuid: root-id
                is_adm: true
              - email: ann@example.com
                name: Ann
                password_hash: "$2b$04$abcdefghijklmnopqrstuu"
                city: Porto
            """
        ),
        encoding="utf-8",
    )

    accounts = load_seed_accounts(seed)
    assert [account.email for account in accounts] == ["root@example.com", "ann@example.com"]
    assert accounts[0].is_adm is True
    assert accounts[0].uuid == "root-id"
    assert accounts[1].password is None
    assert accounts[1].profile == {"city": "Porto"}


def test_create_app_seeds_from_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    seed = tmp_path / "seed.yaml"
    seed.write_text(
        "accounts:\n  - email: root@example.com\n    name: Root\n    password: pw\n    is_adm: true\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("ACCOUNTS_SECRET_KEY", "tests-secret-key-with-enough-length")
    monkeypatch.setenv("ACCOUNTS_BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("ACCOUNTS_SEED_PATH", str(seed))

    app = create_app()
    users = app.state.store.all()
    assert len(users) == 1
    assert users[0].is_adm is True
