"""Configuration helpers for the RS list server."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml

_DEFAULT_SERVER_CONFIG = Path(__file__).resolve().parent / "server.yaml"


@dataclass(frozen=True)
class StorageConfig:
    backend: str
    options: Mapping[str, Any]


@dataclass(frozen=True)
class UsersConfig:
    default_vote_num: int


@dataclass(frozen=True)
class ServerConfig:
    listen: Mapping[str, Any]
    storage: StorageConfig
    users: UsersConfig


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    return yaml.safe_load(path.read_text()) or {}


def load_server_config(path: Path) -> ServerConfig:
    data = _load_yaml(path)
    storage = data.get("storage", {})
    options = dict(storage.get("options") or {})
    users = data.get("users", {})
    return ServerConfig(
        listen=data.get("listen", {}),
        storage=StorageConfig(
            backend=str(storage.get("backend", "in_memory")),
            options=options,
        ),
        users=UsersConfig(
            default_vote_num=int(users.get("default_vote_num", 10)),
        ),
    )


@lru_cache(maxsize=1)
def get_server_config() -> ServerConfig:
    path = Path(os.getenv("RSLIST_CONFIG_PATH", _DEFAULT_SERVER_CONFIG))
    return load_server_config(path)
