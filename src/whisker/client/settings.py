"""Client configuration — port and host rules, plus their persistence.

The persisted record is a JSON object::

    {"port": 8888, "hostRules": ["localhost", "/\\.test$/i"]}

Anything that does not look like that on load is replaced by the defaults;
a broken configuration never stops the client from starting.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Protocol

from whisker.client.hosts import HostRule, LiteralRule, matches, parse_host_rule

DEFAULT_PORT = 8888


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Immutable client configuration.

    Attributes:
        port: Update server port.
        host_rules: Ordered allow-list of host rules; first match wins.

    """

    port: int = DEFAULT_PORT
    host_rules: tuple[HostRule, ...] = ()

    def is_enabled(self, host: str) -> bool:
        return matches(self.host_rules, host)

    def with_host(self, host: str) -> ClientConfig:
        """A copy with a literal rule for *host* appended."""
        return replace(self, host_rules=(*self.host_rules, LiteralRule(host=host)))

    def to_json(self) -> dict[str, Any]:
        return {
            "port": self.port,
            "hostRules": [rule.serialize() for rule in self.host_rules],
        }


class ConfigStore(Protocol):
    """Where the persisted configuration text lives."""

    def read(self) -> str | None: ...

    def write(self, text: str) -> None: ...


class MemoryStore:
    """In-memory store, for embedding and tests."""

    def __init__(self, text: str | None = None) -> None:
        self.text = text

    def read(self) -> str | None:
        return self.text

    def write(self, text: str) -> None:
        self.text = text


class FileStore:
    """Stores the configuration as a JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def read(self) -> str | None:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(text, encoding="utf-8")
        tmp.replace(self.path)


def _parse_port(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        port = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        port = int(value.strip())
    else:
        return None
    return port if port > 0 else None


def parse_client_config(
    data: object,
    log: Callable[..., None] | None = None,
) -> ClientConfig | None:
    """Build a ClientConfig from decoded JSON, or None if it is malformed.

    Rules whose pattern does not compile are dropped (and logged); every
    other shape problem rejects the whole record.

    """
    if not isinstance(data, dict):
        return None
    port = _parse_port(data.get("port", DEFAULT_PORT))
    raw_rules = data.get("hostRules", [])
    if port is None or not isinstance(raw_rules, list):
        return None
    if not all(isinstance(r, str) for r in raw_rules):
        return None

    rules: list[HostRule] = []
    for text in raw_rules:
        if not text:
            continue
        try:
            rules.append(parse_host_rule(text))
        except (re.error, OverflowError) as exc:
            if log is not None:
                log("Ignoring host rule", repr(text), f"({exc})")
    return ClientConfig(port=port, host_rules=tuple(rules))


def load_client_config(
    store: ConfigStore,
    log: Callable[..., None] | None = None,
) -> ClientConfig:
    """Load the persisted configuration, falling back to defaults."""
    try:
        text = store.read()
    except OSError:
        text = None
    if not text:
        return ClientConfig()
    try:
        data = json.loads(text)
    except (ValueError, RecursionError):
        return ClientConfig()
    return parse_client_config(data, log) or ClientConfig()


def dump_client_config(config: ClientConfig) -> str:
    return json.dumps(config.to_json())


def save_client_config(store: ConfigStore, config: ClientConfig) -> None:
    store.write(dump_client_config(config))
