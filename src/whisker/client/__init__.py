"""Client layer — session lifecycle and per-host enablement.

Connects to the update server from a page, decides per hostname whether
updates apply, and reports status to a UI panel.
"""

from whisker.client.channel import (
    ConfigLoaded,
    LogLine,
    Panel,
    PanelChannel,
    PanelMessage,
    StatusChange,
)
from whisker.client.controller import Controller, status_event
from whisker.client.hosts import (
    HostRule,
    LiteralRule,
    PatternRule,
    find_rule,
    matches,
    parse_host_rule,
    serialize_host_rule,
)
from whisker.client.session import Backoff, Session
from whisker.client.settings import (
    ClientConfig,
    ConfigStore,
    FileStore,
    MemoryStore,
    dump_client_config,
    load_client_config,
    parse_client_config,
)

__all__ = [
    "Backoff",
    "ClientConfig",
    "ConfigLoaded",
    "ConfigStore",
    "Controller",
    "FileStore",
    "HostRule",
    "LiteralRule",
    "LogLine",
    "MemoryStore",
    "Panel",
    "PanelChannel",
    "PanelMessage",
    "PatternRule",
    "Session",
    "StatusChange",
    "dump_client_config",
    "find_rule",
    "load_client_config",
    "matches",
    "parse_client_config",
    "parse_host_rule",
    "serialize_host_rule",
    "status_event",
]
