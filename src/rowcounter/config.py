"""Probe configuration.

Settings use the key names of the monitoring host's plugin configuration
(``dashboardName``, ``countChoice``, ...). They can be supplied as a plain
mapping by a host, or read from ``ROWCOUNTER_*`` environment variables,
optionally loaded from a ``.env`` file.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from dotenv import load_dotenv

from rowcounter.adapters.http.fetcher import DEFAULT_TIMEOUT, check_port, check_protocol
from rowcounter.core.errors import ConfigError
from rowcounter.core.models import (
    CountingMode,
    Credentials,
    DashboardKind,
    Endpoint,
    FilterKind,
    ReportFilter,
    ReportQuery,
)

ENV_PREFIX = "ROWCOUNTER_"

DEFAULT_PROTOCOL = "https"
DEFAULT_PORT = 8021
DEFAULT_TIMEFRAME = "Last 30 minutes"

CONFIG_KEYS = (
    "protocol",
    "httpPort",
    "username",
    "password",
    "dashboardName",
    "timeframeFilter",
    "dashboardOption",
    "countChoice",
    "filterBoolean",
    "systemProfileBoolean",
    "systemProfileFilter",
    "btBoolean",
    "btFilter",
    "ignoreCertificates",
    "timeoutSeconds",
)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}

E = TypeVar("E", bound=Enum)


def env_var_name(key: str) -> str:
    """Map a config key to its environment variable (``dashboardName`` -> ``ROWCOUNTER_DASHBOARD_NAME``)."""
    return ENV_PREFIX + re.sub(r"(?<!^)(?=[A-Z])", "_", key).upper()


def normalize_timeframe(value: str) -> str:
    """Turn ``Last 30 minutes`` into the ``LAST:30:MINUTES`` offset token."""
    return value.strip().replace(" ", ":").upper()


def _as_bool(mapping: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = mapping.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"{key} must be a boolean, got {value!r}", key=key)


def _as_str(mapping: Mapping[str, Any], key: str, default: str = "") -> str:
    value = mapping.get(key)
    if value is None:
        return default
    return str(value).strip()


def _as_number(mapping: Mapping[str, Any], key: str, default: float, kind: type = float) -> Any:
    value = mapping.get(key)
    if value is None or value == "":
        return kind(default)
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be a number, got {value!r}", key=key) from e


def _as_choice(mapping: Mapping[str, Any], key: str, enum: type[E], default: E) -> E:
    value = _as_str(mapping, key)
    if not value:
        return default
    for member in enum:
        if member.value.lower() == value.lower() or member.name.lower() == value.lower():
            return member
    choices = ", ".join(repr(m.value) for m in enum)
    raise ConfigError(f"{key} must be one of {choices}, got {value!r}", key=key)


@dataclass(frozen=True)
class ProbeConfig:
    """Validated probe settings.

    Build instances with :meth:`from_mapping` or :meth:`from_env`; both
    raise ConfigError when required values are missing.
    """

    username: str
    password: str = field(repr=False)
    dashboard_name: str
    protocol: str = DEFAULT_PROTOCOL
    port: int = DEFAULT_PORT
    timeframe: str = normalize_timeframe(DEFAULT_TIMEFRAME)
    dashboard_kind: DashboardKind = DashboardKind.BUSINESS_TRANSACTION
    counting_mode: CountingMode = CountingMode.ROW_COUNT
    filters_enabled: bool = False
    system_profile_enabled: bool = False
    system_profile_filter: str = ""
    transaction_filter_enabled: bool = False
    transaction_filter: str = ""
    ignore_certificates: bool = False
    timeout_seconds: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.username or not self.password:
            raise ConfigError("username and password are required", key="username")
        if not self.dashboard_name:
            raise ConfigError("Dashboard Name entry is required", key="dashboardName")
        check_protocol(self.protocol)
        check_port(self.port)
        if self.timeout_seconds <= 0:
            raise ConfigError("timeoutSeconds must be positive", key="timeoutSeconds")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> ProbeConfig:
        """Build a config from plugin-style keys.

        Raises:
            ConfigError: On missing required values or unparseable ones.
        """
        return cls(
            username=_as_str(mapping, "username"),
            password=str(mapping.get("password") or ""),
            dashboard_name=_as_str(mapping, "dashboardName"),
            protocol=_as_str(mapping, "protocol", DEFAULT_PROTOCOL).lower(),
            port=_as_number(mapping, "httpPort", DEFAULT_PORT, int),
            timeframe=normalize_timeframe(_as_str(mapping, "timeframeFilter", DEFAULT_TIMEFRAME)),
            dashboard_kind=_as_choice(
                mapping, "dashboardOption", DashboardKind, DashboardKind.BUSINESS_TRANSACTION
            ),
            counting_mode=_as_choice(mapping, "countChoice", CountingMode, CountingMode.ROW_COUNT),
            filters_enabled=_as_bool(mapping, "filterBoolean"),
            system_profile_enabled=_as_bool(mapping, "systemProfileBoolean"),
            system_profile_filter=_as_str(mapping, "systemProfileFilter"),
            transaction_filter_enabled=_as_bool(mapping, "btBoolean"),
            transaction_filter=_as_str(mapping, "btFilter"),
            ignore_certificates=_as_bool(mapping, "ignoreCertificates"),
            timeout_seconds=_as_number(mapping, "timeoutSeconds", DEFAULT_TIMEOUT),
        )

    @classmethod
    def from_env(
        cls,
        env_file: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> ProbeConfig:
        """Build a config from ``ROWCOUNTER_*`` environment variables.

        Args:
            env_file: Optional .env file loaded first (existing variables win).
            environ: Environment to read, defaults to os.environ.
        """
        if env_file is not None:
            load_dotenv(env_file, override=False)
        source = os.environ if environ is None else environ
        mapping = {
            key: source[env_var_name(key)] for key in CONFIG_KEYS if env_var_name(key) in source
        }
        return cls.from_mapping(mapping)

    @property
    def credentials(self) -> Credentials:
        return Credentials(username=self.username, password=self.password)

    def endpoint(self, host: str) -> Endpoint:
        """Endpoint of the report server running on ``host``."""
        return Endpoint(protocol=self.protocol, host=host, port=self.port)

    def report_query(self) -> ReportQuery:
        """Build the immutable report query, including optional filters."""
        filters: tuple[ReportFilter, ...] = ()
        if self.filters_enabled:
            filters = (
                ReportFilter(
                    kind=FilterKind.SYSTEM_PROFILE,
                    value=self.system_profile_filter,
                    enabled=self.system_profile_enabled,
                ),
                ReportFilter(
                    kind=FilterKind.TRANSACTION,
                    value=self.transaction_filter,
                    enabled=self.transaction_filter_enabled,
                ),
            )
        return ReportQuery(
            report_name=self.dashboard_name,
            timeframe=self.timeframe,
            filters=filters,
        )
