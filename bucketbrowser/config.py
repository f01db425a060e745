# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Configuration for the bucket browser.

Configuration is loaded from a YAML file.  The default location follows
the XDG Base Directory Specification:

    ``$XDG_CONFIG_HOME/bucketbrowser/bucketbrowser.yaml``
    (typically ``~/.config/bucketbrowser/bucketbrowser.yaml``)

``!env VAR_NAME`` tags resolve values from environment variables.  When
the default file does not exist, configuration is read directly from the
standard ``AWS_*`` environment variables instead.

Example::

    storage:
      bucket: !env AWS_BUCKET_NAME
      region: !env AWS_REGION
      access_key_id: !env AWS_ACCESS_KEY_ID
      secret_access_key: !env AWS_SECRET_ACCESS_KEY
    server:
      port: 5300
    uploads:
      folders: [images, General]
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeVar, overload

import yaml
from platformdirs import user_config_path

from bucketbrowser.dotenv_loader import APP_NAME, load_dotenv_once
from bucketbrowser.logging import SecretFilter
from bucketbrowser.signing import Credential
from bucketbrowser.signing.constants import MAX_PRESIGNED_TTL


logger = logging.getLogger(__name__)

#: Region used when none is configured.
DEFAULT_REGION = "us-east-2"

#: Upload destinations offered by the UI.
DEFAULT_FOLDERS = (
    "images",
    "Sound Vision",
    "Network Manager",
    "Riders",
    "General",
)

_BOOL_TRUTHY = frozenset({"true", "1", "yes", "on"})
_BOOL_FALSY = frozenset({"false", "0", "no", "off"})


class ConfigError(Exception):
    """Base exception for configuration errors."""


def get_config_path() -> Path:
    """Return the default config file path.

    Returns:
        ``$XDG_CONFIG_HOME/bucketbrowser/bucketbrowser.yaml``.
    """
    return user_config_path(APP_NAME) / "bucketbrowser.yaml"


# ---------------------------------------------------------------------------
# YAML ``!env`` tag
# ---------------------------------------------------------------------------


class _EnvVar:
    """Placeholder for an unresolved ``!env VAR_NAME`` tag."""

    def __init__(self, var_name: str) -> None:
        self.var_name = var_name


def _env_constructor(loader: yaml.SafeLoader, node: yaml.Node) -> _EnvVar:
    """Handle ``!env VAR_NAME`` in YAML."""
    return _EnvVar(str(loader.construct_scalar(node)))


def _make_loader() -> type[yaml.SafeLoader]:
    """Create a YAML loader that understands ``!env``."""

    class EnvLoader(yaml.SafeLoader):
        pass

    EnvLoader.add_constructor("!env", _env_constructor)
    return EnvLoader


# ---------------------------------------------------------------------------
# Value resolution
# ---------------------------------------------------------------------------


def _coerce_bool(value: object) -> bool:
    """Coerce a value to bool, handling string representations."""
    if isinstance(value, bool):
        return value
    s = str(value).lower().strip()
    if s in _BOOL_TRUTHY:
        return True
    if s in _BOOL_FALSY:
        return False
    raise ConfigError(f"Cannot convert {value!r} to bool")


def _raw_resolve(value: object) -> str | None:
    """Resolve an ``_EnvVar`` to its string value, or stringify literals.

    Unset and empty environment variables both resolve to None.
    """
    if isinstance(value, _EnvVar):
        return os.environ.get(value.var_name) or None
    if value is None:
        return None
    return str(value)


_MISSING = object()

_T = TypeVar("_T")


@overload
def _resolve(value: object, coerce: type[_T], *, default: _T) -> _T: ...


@overload
def _resolve(value: object, coerce: type[_T], *, required: str) -> _T: ...


@overload
def _resolve(value: object, coerce: type[_T]) -> _T | None: ...


def _resolve(
    value: object,
    coerce: type[Any],
    *,
    default: object = _MISSING,
    required: str = "",
) -> Any:
    """Resolve a YAML value, handling ``!env`` tags and type coercion.

    Args:
        value: Raw value from YAML (may be ``_EnvVar``, None, or a
            literal already parsed by PyYAML).
        coerce: Target type (``str``, ``int``, ``bool``).
        default: Default when value is absent.
        required: Human-readable field name.  When set, raises
            ``ConfigError`` if the value is absent.

    Returns:
        The resolved, coerced value, or None when optional and absent.

    Raises:
        ConfigError: If a required value is absent or coercion fails.
    """
    if not isinstance(value, _EnvVar) and value is not None:
        if coerce is bool:
            return _coerce_bool(value)
        if isinstance(value, coerce) and not (
            coerce is int and isinstance(value, bool)
        ):
            return value

    resolved = _raw_resolve(value)

    if resolved is None:
        if required:
            if isinstance(value, _EnvVar):
                raise ConfigError(
                    f"Required config '{required}': environment variable "
                    f"'{value.var_name}' is not set"
                )
            raise ConfigError(f"Required config '{required}' is missing")
        if default is not _MISSING:
            return default
        return None

    if coerce is bool:
        return _coerce_bool(resolved)
    try:
        return coerce(resolved)
    except ValueError as e:
        raise ConfigError(
            f"Cannot convert {resolved!r} to {coerce.__name__}"
        ) from e


def _resolve_string_list(value: object, *, name: str) -> list[str]:
    """Resolve a list of strings, handling ``!env`` for each element.

    Raises:
        ConfigError: If the value is not a list.
    """
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(
            f"Config '{name}' must be a list, got {type(value).__name__}"
        )
    result: list[str] = []
    for item in value:
        resolved = _raw_resolve(item)
        if resolved:
            result.append(resolved)
    return result


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a YAML mapping")
    return section


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StorageConfig:
    """Object storage connection settings.

    Attributes:
        bucket: Bucket name.
        access_key_id: Access key ID.
        secret_access_key: Secret access key (auto-redacted in logs).
        region: Bucket region.
        session_token: Optional STS session token (auto-redacted in logs).
        endpoint_url: Base URL of an S3-compatible service.  Implies
            path-style addressing.
        force_path_style: Use path-style addressing against AWS.
    """

    bucket: str
    access_key_id: str
    secret_access_key: str = field(repr=False)
    region: str = DEFAULT_REGION
    session_token: str | None = field(default=None, repr=False)
    endpoint_url: str | None = None
    force_path_style: bool = False

    def __post_init__(self) -> None:
        """Validate settings and register secrets.

        Raises:
            ValueError: If a required setting is empty.
        """
        SecretFilter.register_secret(self.secret_access_key)
        SecretFilter.register_secret(self.session_token)

        if not self.bucket:
            raise ValueError("storage.bucket cannot be empty")
        if not self.region:
            raise ValueError("storage.region cannot be empty")
        if not self.access_key_id or not self.secret_access_key:
            raise ValueError(
                "storage.access_key_id and storage.secret_access_key "
                "must both be set"
            )
        if self.endpoint_url and not self.endpoint_url.startswith(
            ("http://", "https://")
        ):
            raise ValueError(
                f"storage.endpoint_url must be an http(s) URL: "
                f"{self.endpoint_url}"
            )

    @property
    def credential(self) -> Credential:
        return Credential(
            access_key_id=self.access_key_id,
            secret_access_key=self.secret_access_key,
            session_token=self.session_token,
        )


@dataclass(frozen=True)
class ServerSettings:
    """Web server settings.

    Attributes:
        host: Bind address.
        port: Listen port.
        max_upload_mb: Largest accepted upload, in MiB.
    """

    host: str = "127.0.0.1"
    port: int = 5300
    max_upload_mb: int = 250

    def __post_init__(self) -> None:
        if not (1 <= self.port <= 65535):
            raise ValueError(f"Invalid server port: {self.port}")
        if self.max_upload_mb < 1:
            raise ValueError(
                f"server.max_upload_mb must be >= 1: {self.max_upload_mb}"
            )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration.

    Attributes:
        storage: Object storage settings.
        server: Web server settings.
        max_collision_attempts: Names probed per upload before giving up.
        folders: Upload folders offered by the UI.
        download_expiry: Lifetime of download links, in seconds.
    """

    storage: StorageConfig
    server: ServerSettings = field(default_factory=ServerSettings)
    max_collision_attempts: int = 100
    folders: tuple[str, ...] = DEFAULT_FOLDERS
    download_expiry: int = 3600

    def __post_init__(self) -> None:
        """Validate configuration.

        Raises:
            ValueError: If configuration is invalid.
        """
        if self.max_collision_attempts < 1:
            raise ValueError(
                f"uploads.max_collision_attempts must be >= 1: "
                f"{self.max_collision_attempts}"
            )
        if not (1 <= self.download_expiry <= MAX_PRESIGNED_TTL):
            raise ValueError(
                f"links.download_expiry must be between 1 and "
                f"{MAX_PRESIGNED_TTL} seconds: {self.download_expiry}"
            )
        for folder in self.folders:
            if not folder.strip("/"):
                raise ValueError(f"Invalid upload folder: {folder!r}")

        logger.info(
            "Config loaded: bucket=%s, region=%s, server=%s:%d",
            self.storage.bucket,
            self.storage.region,
            self.server.host,
            self.server.port,
        )

    @classmethod
    def load(cls, config_path: Path | None = None) -> "AppConfig":
        """Load configuration from YAML, or from the environment.

        An explicitly given path must exist.  Without one, the XDG default
        is used when present and the environment otherwise.

        Raises:
            ConfigError: If the file is missing or values are invalid.
            ValueError: If a value fails validation.
        """
        if config_path is not None:
            return cls.from_yaml(config_path)
        default_path = get_config_path()
        if default_path.exists():
            return cls.from_yaml(default_path)
        logger.debug("No config at %s, using environment", default_path)
        return cls.from_env()

    @classmethod
    def from_yaml(cls, config_path: Path | None = None) -> "AppConfig":
        """Load configuration from a YAML file.

        A ``.env`` file is loaded first if present.

        Args:
            config_path: Path to the YAML file.  Defaults to the XDG path.

        Returns:
            AppConfig instance.

        Raises:
            ConfigError: If the file is missing or required values are absent.
        """
        load_dotenv_once()

        if config_path is None:
            config_path = get_config_path()

        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            try:
                raw = yaml.load(f, Loader=_make_loader())
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigError(
                f"Config file must be a YAML mapping: {config_path}"
            )

        return cls._from_raw(raw)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppConfig":
        """Build configuration from ``AWS_*`` environment variables.

        Reads ``AWS_BUCKET_NAME``, ``AWS_REGION`` (default ``us-east-2``),
        ``AWS_ACCESS_KEY_ID``, ``AWS_SECRET_ACCESS_KEY`` and the optional
        ``AWS_SESSION_TOKEN`` and ``AWS_ENDPOINT_URL``.

        Raises:
            ConfigError: If a required variable is not set.
        """
        if environ is None:
            load_dotenv_once()
            environ = os.environ

        def require(name: str) -> str:
            value = environ.get(name)
            if not value:
                raise ConfigError(f"Environment variable '{name}' is not set")
            return value

        storage = StorageConfig(
            bucket=require("AWS_BUCKET_NAME"),
            region=environ.get("AWS_REGION") or DEFAULT_REGION,
            access_key_id=require("AWS_ACCESS_KEY_ID"),
            secret_access_key=require("AWS_SECRET_ACCESS_KEY"),
            session_token=environ.get("AWS_SESSION_TOKEN") or None,
            endpoint_url=environ.get("AWS_ENDPOINT_URL") or None,
        )
        return cls(storage=storage)

    @classmethod
    def _from_raw(cls, raw: Mapping[str, Any]) -> "AppConfig":
        """Build config from parsed (but unresolved) YAML."""
        storage_raw = _section(raw, "storage")
        server_raw = _section(raw, "server")
        uploads_raw = _section(raw, "uploads")
        links_raw = _section(raw, "links")

        storage = StorageConfig(
            bucket=_resolve(
                storage_raw.get("bucket"), str, required="storage.bucket"
            ),
            region=_resolve(
                storage_raw.get("region"), str, default=DEFAULT_REGION
            ),
            access_key_id=_resolve(
                storage_raw.get("access_key_id"),
                str,
                required="storage.access_key_id",
            ),
            secret_access_key=_resolve(
                storage_raw.get("secret_access_key"),
                str,
                required="storage.secret_access_key",
            ),
            session_token=_resolve(storage_raw.get("session_token"), str),
            endpoint_url=_resolve(storage_raw.get("endpoint_url"), str),
            force_path_style=_resolve(
                storage_raw.get("force_path_style"), bool, default=False
            ),
        )

        server = ServerSettings(
            host=_resolve(server_raw.get("host"), str, default="127.0.0.1"),
            port=_resolve(server_raw.get("port"), int, default=5300),
            max_upload_mb=_resolve(
                server_raw.get("max_upload_mb"), int, default=250
            ),
        )

        raw_folders = uploads_raw.get("folders")
        folders = (
            DEFAULT_FOLDERS
            if raw_folders is None
            else tuple(
                _resolve_string_list(raw_folders, name="uploads.folders")
            )
        )

        return cls(
            storage=storage,
            server=server,
            max_collision_attempts=_resolve(
                uploads_raw.get("max_collision_attempts"), int, default=100
            ),
            folders=folders,
            download_expiry=_resolve(
                links_raw.get("download_expiry"), int, default=3600
            ),
        )
