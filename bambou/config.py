"""
Session configuration.

Values come from the caller or from BAMBOU_* environment variables. They are
used as supplied; only missing required values are rejected.
"""

import os
import ssl
from dataclasses import dataclass, field

from bambou.core.client import DEFAULT_TIMEOUT
from bambou.core.errors import ValidationError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class SessionConfig:
    """Immutable connection settings for a ``Session``."""

    url: str
    username: str
    password: str = field(repr=False)
    organization: str
    # API prefix appended to url, e.g. /nuage/api/v5_0
    root: str = ""
    api_key: str | None = field(default=None, repr=False)
    ca_file: str | None = None
    ca_path: str | None = None
    verify_hostname: bool = True
    timeout: float = DEFAULT_TIMEOUT

    @property
    def base_url(self) -> str:
        """URL every entity path is appended to."""
        return f"{self.url.rstrip('/')}{self.root}"

    @classmethod
    def from_env(
        cls,
        url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        organization: str | None = None,
        root: str | None = None,
        api_key: str | None = None,
        ca_file: str | None = None,
        ca_path: str | None = None,
        verify_hostname: bool | None = None,
        timeout: float | None = None,
    ) -> "SessionConfig":
        """
        Build a configuration, filling unset arguments from the environment.

        Args:
            url: API URL (or BAMBOU_URL env var)
            username: Login name (or BAMBOU_USERNAME env var)
            password: Login password (or BAMBOU_PASSWORD env var)
            organization: Tenant name (or BAMBOU_ORGANIZATION env var)
            root: API prefix (or BAMBOU_API_ROOT env var)
            api_key: Known API key (or BAMBOU_API_KEY env var)
            ca_file: CA bundle file (or BAMBOU_CA_FILE env var)
            ca_path: CA directory (or BAMBOU_CA_PATH env var)
            verify_hostname: Check server hostname (or BAMBOU_VERIFY_HOSTNAME env var)
            timeout: Request timeout in seconds (or BAMBOU_TIMEOUT env var)

        Raises:
            ValidationError: If a required value is missing or malformed

        """
        values = {
            "url": url or os.environ.get("BAMBOU_URL"),
            "username": username or os.environ.get("BAMBOU_USERNAME"),
            "password": password or os.environ.get("BAMBOU_PASSWORD"),
            "organization": organization or os.environ.get("BAMBOU_ORGANIZATION"),
        }
        missing = [name for name, value in values.items() if not value]
        if missing:
            env_names = ", ".join(f"BAMBOU_{name.upper()}" for name in missing)
            raise ValidationError(
                f"Missing session configuration: {', '.join(missing)}. Set {env_names} or pass them explicitly",
                {"missing": missing},
            )

        if verify_hostname is None:
            env_verify = os.environ.get("BAMBOU_VERIFY_HOSTNAME")
            verify_hostname = env_verify.strip().lower() in _TRUE_VALUES if env_verify else True

        if timeout is None:
            env_timeout = os.environ.get("BAMBOU_TIMEOUT")
            try:
                timeout = float(env_timeout) if env_timeout else DEFAULT_TIMEOUT
            except ValueError as e:
                raise ValidationError(f"Invalid BAMBOU_TIMEOUT: {env_timeout}") from e

        return cls(
            url=values["url"],
            username=values["username"],
            password=values["password"],
            organization=values["organization"],
            root=root if root is not None else os.environ.get("BAMBOU_API_ROOT", ""),
            api_key=api_key or os.environ.get("BAMBOU_API_KEY"),
            ca_file=ca_file or os.environ.get("BAMBOU_CA_FILE"),
            ca_path=ca_path or os.environ.get("BAMBOU_CA_PATH"),
            verify_hostname=verify_hostname,
            timeout=timeout,
        )

    def ssl_context(self) -> ssl.SSLContext | None:
        """
        Build the TLS context for HTTPS requests.

        Returns None when no trust material is given and hostname checks are
        on, so the system defaults apply.
        """
        if self.ca_file is None and self.ca_path is None and self.verify_hostname:
            return None
        context = ssl.create_default_context(cafile=self.ca_file, capath=self.ca_path)
        if not self.verify_hostname:
            context.check_hostname = False
        return context
