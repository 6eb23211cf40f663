"""Typed access to environment toggles, with one-time .env loading.

Values are read from the process environment after an optional ``.env``
file has been loaded into it (python-dotenv never overrides variables that
are already set). Tests pass an explicit mapping instead, in which case no
``.env`` file is touched.

Example:
    ```python
    from heroku_api_core.config import EnvironmentReader

    reader = EnvironmentReader()
    debug = reader.get_flag("HEROKU_DEBUG", default=False)
    headers = reader.get_json_object("HEROKU_HEADERS")
    ```

Security Considerations:
    - Values read with ``mask_in_logs=True`` are logged as ``***``
    - Only the variable name is ever logged for tokens
    - Thread-safe dotenv loading with lock
"""

import json
import logging
import os
from collections.abc import Mapping
from threading import Lock

from dotenv import load_dotenv

from heroku_api_core.errors.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Values that switch a boolean toggle off
FALSE_VALUES: frozenset[str] = frozenset(["false", "0"])

# .env paths already loaded in this process (None is python-dotenv's own search)
_loaded_dotenv_paths: set[str | None] = set()
_dotenv_lock = Lock()


class EnvironmentReader:
    """Read configuration toggles from the environment.

    Each ``.env`` file is loaded at most once per process, however many
    readers are created.

    Attributes:
        _dotenv_loaded: Whether this reader's .env file has been loaded.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        *,
        dotenv_path: str | None = None,
        load_dotenv: bool = True,
    ):
        """Initialize the reader.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``; when an
                explicit mapping is given, .env loading is skipped.
            dotenv_path: Path to .env file. If None, python-dotenv searches
                parent directories.
            load_dotenv: Whether to load the .env file at all.
        """
        self._environ = environ
        self._dotenv_loaded = False
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv and environ is None

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def _ensure_dotenv_loaded(self) -> None:
        """Load the .env file into os.environ once per process (thread-safe)."""
        if self._dotenv_loaded:
            return

        with _dotenv_lock:
            if self._dotenv_path not in _loaded_dotenv_paths:
                try:
                    load_dotenv(dotenv_path=self._dotenv_path)
                    logger.debug("Loaded .env file for client settings")
                except Exception as e:
                    logger.warning(f"Failed to load .env file: {e}")
                _loaded_dotenv_paths.add(self._dotenv_path)
            self._dotenv_loaded = True

    def get(self, name: str, default: str | None = None, *, mask_in_logs: bool = False) -> str | None:
        """Return the raw value of ``name``, or ``default`` when unset."""
        if name not in self.environ:
            return default

        value = self.environ[name]
        shown = "***" if mask_in_logs else value
        logger.debug(f"Read environment variable '{name}': {shown}")
        return value

    def get_flag(self, name: str, default: bool) -> bool:
        """Return a boolean toggle.

        Unset or empty values yield ``default``. Otherwise the toggle is on
        unless its value is one of ``FALSE_VALUES`` (case-insensitive).
        """
        value = self.get(name)
        if not value:
            return default
        return value.strip().lower() not in FALSE_VALUES

    def get_int(self, name: str, default: int, *, minimum: int = 0) -> int:
        """Return an integer toggle, raising ConfigurationError on bad input."""
        value = self.get(name)
        if value is None or not value.strip():
            return default

        try:
            result = int(value)
        except ValueError:
            raise ConfigurationError(f"{name} must be an integer, got {value!r}", env_var_name=name) from None

        if result < minimum:
            raise ConfigurationError(f"{name} must be >= {minimum}, got {result}", env_var_name=name)
        return result

    def get_json_object(self, name: str) -> dict[str, str]:
        """Parse a JSON object of string values, e.g. ``{"X-Trace": "1"}``.

        Returns an empty dict when the variable is unset or empty.

        Raises:
            ConfigurationError: If the value is not a JSON object of strings.
        """
        value = self.get(name)
        if not value or not value.strip():
            return {}

        try:
            data = json.loads(value)
        except ValueError as e:
            raise ConfigurationError(f"{name} is not valid JSON: {e}", env_var_name=name) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"{name} must be a JSON object", env_var_name=name)

        non_strings = sorted(k for k, v in data.items() if not isinstance(v, str))
        if non_strings:
            raise ConfigurationError(
                f"{name} values must be strings (offending keys: {', '.join(non_strings)})",
                env_var_name=name,
            )
        return data
