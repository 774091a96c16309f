"""
Session defaults and API key storage.

A :class:`TinifyDefaults` holds the options a caller set for the rest of
a session, plus an optional API key. One shared instance backs the public
functions; callers who want isolation create and pass their own.
"""

import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import yaml

from tinypress.core.config import BUILTIN_DEFAULTS, OPTION_NAMES, OptionValidator, ResizeSpec, ReturnPath
from tinypress.core.exceptions import InvalidCredentialError, MissingCredentialError, ValidationError
from tinypress.utils.logger import get_logger
from tinypress.utils.paths import PROJECT_ROOT_MARKERS, find_project_root


API_KEY_ENV = "TINY_API"
CONFIG_FILENAME = "tinify.yml"


def _display(value: Any) -> str:
    if isinstance(value, ReturnPath):
        return f"'{value.value}'"
    if isinstance(value, ResizeSpec):
        return value.describe()
    if isinstance(value, str):
        return f"'{value}'"
    return str(value)


def _display_default(name: str, value: Any) -> str:
    if value is None and name == "return_path":
        return "No return"
    if value is None and name == "resize":
        return "No resize"
    return _display(value)


def validate_api_key(key: Any) -> str:
    """Check that ``key`` is a single non-empty string."""
    if not isinstance(key, str) or not key.strip():
        raise InvalidCredentialError("API key must be a single non-empty string")
    return key


class TinifyDefaults:
    """Options set for a session, layered between call arguments and built-ins."""

    def __init__(self, **fields: Any):
        self._values: Dict[str, Any] = {}
        self._api_key: Optional[str] = None
        self.logger = get_logger()
        if fields:
            self.set(**fields)

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def set(self, **fields: Any) -> None:
        """
        Set one or more session defaults.

        Passing ``None`` clears a field back to its built-in value. Every
        value is validated before any is stored.

        Raises:
            ValidationError: No fields given, an unknown field, or an invalid value
        """
        if not fields:
            raise ValidationError(
                f"Provide at least one of {list(OPTION_NAMES)}; use describe() to show the current defaults"
            )

        validated = {}
        for name, value in fields.items():
            if value is None and name in OPTION_NAMES:
                validated[name] = None
            else:
                validated[name] = OptionValidator.validate_field(name, value)

        for name, value in validated.items():
            if value is None:
                self._values.pop(name, None)
                self.logger.info(f"Tinify '{name}' changed to: {_display_default(name, None)}")
            else:
                self._values[name] = value
                self.logger.info(f"Tinify '{name}' changed to: {_display(value)}")

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def as_dict(self) -> Dict[str, Any]:
        """Explicitly-set values only."""
        return dict(self._values)

    def describe(self) -> List[str]:
        """Log and return one line per option with its effective default."""
        lines = []
        for name in OPTION_NAMES:
            value = self._values.get(name, BUILTIN_DEFAULTS[name])
            lines.append(f"Tinify '{name}' default is: {_display_default(name, value)}")
        for line in lines:
            self.logger.info(line)
        return lines

    def reset(self) -> None:
        """Forget every session default and the session API key."""
        self._values.clear()
        self._api_key = None

    # ------------------------------------------------------------------
    # API key
    # ------------------------------------------------------------------

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key

    def set_key(self, key: Any) -> None:
        """Store an API key for the session."""
        self._api_key = validate_api_key(key)
        self.logger.debug("Tinify API key set for this session")

    # ------------------------------------------------------------------
    # Configuration files
    # ------------------------------------------------------------------

    def load_file(self, path: Path) -> List[str]:
        """
        Load defaults from a YAML file for fields that are not already set.

        The file is optional: a missing, unreadable or invalid file is
        ignored. Unknown keys are skipped.

        Returns:
            Names of the fields that were loaded
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as e:
            self.logger.debug(f"Skipping config file {path}: {e}")
            return []

        if not isinstance(data, Mapping):
            self.logger.debug(f"Skipping config file {path}: expected a mapping of options")
            return []

        pending = {
            name: data[name]
            for name in OPTION_NAMES
            if name in data and data[name] is not None and name not in self._values
        }
        try:
            validated = {name: OptionValidator.validate_field(name, value) for name, value in pending.items()}
        except ValidationError as e:
            self.logger.debug(f"Skipping config file {path}: {e}")
            return []

        self._values.update(validated)
        self.logger.debug(f"Loaded defaults {sorted(validated)} from {path}")
        return list(validated)

    def load_project_file(
        self, start: Optional[Path] = None, markers: Iterable[str] = PROJECT_ROOT_MARKERS
    ) -> List[str]:
        """Load ``tinify.yml`` from the project root above ``start`` (default: working directory)."""
        root = find_project_root(start or Path.cwd(), markers)
        if root is None:
            return []
        config_file = root / CONFIG_FILENAME
        if not config_file.is_file():
            return []
        return self.load_file(config_file)


# ============================================================================
# Shared Session
# ============================================================================

_default_session: Optional[TinifyDefaults] = None


def default_session() -> TinifyDefaults:
    """Return the shared session used when no :class:`TinifyDefaults` is passed."""
    global _default_session
    if _default_session is None:
        _default_session = TinifyDefaults()
    return _default_session


def reset_default_session() -> None:
    """Clear the shared session's defaults and API key."""
    default_session().reset()


# ============================================================================
# Credentials
# ============================================================================


def resolve_api_key(
    explicit: Any = None,
    session: Optional[TinifyDefaults] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Pick the API key to use.

    Order: ``explicit`` key, then the session key, then the ``TINY_API``
    environment variable.

    Raises:
        InvalidCredentialError: ``explicit`` is given but is not a non-empty string
        MissingCredentialError: No key is available
    """
    if explicit is not None:
        return validate_api_key(explicit)
    if session is not None and session.api_key:
        return session.api_key

    environ = os.environ if environ is None else environ
    env_key = environ.get(API_KEY_ENV, "")
    if env_key:
        return env_key

    raise MissingCredentialError(
        f"Please provide an API key with the 'key' argument, tinify_key(), or the {API_KEY_ENV} environment variable"
    )
