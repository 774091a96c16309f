from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from tinypress.core.exceptions import ValidationError
from tinypress.utils.logger import get_logger


# ============================================================================
# Enumerations
# ============================================================================


class ResizeMethod(Enum):
    """Resize methods understood by the Tinify API."""

    SCALE = "scale"
    FIT = "fit"
    COVER = "cover"
    THUMB = "thumb"


class ReturnPath(Enum):
    """Which form of the output path :func:`tinypress.tinify` returns."""

    ABSOLUTE = "absolute"
    RELATIVE = "relative"
    PROJECT = "project"
    ALL = "all"


_RETURN_PATH_ALIASES = {
    "abs": ReturnPath.ABSOLUTE,
    "absolute": ReturnPath.ABSOLUTE,
    "rel": ReturnPath.RELATIVE,
    "relative": ReturnPath.RELATIVE,
    "proj": ReturnPath.PROJECT,
    "project": ReturnPath.PROJECT,
    "all": ReturnPath.ALL,
}


class _Unset:
    """Marker for an option the caller did not supply."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

OPTION_NAMES = ("overwrite", "suffix", "quiet", "return_path", "resize")

DEFAULT_SUFFIX = "_tiny"


# ============================================================================
# Resize Specification
# ============================================================================


def _dimension(name: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"resize {name} must be a number, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"resize {name} must be a whole number of pixels, got {value}")
    if value <= 0:
        raise ValidationError(f"resize {name} must be positive, got {value}")
    return int(value)


@dataclass(frozen=True)
class ResizeSpec:
    """A remote resize request: method plus target width and/or height."""

    method: ResizeMethod
    width: Optional[int] = None
    height: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.method, ResizeMethod):
            try:
                method = ResizeMethod(self.method)
            except ValueError:
                valid = [m.value for m in ResizeMethod]
                raise ValidationError(f"resize method must be one of {valid}, got {self.method!r}") from None
            object.__setattr__(self, "method", method)

        object.__setattr__(self, "width", _dimension("width", self.width))
        object.__setattr__(self, "height", _dimension("height", self.height))

        if self.width is None and self.height is None:
            raise ValidationError("resize needs a width and/or a height")
        if self.method is ResizeMethod.SCALE:
            if self.width is not None and self.height is not None:
                raise ValidationError("resize method 'scale' takes a width OR a height, not both")
        elif self.width is None or self.height is None:
            raise ValidationError(f"resize method '{self.method.value}' needs both a width and a height")

    @classmethod
    def from_value(cls, value: Any) -> "ResizeSpec":
        """Build a spec from a :class:`ResizeSpec` or a ``method``/``width``/``height`` mapping."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            raise ValidationError(
                f"resize must be a mapping with 'method' and 'width' and/or 'height', got {value!r}"
            )

        unknown = set(value) - {"method", "width", "height"}
        if unknown:
            raise ValidationError(f"resize got unexpected keys: {sorted(unknown)}")
        if "method" not in value:
            raise ValidationError("resize needs a 'method'")

        return cls(method=value["method"], width=value.get("width"), height=value.get("height"))

    def to_payload(self) -> Dict[str, Dict[str, Any]]:
        """JSON body for the Tinify output endpoint."""
        resize: Dict[str, Any] = {"method": self.method.value}
        if self.width is not None:
            resize["width"] = self.width
        if self.height is not None:
            resize["height"] = self.height
        return {"resize": resize}

    def describe(self) -> str:
        dims = ", ".join(f"{k}={v}" for k, v in (("width", self.width), ("height", self.height)) if v is not None)
        return f"{self.method.value} ({dims})"


# ============================================================================
# Effective Options
# ============================================================================


@dataclass
class TinifyOptions:
    """Resolved options for a single compression."""

    overwrite: bool = False
    suffix: str = DEFAULT_SUFFIX
    quiet: bool = False
    return_path: Optional[ReturnPath] = None
    resize: Optional[ResizeSpec] = None


BUILTIN_DEFAULTS: Dict[str, Any] = {
    "overwrite": False,
    "suffix": DEFAULT_SUFFIX,
    "quiet": False,
    "return_path": None,
    "resize": None,
}


# ============================================================================
# Option Validator
# ============================================================================


class OptionValidator:
    """Validates and normalises option values."""

    @staticmethod
    def validate(options: Mapping[str, Any]) -> TinifyOptions:
        """Validate a complete set of raw option values and build :class:`TinifyOptions`."""
        overwrite = OptionValidator.validate_overwrite(options["overwrite"])
        suffix = OptionValidator.validate_suffix(options["suffix"])
        quiet = OptionValidator.validate_quiet(options["quiet"])
        return_path = OptionValidator.validate_return_path(options["return_path"])
        resize = OptionValidator.validate_resize(options["resize"])

        if overwrite and suffix != DEFAULT_SUFFIX:
            get_logger().warning(f"suffix '{suffix}' is ignored because overwrite is set to True")

        return TinifyOptions(
            overwrite=overwrite,
            suffix=suffix,
            quiet=quiet,
            return_path=return_path,
            resize=resize,
        )

    @staticmethod
    def validate_field(name: str, value: Any) -> Any:
        """Validate one option by name."""
        validators = {
            "overwrite": OptionValidator.validate_overwrite,
            "suffix": OptionValidator.validate_suffix,
            "quiet": OptionValidator.validate_quiet,
            "return_path": OptionValidator.validate_return_path,
            "resize": OptionValidator.validate_resize,
        }
        if name not in validators:
            raise ValidationError(f"Unknown option '{name}', expected one of {list(OPTION_NAMES)}")
        return validators[name](value)

    @staticmethod
    def validate_overwrite(overwrite: Any) -> bool:
        if not isinstance(overwrite, bool):
            raise ValidationError(f"overwrite must be True or False, got {overwrite!r}")
        return overwrite

    @staticmethod
    def validate_suffix(suffix: Any) -> str:
        if not isinstance(suffix, str) or suffix == "":
            raise ValidationError(f"suffix must be a non-empty string, got {suffix!r}")
        return suffix

    @staticmethod
    def validate_quiet(quiet: Any) -> bool:
        if not isinstance(quiet, bool):
            raise ValidationError(f"quiet must be True or False, got {quiet!r}")
        return quiet

    @staticmethod
    def validate_return_path(return_path: Any) -> Optional[ReturnPath]:
        if return_path is None or isinstance(return_path, ReturnPath):
            return return_path
        if isinstance(return_path, str):
            key = return_path.lower()
            if key == "none":
                return None
            if key in _RETURN_PATH_ALIASES:
                return _RETURN_PATH_ALIASES[key]
        raise ValidationError(
            f"return_path must be one of {[p.value for p in ReturnPath]} or None, got {return_path!r}"
        )

    @staticmethod
    def validate_resize(resize: Any) -> Optional[ResizeSpec]:
        if resize is None:
            return None
        return ResizeSpec.from_value(resize)


# ============================================================================
# Resolution
# ============================================================================


def resolve_options(
    call: Mapping[str, Any],
    session: Optional[Mapping[str, Any]] = None,
    builtin: Mapping[str, Any] = BUILTIN_DEFAULTS,
) -> TinifyOptions:
    """
    Merge call arguments, session defaults and built-in defaults.

    For each option the call value wins unless it is :data:`UNSET`; then a
    session value is used if one is set; otherwise the built-in constant.
    The merged values are validated together before anything is returned.

    Args:
        call: Option values passed to the current call (``UNSET`` when omitted)
        session: Explicitly-set session defaults
        builtin: Package defaults

    Returns:
        Validated :class:`TinifyOptions`
    """
    session = session or {}
    merged: Dict[str, Any] = {}
    for name in OPTION_NAMES:
        value = call.get(name, UNSET)
        if value is UNSET:
            value = session.get(name, UNSET)
        if value is UNSET:
            value = builtin[name]
        merged[name] = value
    return OptionValidator.validate(merged)
