"""
=============================================================================
ROUTE PARAMETERS
=============================================================================

Values captured from a path template are handed to the handler as a
ParameterBag: a read-only mapping from parameter name to ParameterValue.

    Template:  /orders/{order-id}/items/{index}
    Request:   /orders/A17/items/3

    ┌─────────────────────────────────────────────────────────────────┐
    │  ParameterBag                                                    │
    │  ───────────────────────────────────────────────────────────── │
    │  "orderid"  →  ParameterValue("A17")                            │
    │  "index"    →  ParameterValue("3")                              │
    └─────────────────────────────────────────────────────────────────┘

    params["order-id"].as_str()   → "A17"
    params.orderid.as_str()       → "A17"
    params["index"].as_int()      → 3
    params["missing"].has_value   → False

=============================================================================
KEY RULES
=============================================================================

Keys are CASE-SENSITIVE but HYPHEN-INSENSITIVE: every "-" is removed from
a key both when it is stored and when it is looked up. That is what lets
a template parameter called "order-id" be read as an attribute
(params.orderid), since hyphens are not legal in Python names.

Looking up a key that is not present never raises. It returns a
ParameterValue without a value, and the conversions decide what that
means (as_bool() → False, as_str() → "", as_int() → ConversionError).

Attribute access only reaches parameters whose names are not already
attributes of the bag. Mapping and bag methods win, so params.values is
the method even when the template has a {values} placeholder; the same
goes for keys, items, get, convert, try_convert, to_dict, create and
empty. Use item access (params["values"]) for those names.

=============================================================================
CONVERSIONS
=============================================================================

Raw values are usually strings. Each conversion parses the string with
the matching rules and raises ConversionError (a ValueError) on bad
input, so a handler can let it propagate or catch ValueError itself.

    ┌──────────────┬──────────────────────┬─────────────────────────────┐
    │  Method      │  Result              │  Accepts                    │
    ├──────────────┼──────────────────────┼─────────────────────────────┤
    │  as_str      │  str                 │  anything                   │
    │  as_bool     │  bool                │  anything (never raises)    │
    │  as_int      │  int (32-bit)        │  "-12", " 7 "               │
    │  as_long     │  int (64-bit)        │  "9000000000"               │
    │  as_float    │  float               │  "1.5", "1e3"               │
    │  as_double   │  float               │  "1.5", "1e3"               │
    │  as_decimal  │  Decimal             │  "19.99"                    │
    │  as_guid     │  uuid.UUID           │  "0f8fad5b-d9cb-469f-..."   │
    │  as_datetime │  datetime            │  ISO 8601, RFC 1123         │
    │  as_timedelta│  timedelta           │  "1.02:03:04", "02:30", "5" │
    └──────────────┴──────────────────────┴─────────────────────────────┘
"""

import re
import uuid
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Type


INT32_RANGE = (-(2 ** 31), 2 ** 31 - 1)
INT64_RANGE = (-(2 ** 63), 2 ** 63 - 1)

_INTEGER_PATTERN = re.compile(r"^\s*[+-]?\d+\s*$")

# [-][d.]hh:mm[:ss[.fffffff]]
_TIMESPAN_PATTERN = re.compile(
    r"^\s*(?P<sign>-)?"
    r"(?:(?P<days>\d+)\.)?"
    r"(?P<hours>\d{1,2}):(?P<minutes>\d{1,2})"
    r"(?::(?P<seconds>\d{1,2})(?:\.(?P<fraction>\d{1,7}))?)?\s*$"
)
_DAYS_PATTERN = re.compile(r"^\s*(?P<sign>-)?(?P<days>\d+)\s*$")


class ConversionError(ValueError):
    """
    Raised when a parameter value cannot be converted to the requested type.

    Attributes:
        value: The raw value that failed to convert
        target: Name of the requested type
    """

    def __init__(self, value: Any, target: str, reason: str = ""):
        self.value = value
        self.target = target
        message = f"Cannot convert {value!r} to {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


def neutral_key(key: str) -> str:
    """Strip hyphens from a parameter key."""
    return key.replace("-", "")


class ParameterValue:
    """
    One captured parameter value plus typed conversions.

    Example:
        >>> ParameterValue("42").as_int()
        42
        >>> ParameterValue(None).as_bool()
        False
    """

    __slots__ = ("_value",)

    def __init__(self, value: Any = None):
        self._value = value

    @property
    def value(self) -> Any:
        """The raw stored value (None when absent)."""
        return self._value

    @property
    def has_value(self) -> bool:
        return self._value is not None

    # =========================================================================
    # CONVERSIONS
    # =========================================================================

    def as_str(self) -> str:
        if self._value is None:
            return ""
        return str(self._value)

    def as_bool(self) -> bool:
        """
        Convert to bool.

        Rules, in order:
            - no value                        → False
            - a bool                          → itself
            - "true" / "false" (any case)     → the parsed value
            - any other string                → True
            - anything else                   → its truthiness
        """
        value = self._value
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            text = value.strip().lower()
            if text == "true":
                return True
            if text == "false":
                return False
            return True
        return bool(value)

    def as_int(self) -> int:
        """Convert to an integer in the signed 32-bit range."""
        return self._to_integer("int", INT32_RANGE)

    def as_long(self) -> int:
        """Convert to an integer in the signed 64-bit range."""
        return self._to_integer("long", INT64_RANGE)

    def as_float(self) -> float:
        return self._to_float("float")

    def as_double(self) -> float:
        return self._to_float("double")

    def as_decimal(self) -> Decimal:
        value = self._require("decimal")
        if isinstance(value, Decimal):
            return value
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ConversionError(value, "decimal") from None
        if not result.is_finite():
            raise ConversionError(value, "decimal", "not a finite number")
        return result

    def as_guid(self) -> uuid.UUID:
        value = self._require("guid")
        if isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(str(value).strip())
        except ValueError:
            raise ConversionError(value, "guid") from None

    def as_datetime(self) -> datetime:
        """
        Convert to a datetime.

        Accepts ISO 8601 ("2024-03-01T10:00:00") and RFC 1123
        ("Fri, 01 Mar 2024 10:00:00 GMT").
        """
        value = self._require("datetime")
        if isinstance(value, datetime):
            return value

        text = str(value).strip()
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            pass
        try:
            return parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError):
            raise ConversionError(value, "datetime") from None

    def as_timedelta(self) -> timedelta:
        """
        Convert to a timedelta.

        Accepts "[-][d.]hh:mm[:ss[.fffffff]]" or a whole number of days.
        """
        value = self._require("timedelta")
        if isinstance(value, timedelta):
            return value

        text = str(value)
        match = _DAYS_PATTERN.match(text)
        if match:
            result = timedelta(days=int(match.group("days")))
            return -result if match.group("sign") else result

        match = _TIMESPAN_PATTERN.match(text)
        if not match:
            raise ConversionError(value, "timedelta")

        hours = int(match.group("hours"))
        minutes = int(match.group("minutes"))
        seconds = int(match.group("seconds") or 0)
        if hours > 23 or minutes > 59 or seconds > 59:
            raise ConversionError(value, "timedelta", "component out of range")

        # Fraction is in 100ns ticks, up to 7 digits
        fraction = (match.group("fraction") or "").ljust(7, "0")
        microseconds = int(fraction) // 10

        result = timedelta(
            days=int(match.group("days") or 0),
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            microseconds=microseconds,
        )
        return -result if match.group("sign") else result

    def convert(self, target: Type) -> Any:
        """
        Convert to a type given as a class.

        Args:
            target: One of str, bool, int, float, Decimal, uuid.UUID,
                datetime, timedelta

        Raises:
            ConversionError: The value cannot be converted
            TypeError: No conversion exists for the target type
        """
        converter = _CONVERTERS.get(target)
        if converter is None:
            raise TypeError(f"No conversion to {getattr(target, '__name__', target)}")
        return converter(self)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _require(self, target: str) -> Any:
        if self._value is None:
            raise ConversionError(None, target, "no value")
        return self._value

    def _to_integer(self, target: str, bounds: tuple) -> int:
        value = self._require(target)
        if isinstance(value, bool):
            result = int(value)
        elif isinstance(value, int):
            result = value
        else:
            text = str(value)
            if not _INTEGER_PATTERN.match(text):
                raise ConversionError(value, target)
            result = int(text)

        low, high = bounds
        if not low <= result <= high:
            raise ConversionError(value, target, "out of range")
        return result

    def _to_float(self, target: str) -> float:
        value = self._require(target)
        if isinstance(value, (int, float, Decimal)):
            return float(value)
        text = str(value)
        if "_" in text:
            raise ConversionError(value, target)
        try:
            return float(text)
        except ValueError:
            raise ConversionError(value, target) from None

    # =========================================================================
    # DUNDERS
    # =========================================================================

    def __str__(self) -> str:
        return self.as_str()

    def __bool__(self) -> bool:
        return self.as_bool()

    def __int__(self) -> int:
        return self.as_long()

    def __float__(self) -> float:
        return self.as_double()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ParameterValue):
            return self._value == other._value
        return self._value == other

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"ParameterValue({self._value!r})"


_CONVERTERS: Dict[Any, Callable[[ParameterValue], Any]] = {
    str: ParameterValue.as_str,
    bool: ParameterValue.as_bool,
    int: ParameterValue.as_long,
    float: ParameterValue.as_double,
    Decimal: ParameterValue.as_decimal,
    uuid.UUID: ParameterValue.as_guid,
    datetime: ParameterValue.as_datetime,
    timedelta: ParameterValue.as_timedelta,
}


class ParameterBag(Mapping):
    """
    Read-only mapping of parameter name → ParameterValue.

    Keys are case-sensitive and hyphen-insensitive. Missing keys yield an
    empty ParameterValue instead of raising KeyError.

    Example:
        >>> bag = ParameterBag.create({"user-name": "bob"})
        >>> bag["username"].as_str()
        'bob'
        >>> bag.username.as_str()
        'bob'
        >>> "user-name" in bag
        True
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, ParameterValue] = {}
        for key, value in (values or {}).items():
            if not isinstance(value, ParameterValue):
                value = ParameterValue(value)
            self._values[neutral_key(key)] = value

    @classmethod
    def create(cls, values: Mapping[str, Any]) -> "ParameterBag":
        """Build a bag from a plain mapping of raw values."""
        return cls(values)

    @classmethod
    def empty(cls) -> "ParameterBag":
        return cls()

    def __getitem__(self, key: str) -> ParameterValue:
        return self._values.get(neutral_key(key), ParameterValue(None))

    def __getattr__(self, name: str) -> ParameterValue:
        # Only called when normal lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return neutral_key(key) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self:
            return self[key]
        return default

    def convert(self, key: str, target: Type) -> Any:
        """
        Convert one parameter to a type.

        Raises:
            ConversionError: Missing or malformed value
        """
        return self[key].convert(target)

    def try_convert(self, key: str, target: Type, default: Any = None) -> Any:
        """
        Convert one parameter, returning default instead of raising.

        Example:
            >>> ParameterBag.create({"page": "x"}).try_convert("page", int, 1)
            1
        """
        try:
            return self.convert(key, target)
        except ConversionError:
            return default

    def to_dict(self) -> Dict[str, Any]:
        """Raw values keyed by (hyphen-free) name."""
        return {key: value.value for key, value in self._values.items()}

    def __repr__(self) -> str:
        return f"ParameterBag({self.to_dict()!r})"
