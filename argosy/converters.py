"""
Argosy value converter: raw tokens → typed values.

What this module provides
- convert(value, target): turn one raw command-line token into a value of the declared
  parameter type, raising a ConversionError subclass with a stable, human-readable message.
- zero(target): the value an empty token stands for.
- accepts(target, object): whether a declared default fits the declared type.
- parse_date / can_be_date: the day-month-year date grammar.
- describe(target): the short value description used in usage lines.
- infer(object): the declared type implied by a default value (unannotated parameters).

Supported declared types
- scalars: int, str, bool, float, decimal.Decimal, datetime.date, datetime.datetime, Enum subclasses
- nullable: T | None (typing.Optional[T]); an empty token becomes None
- arrays: list[T] for any scalar T; tokens are split on '+' and each segment converted alone
- typing.Annotated[T, ...] is transparent
Anything else is an unknown type and fails hard, naming the offending type.

Error taxonomy
- FormatError: wrong shape ("Could not convert "x" to int").
- RangeError: right shape, value not representable ("Value "x" is too big or too small").
- DateError: wrong segment count or impossible calendar date.
- UnknownTypeError: the declared type is not supported.
"""
import builtins
import datetime
import decimal
import enum
import math
import re
import types
import typing

from .faults import FaultCode, FormatError, RangeError, DateError, UnknownTypeError

ARRAY_DELIMITER = "+"
DATE_SEPARATOR = "-"

_SCALARS = (int, str, bool, float, decimal.Decimal, datetime.date, datetime.datetime)
DATE_TYPES = (datetime.date, datetime.datetime)


def strip(target, /):
    """
    drop typing.Annotated layers, returning the bare declared type.
    """
    while typing.get_origin(target) is typing.Annotated:
        target = typing.get_args(target)[0]
    return target


def unwrap(target, /):
    """
    split a nullable declaration into (underlying type, nullable flag).

    - int | None, typing.Optional[int] → (int, True)
    - int                              → (int, False)
    Unions of more than one non-None member are left untouched (and are unknown types).
    """
    target = strip(target)
    if typing.get_origin(target) in (typing.Union, types.UnionType):
        members = typing.get_args(target)
        others = [member for member in members if member is not types.NoneType]
        if len(others) == 1 and len(members) == 2:
            return strip(others[0]), True
    return target, False


def is_array(target, /):
    """
    true for list[T] (and bare list, read as list[str]).
    """
    target = strip(target)
    return target is list or typing.get_origin(target) is list


def item_type(target, /):
    """
    element type of an array declaration (str for a bare list).
    """
    target = strip(target)
    if target is list:
        return str
    arguments = typing.get_args(target)
    return strip(arguments[0]) if arguments else str


def typename(target, /):
    """
    short, readable name of a declared type for messages.
    """
    target = strip(target)
    if isinstance(target, builtins.type) and typing.get_origin(target) is None:
        if target.__module__ == "builtins":
            return target.__qualname__
        return f"{target.__module__}.{target.__qualname__}"
    return repr(target)


def _is_enum(target):
    return isinstance(target, builtins.type) and issubclass(target, enum.Enum)


def zero(target, /):
    """
    the value an empty token stands for.

    numbers → 0, bool → False; str, dates, enums and nullable types → None.
    """
    target, nullable = unwrap(target)
    if nullable:
        return None
    if target is bool:
        return False
    if target is int:
        return 0
    if target is float:
        return 0.0
    if target is decimal.Decimal:
        return decimal.Decimal(0)
    return None


def parse_date(value, /):
    """
    parse a 'day-month-year' token (three numeric segments separated by '-').

    each segment goes through the int path, so a non-numeric segment fails with
    the int FormatError; a wrong segment count or an impossible calendar date
    fails with DateError.
    """
    parts = value.split(DATE_SEPARATOR)
    if len(parts) != 3:
        raise DateError(
            "Could not convert %s to Date" % value,
            code=FaultCode.BAD_DATE,
            value=value,
        )
    day, month, year = (convert(part, int) for part in parts)
    try:
        return datetime.date(year, month, day)
    except (ValueError, OverflowError):
        raise DateError(
            "Could not convert %s to Date" % value,
            code=FaultCode.BAD_DATE,
            value=value,
        ) from None


def can_be_date(value, /):
    """
    whether a string parses as a 'day-month-year' date.
    """
    try:
        parse_date(value)
    except (FormatError, RangeError, DateError):
        return False
    return True


def _format_error(value, target):
    return FormatError(
        'Could not convert "%s" to %s' % (value, typename(target)),
        code=FaultCode.BAD_FORMAT,
        value=value,
        type=target,
    )


def _range_error(value, target):
    return RangeError(
        'Value "%s" is too big or too small' % value,
        code=FaultCode.OUT_OF_RANGE,
        value=value,
        type=target,
    )


def _convert_int(value, target):
    try:
        return int(value)
    except ValueError:
        # digits only, yet rejected: the interpreter's conversion limit was hit
        if re.fullmatch(r"\s*[+-]?\d+\s*", value):
            raise _range_error(value, target) from None
        raise _format_error(value, target) from None


def _convert_float(value, target):
    try:
        object = float(value)
    except ValueError:
        raise _format_error(value, target) from None
    if math.isinf(object) and value.strip().lstrip("+-").lower() not in ("inf", "infinity"):
        raise _range_error(value, target)
    return object


def _convert_decimal(value, target):
    try:
        return decimal.getcontext().create_decimal(value.strip())
    except decimal.Overflow:
        raise _range_error(value, target) from None
    except decimal.InvalidOperation:
        raise _format_error(value, target) from None


def _convert_bool(value, target):
    match value.strip().lower():
        case "true":
            return True
        case "false":
            return False
    raise _format_error(value, target)


def _convert_enum(value, target):
    try:
        return target[value]
    except KeyError:
        pass
    for member in target:
        if member.name.lower() == value.lower():
            return member
    try:
        return target(value)
    except ValueError:
        pass
    try:
        return target(int(value))
    except ValueError:
        raise _format_error(value, target) from None


def _convert_scalar(value, target):
    if value == "":
        return zero(target)

    target, _ = unwrap(target)

    if target is str:
        return value
    # datetime is a date subclass: test it first
    if target is datetime.datetime:
        return datetime.datetime.combine(parse_date(value), datetime.time())
    if target is datetime.date:
        return parse_date(value)
    if target is bool:
        return _convert_bool(value, target)
    if target is int:
        return _convert_int(value, target)
    if target is float:
        return _convert_float(value, target)
    if target is decimal.Decimal:
        return _convert_decimal(value, target)
    if _is_enum(target):
        return _convert_enum(value, target)

    raise UnknownTypeError(
        "Unknown type is used in your method: %s" % typename(target),
        code=FaultCode.UNKNOWN_TYPE,
        type=target,
    )


def convert(value, target, /):
    """
    convert a raw token into a value of the declared type.

    parameters
    - value: str
      the raw token (may be empty: see zero()).
    - target: type
      the declared parameter type.

    returns
    - the converted value; a list for array types.

    raises
    - ConversionError subclasses (FormatError, RangeError, DateError, UnknownTypeError).
      for arrays the first malformed segment fails the whole conversion.
    """
    if not isinstance(value, str):
        raise TypeError("convert() first argument must be a string")

    target, nullable = unwrap(target)
    if nullable and value == "":
        return None
    if is_array(target):
        item = item_type(target)
        return [_convert_scalar(segment, item) for segment in value.split(ARRAY_DELIMITER)]
    return _convert_scalar(value, target)


def accepts(target, object, /):
    """
    whether a default value can be assigned to a parameter of the declared type.

    rules
    - None fits nullable types, str and arrays only.
    - bool defaults fit bool parameters only (bool is not taken for an int).
    - float accepts int; Decimal accepts int.
    - arrays accept a list or tuple whose items all fit the element type.
    - unknown types accept nothing.
    """
    target, nullable = unwrap(target)

    if object is None:
        return nullable or target is str or is_array(target)

    if is_array(target):
        item = item_type(target)
        return isinstance(object, list | tuple) and all(
            item_object is not None and accepts(item, item_object) for item_object in object
        )

    if target is bool:
        return isinstance(object, bool)
    if isinstance(object, bool):
        return False
    if target is float:
        return isinstance(object, int | float)
    if target is decimal.Decimal:
        return isinstance(object, int | decimal.Decimal)
    if target is datetime.datetime:
        return isinstance(object, datetime.datetime)
    if target in _SCALARS or _is_enum(target):
        return isinstance(object, target)
    return False


def infer(object, /):
    """
    declared type implied by a default value, str when nothing better fits.

    scalars and enum members give their own type; a non-empty list or tuple of one
    such type gives list[type].
    """
    target = builtins.type(object)
    if target in _SCALARS or _is_enum(target):
        return target
    if isinstance(object, list | tuple) and object:
        items = {builtins.type(item) for item in object}
        if len(items) == 1 and ((item := items.pop()) in _SCALARS or _is_enum(item)):
            return list[item]
    return str


def describe(target, /):
    """
    short description of the expected value shape, used in usage lines.

    int → number, str → value, float/Decimal → decimal, dates → dd-mm-yyyy,
    enums → name|name, arrays → item[+item]; nullable types describe their inner type.
    """
    target, _ = unwrap(target)
    if is_array(target):
        item = describe(item_type(target))
        return f"{item}[{ARRAY_DELIMITER}{item}]"
    if target is int:
        return "number"
    if target is str:
        return "value"
    if target is bool:
        return "true|false"
    if target in (float, decimal.Decimal):
        return "decimal"
    if target in DATE_TYPES:
        return "dd-mm-yyyy"
    if _is_enum(target):
        return "|".join(member.name for member in target)
    raise UnknownTypeError(
        "Unknown type is used in your method: %s" % typename(target),
        code=FaultCode.UNKNOWN_TYPE,
        type=target,
    )


def render(object, /):
    """
    render a default value for usage detail lines (strings single-quoted).
    """
    if isinstance(object, str):
        return "'%s'" % object
    if isinstance(object, datetime.datetime | datetime.date):
        return object.strftime("%d-%m-%Y")
    if isinstance(object, enum.Enum):
        return object.name
    if isinstance(object, list | tuple):
        return ARRAY_DELIMITER.join(str(item) for item in object)
    return str(object)


__all__ = (
    "ARRAY_DELIMITER",
    "DATE_SEPARATOR",
    "DATE_TYPES",
    "strip",
    "unwrap",
    "is_array",
    "item_type",
    "typename",
    "zero",
    "parse_date",
    "can_be_date",
    "convert",
    "accepts",
    "infer",
    "describe",
    "render",
)
