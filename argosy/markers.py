r"""
Argosy declarative markers: @action, Required and Optional.

Overview
- @action / @action("description")
  • Marks a function (or a staticmethod/classmethod) as a dispatchable action.
  • The function is stamped and returned unchanged; it stays directly callable.
- Required(descr=...)
  • Marks a parameter as required (bound from positional tokens).
  • Parameters carrying no marker and no default are required anyway.
- Optional(default, *altnames, descr=...)
  • Marks a parameter as optional with a typed default and extra token-level names.

Where markers go
- In the annotation, through typing.Annotated:
      def delete(count: Annotated[int, Required(descr="Object count")],
                 book: Annotated[bool, Optional(False, "b", "bk")]): ...
- Or as the parameter default (the marker stands in for the value):
      def delete(count: int, book: bool = Optional(False, "b", "bk")): ...
  Both places are read, so conflicting markers on one parameter are reported by the
  metadata validator instead of being silently resolved.

Introspection & representation
- IntrospectableType (argosy.utils) provides stable __repr__/__rich_repr__ and exposes the fields
  listed in __introspectable__ as read-only properties.

Quick example:
    >>> from typing import Annotated
    >>> from argosy.markers import action, Optional
    >>> @action("Multiplies two numbers")
    ... def multiply(factor1: int, factor2: int, logo: Annotated[bool, Optional(True)]): ...
"""
import inspect
import re
import typing
from inspect import Parameter

from rich.text import Text

from .utils import *
from .utils import IntrospectableType


def _sanitize_descr(cls, descr, /):
    """
    Internal: validate and normalize the 'descr' field shared by every marker.

    - Unset becomes the empty string (no description).
    - Provided strings are trimmed and must stay non-empty.
    """
    if not isinstance(descr, str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    return str(coalesce(descr, ""))


def _sanitize_altnames(cls, altnames, /):
    """
    Internal: validate alternative token-level names of an Optional marker.

    Each name must be a non-empty string without whitespace and without the ':'
    value separator. Duplicates are NOT rejected here: name collisions are a
    contract violation reported by the metadata validator.
    """
    sanitized = []
    for name in altnames:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} alt names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} alt names cannot be empty-strings")
        elif re.search(r"[\s:]", name):
            raise ValueError(f"{cls.__typename__} alt names cannot contain whitespaces or ':'")
        sanitized.append(name)
    return tuple(sanitized)


class Marker(metaclass=IntrospectableType):
    """
    Base of parameter markers. Should not be used directly.
    """

    def __marker__(self):
        """
        Introspection hook: identify this object as a parameter marker.
        """
        return self


class Required(Marker):
    """
    Marks an action parameter as required.

    Properties
    - descr: str (help text, empty when not given)
    """

    __introspectable__ = (
        "descr",
    )

    def __new__(cls, *, descr=Unset):
        self = super().__new__(cls)
        self._descr = _sanitize_descr(cls, descr)
        return self


class Optional(Marker):
    """
    Marks an action parameter as optional.

    Parameters
    - default: Any
      Typed default bound when the parameter is absent from the command line. Its
      type must be assignable to the declared parameter type (checked by the
      metadata validator, not here).
    - *altnames: str
      Additional token-level names resolving to the same parameter. The first alt
      name is the one shown in usage lines.
    - descr: str
      Short description for help.
    """

    __introspectable__ = (
        "default",
        "altnames",
        "descr",
    )

    def __new__(cls, default, /, *altnames, descr=Unset):
        self = super().__new__(cls)
        self._default = default
        self._altnames = _sanitize_altnames(cls, altnames)
        self._descr = _sanitize_descr(cls, descr)
        return self


class Action(metaclass=IntrospectableType):
    """
    Stamp attached to a function by @action.

    Properties
    - name: str (lookup key; matched case-insensitively)
    - descr: str (shown in usage headers and the subcommand list)
    """

    __introspectable__ = (
        "name",
        "descr",
    )

    def __new__(cls, name, descr=Unset):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
        self = super().__new__(cls)
        self._name = name
        self._descr = _sanitize_descr(cls, descr)
        return self


def _check_callback(callback):
    """
    Reject callables whose shape cannot be bound from a token vector.
    """
    try:
        signature = inspect.signature(callback)
    except TypeError:
        raise TypeError("@action() must be applied to a callable") from None
    except ValueError:
        raise ValueError("@action() must be applied to an inspectable callable") from None

    for name, parameter in signature.parameters.items():
        if parameter.kind in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD):
            raise TypeError(f"@action() callback parameter {name!r} cannot be variadic")


def action(source=Unset, /, descr=Unset, *, name=Unset):
    """
    Mark a function as an action, or return a decorator that will.

    Invocation modes
    - @action
    - @action("Deletes some objects")
    - @action(descr="Deletes some objects", name="remove")

    Parameters
    - source: Unset | str | Callable | staticmethod | classmethod
      When a string, it is taken as the description and a decorator is returned.
    - descr: Unset | str
      Action description for help output.
    - name: Unset | str
      Lookup name; defaults to the function name.

    Returns
    - the decorated object itself (stamped with __action__), or a decorator.
    """
    if isinstance(source, str):
        if descr is not Unset:
            raise TypeError("@action() description given twice")
        source, descr = Unset, source

    @rename("action")
    def wrapper(source, /):
        function = source.__func__ if isinstance(source, staticmethod | classmethod) else source
        if not callable(function):
            raise TypeError("@action() must be applied to a callable")
        _check_callback(function)
        function.__action__ = Action(coalesce(name, function.__name__), descr)
        return source

    return wrapper(source) if source is not Unset else wrapper


def collect(parameter, annotation, /):
    """
    Collect every marker attached to a parameter, in declaration order.

    Markers come from typing.Annotated metadata (outermost layers first) and
    from the parameter default.
    """
    found = []
    if typing.get_origin(annotation) is typing.Annotated:
        found.extend(item.__marker__() for item in annotation.__metadata__ if _is_marker(item))
    if _is_marker(parameter.default):
        found.append(parameter.default.__marker__())
    return tuple(found)


def _is_marker(object):
    return hasattr(object, "__marker__") and callable(object.__marker__) and not isinstance(object, type)


__all__ = (
    "Marker",
    "Required",
    "Optional",
    "Action",
    "action",
    "collect",
)
