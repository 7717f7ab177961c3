"""
Argosy action catalog: discover actions on a host and describe them.

What this module provides
- ParameterDescriptor: one declared parameter (name, declared type, kind, markers,
  default, alt names, description).
- ActionDescriptor: one dispatchable action (name, description, ordered parameters)
  and the callable that runs it.
- OptionalInfo: default value + alt names of an optional parameter, whether the
  optional-ness comes from an Optional marker or from a plain Python default.
- discover(host): build the descriptors for a module, a class, an instance or an
  explicit iterable of callables, in declaration order.

Hosts
- module    → module-level functions stamped by @action
- class     → staticmethods/classmethods stamped by @action (instance methods need an instance)
- instance  → every stamped method, bound to the instance
- iterable  → each stamped callable, as given

Lifecycle
- Descriptors are derived on every dispatch call and are read-only afterwards.
"""
import inspect
import types
from collections.abc import Iterable
from enum import Enum
from inspect import Parameter

from . import converters
from .markers import Required, Optional, collect
from .utils import *
from .utils import IntrospectableType


class Kind(Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"


class OptionalInfo(metaclass=IntrospectableType):
    """
    Default value and alt names of an optional parameter.

    For parameters made optional by a plain Python default (rather than an
    Optional marker) there are no alt names and the native default is used.
    """

    __introspectable__ = (
        "default",
        "altnames",
        "native",
    )

    def __new__(cls, default, altnames=(), *, native=False):
        self = super().__new__(cls)
        self._default = default
        self._altnames = tuple(altnames)
        self._native = bool(native)
        return self


class ParameterDescriptor(metaclass=IntrospectableType):
    """
    Read-only description of one action parameter.

    Properties
    - name: str
    - type: declared type (typing.Annotated stripped; inferred from the default, else str,
      when not annotated)
    - kind: Kind.REQUIRED | Kind.OPTIONAL
    - markers: every Required/Optional marker found on the parameter
    - optional: OptionalInfo | None
    - descr: str
    - keyword: bool (keyword-only parameters are bound by keyword)
    """

    __introspectable__ = (
        "name",
        "type",
        "kind",
        "markers",
        "optional",
        "descr",
        "keyword",
    )

    def __new__(cls, name, type=str, /, markers=(), default=Unset, *, keyword=False):
        self = super().__new__(cls)
        self._name = name
        self._type = converters.strip(type)
        self._markers = tuple(markers)
        self._keyword = bool(keyword)

        # markers win over a plain default; the first marker decides the kind
        marker = self._markers[0] if self._markers else None
        if isinstance(marker, Optional):
            self._kind = Kind.OPTIONAL
            self._optional = OptionalInfo(marker.default, marker.altnames)
        elif isinstance(marker, Required) or default is Unset:
            self._kind = Kind.REQUIRED
            self._optional = None
        else:
            self._kind = Kind.OPTIONAL
            self._optional = OptionalInfo(default, native=True)

        self._descr = marker.descr if marker is not None else ""
        return self

    @property
    def altnames(self):
        return self._optional.altnames if self._optional is not None else ()

    @property
    def default(self):
        return self._optional.default if self._optional is not None else None


class ActionDescriptor(metaclass=IntrospectableType):
    """
    Read-only description of one dispatchable action.

    Properties
    - name: str (lookup is case-insensitive)
    - descr: str
    - parameters: tuple[ParameterDescriptor, ...] in declaration order
    - callback: the callable invoked with the bound values
    """

    __introspectable__ = (
        "name",
        "descr",
        "parameters",
        "callback",
    )

    def __new__(cls, name, parameters=(), /, descr="", callback=None):
        self = super().__new__(cls)
        self._name = name
        self._descr = descr
        self._parameters = tuple(parameters)
        self._callback = callback
        return self

    def arguments(self, values, /):
        """
        split a positional value array into call arguments.

        returns (args, kwargs): keyword-only parameters are passed by keyword,
        everything else positionally, in declaration order.
        """
        args = []
        kwargs = {}
        for parameter, value in zip(self._parameters, values, strict=True):
            if parameter.keyword:
                kwargs[parameter.name] = value
            else:
                args.append(value)
        return tuple(args), kwargs


def describe(callback, /):
    """
    build the ActionDescriptor of a callable stamped by @action.
    """
    stamp = getattr(callback, "__action__")
    try:
        signature = inspect.signature(callback, eval_str=True)
    except (NameError, SyntaxError):
        signature = inspect.signature(callback)

    parameters = []
    for name, parameter in signature.parameters.items():
        unannotated = parameter.annotation is Parameter.empty
        found = collect(parameter, str if unannotated else parameter.annotation)
        default = Unset
        if parameter.default is not Parameter.empty and not any(parameter.default is marker for marker in found):
            default = parameter.default

        annotation = parameter.annotation
        if unannotated:
            # the default decides, else str
            marker = found[0] if found else None
            annotation = converters.infer(marker.default if isinstance(marker, Optional) else default)
        parameters.append(ParameterDescriptor(
            name,
            annotation,
            found,
            default,
            keyword=parameter.kind is Parameter.KEYWORD_ONLY,
        ))

    return ActionDescriptor(stamp.name, parameters, stamp.descr, callback)


def _stamped(object):
    function = object.__func__ if isinstance(object, staticmethod | classmethod | types.MethodType) else object
    return callable(function) and hasattr(function, "__action__")


def discover(host, /):
    """
    Collect the actions exposed by a host, in declaration order.

    Parameters
    - host: module | class | instance | Iterable[Callable]

    Returns
    - list[ActionDescriptor] (possibly empty: the validator reports that case).
    """
    callbacks = []

    if isinstance(host, types.ModuleType):
        for object in vars(host).values():
            if isinstance(object, types.FunctionType) and _stamped(object):
                callbacks.append(object)
    elif isinstance(host, type):
        names = set()
        for klass in host.__mro__:
            for name, object in vars(klass).items():
                if isinstance(object, staticmethod | classmethod) and _stamped(object):
                    names.add(name)
        for name in _ordered(host, names):
            callbacks.append(getattr(host, name))
    elif isinstance(host, Iterable) and not isinstance(host, str | bytes):
        for object in host:
            if not _stamped(object):
                raise TypeError("discover() iterable items must be callables marked with @action")
            callbacks.append(object)
    else:
        names = set()
        for klass in type(host).__mro__:
            for name, object in vars(klass).items():
                if _stamped(object):
                    names.add(name)
        for name in _ordered(type(host), names):
            callbacks.append(getattr(host, name))

    return [describe(callback) for callback in callbacks]


def _ordered(klass, names):
    """
    names in declaration order, base classes first.
    """
    ordered = []
    for base in reversed(klass.__mro__):
        for name in vars(base):
            if name in names and name not in ordered:
                ordered.append(name)
    return ordered


def hostname(host, /, *, lower=True):
    """
    display name of a host (lowercased for the program name fallback).
    """
    if isinstance(host, types.ModuleType):
        name = host.__name__.rpartition(".")[2]
    elif isinstance(host, type):
        name = host.__name__
    elif host is None or isinstance(host, Iterable) and not isinstance(host, str | bytes):
        return None
    else:
        name = type(host).__name__
    return name.lower() if lower else name


__all__ = (
    "Kind",
    "OptionalInfo",
    "ParameterDescriptor",
    "ActionDescriptor",
    "describe",
    "discover",
    "hostname",
)
