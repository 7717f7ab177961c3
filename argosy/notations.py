"""
Argosy notations: how raw tokens map onto an action's parameters.

Two strategies share one interface (NotationStrategy):

Switch notation (Notation.SWITCH, marker "/")
- required values come first, bound by position:   prog [action] a b c
- optional values are switches, in any order:      /name:value   /name   /-name
    • /name:value assigns value
    • /name       assigns "true"  (flags)
    • /-name      assigns "false"
- input is checked before binding: required count, switch shape, duplicates, unknown names.

Positional notation (Notation.POSITIONAL, marker "-")
- optional values lead as name/value pairs, required values trail:
      prog [action] -name value -other value a b c
- no structural checks: unknown names are ignored and missing values fall back to
  defaults; only the converter can fail.

Both strategies render usage text through the Messenger.
"""
import collections
from abc import ABC, abstractmethod
from enum import Enum

from . import converters
from .catalog import Kind
from .faults import (
    FaultCode,
    MissingRequiredError,
    MalformedSwitchError,
    DuplicatedSwitchError,
    UnknownSwitchError,
    UnknownActionError,
)
from .utils import *

HELP_TOKENS = ("/?", "/help", "/h", "help")
VALUE_SEPARATOR = ":"
INDENTATION = "    "

Slot = collections.namedtuple("Slot", ("position", "type"))


class Notation(Enum):
    SWITCH = "switch"
    POSITIONAL = "positional"

    @classmethod
    def _missing_(cls, value):
        # alternative spellings
        if isinstance(value, str):
            match value.lower():
                case "switch" | "windows":
                    return cls.SWITCH
                case "positional" | "linux":
                    return cls.POSITIONAL
        return None


class BindingContext:
    """
    Per-call binding state, owned by one strategy during one build_parameter_array call.

    - action: the chosen ActionDescriptor
    - tokens: the raw token vector
    - aliases: lowercased name → Slot(position, declared type), for optional parameters
    - values: the positional value array handed to the action
    """

    def __init__(self, action, tokens, /):
        self.action = action
        self.tokens = tuple(tokens)
        self.aliases = {}
        self.values = []

    def assign(self, name, value, /):
        """
        convert a raw value for the optional parameter registered under name.
        """
        slot = self.aliases[name.lower()]
        self.values[slot.position] = converters.convert(value, slot.type)


def _seed(default, target):
    """
    the initial bound value of an optional parameter.
    """
    if isinstance(default, str) and converters.unwrap(target)[0] in converters.DATE_TYPES:
        return converters.convert(default, target)
    if converters.is_array(target) and isinstance(default, list | tuple):
        return list(default)
    return default


class NotationStrategy(ABC):
    """
    Common base of the notation strategies.

    Parameters
    - tokens: Sequence[str]   raw token vector (program name excluded)
    - messenger: Messenger    sink for usage text
    - metadata: Metadata      queries over the discovered actions
    - prog: str               program name shown in usage lines
    """

    marker = ""

    def __init__(self, tokens, messenger, metadata, /, prog=""):
        self._tokens = tuple(tokens)
        self._messenger = messenger
        self._metadata = metadata
        self._prog = prog

    @property
    def tokens(self):
        return self._tokens

    @property
    def offset(self):
        """
        number of leading tokens reserved for the action name.
        """
        return 1 if self._metadata.is_multi else 0

    def current_action(self):
        """
        the action addressed by the tokens, None when the name matches nothing.
        """
        if not self._metadata.is_multi:
            return self._metadata.first
        if not self._tokens:
            return None
        return self._metadata.lookup(self._tokens[0])

    @abstractmethod
    def validate_input(self, action, /):
        raise NotImplementedError

    @abstractmethod
    def build_parameter_array(self, action, /):
        raise NotImplementedError

    def _context(self, action):
        """
        binding context with optional parameters seeded and registered; required
        positions hold Unset until the strategy fills them.
        """
        context = BindingContext(action, self._tokens)
        for parameter in action.parameters:
            if parameter.kind is Kind.REQUIRED:
                context.values.append(Unset)
                continue
            info = self._metadata.optional_info(parameter)
            slot = Slot(len(context.values), parameter.type)
            for name in info.altnames:
                context.aliases[name.lower()] = slot
            context.aliases[parameter.name.lower()] = slot
            context.values.append(_seed(info.default, parameter.type))
        return context

    # ==== usage ====

    def subcommand_help_requested(self):
        return len(self._tokens) > 1 and self._tokens[0] in HELP_TOKENS

    def print_usage(self):
        """
        usage for the situation at hand: general usage, a named subcommand, or the single action.
        """
        if not self._metadata.is_multi:
            self.print_action_usage(self._metadata.first)
        elif self.subcommand_help_requested():
            action = self._metadata.lookup(self._tokens[1])
            if action is None:
                self.print_general_usage()
                raise UnknownActionError(
                    'Unknown subcommand "%s"' % self._tokens[1],
                    code=FaultCode.UNKNOWN_ACTION,
                    token=self._tokens[1],
                )
            self.print_action_usage(action)
        else:
            self.print_general_usage()

    def print_general_usage(self):
        write = self._messenger.write
        write("usage: %s <subcommand> [args]" % self._prog)
        write("Type '%s help <subcommand>' for help on a specific subcommand." % self._prog)
        write("")
        write("Available subcommands:")
        for action in self._metadata:
            write(action.name.lower() + " " + action.descr)

    def print_action_usage(self, action, /):
        write = self._messenger.write
        if action.descr:
            write(action.descr)

        entries = [(self.display_name(parameter), parameter) for parameter in action.parameters]
        parts = [self._prog]
        if self._metadata.is_multi:
            parts.append(action.name.lower())
        parts.extend(name for name, _ in self.arrange(entries))
        write("usage: " + " ".join(part for part in parts if part))

        width = max((len(name) for name, _ in entries), default=0)
        for name, parameter in entries:
            default = None if parameter.kind is Kind.REQUIRED else self._metadata.optional_info(parameter).default
            if parameter.descr or default is not None:
                line = INDENTATION + name
                if parameter.descr:
                    line += " " * (width - len(name) + 2) + parameter.descr
                write(line)
            if default is not None:
                write(INDENTATION * 2 + "default value: " + converters.render(default))

    def arrange(self, entries, /):
        """
        order of the (display name, parameter) entries on the usage line.
        """
        return entries

    @abstractmethod
    def display_name(self, parameter, /):
        raise NotImplementedError


class SwitchNotation(NotationStrategy):
    """
    prog [action] required... [/name:value | /name | /-name]...
    """

    marker = "/"

    def optional_tokens(self, action, /):
        return self._tokens[self.offset + self._metadata.required_count(action):]

    def parameter_name(self, token, /):
        """
        lowercased switch name: marker, negation and value stripped.
        """
        if token.startswith(self.marker + "-"):
            return token[len(self.marker) + 1:].lower()
        if VALUE_SEPARATOR in token:
            return token[len(self.marker):token.index(VALUE_SEPARATOR)].lower()
        return token[len(self.marker):].lower()

    def parameter_value(self, token, /):
        if token.startswith(self.marker + "-"):
            return "false"
        if VALUE_SEPARATOR in token:
            return token[token.index(VALUE_SEPARATOR) + 1:]
        return "true"

    def validate_input(self, action, /):
        self._check_required_are_set(action)
        self._check_switches_are_not_duplicated(action)
        self._check_switches_are_known(action)

    def _check_required_are_set(self, action):
        if len(self._tokens) < self.offset + self._metadata.required_count(action):
            self.print_action_usage(action)
            raise MissingRequiredError(
                "Error: Not all required parameters are set",
                code=FaultCode.MISSING_REQUIRED,
                action=action.name,
            )

    def _check_switches_are_not_duplicated(self, action):
        passed = []
        for token in self.optional_tokens(action):
            if not token.startswith(self.marker):
                raise MalformedSwitchError(
                    "Unknown parameter %s" % token,
                    code=FaultCode.MALFORMED_SWITCH,
                    action=action.name,
                    token=token,
                )
            name = self.parameter_name(token)
            if name in passed:
                raise DuplicatedSwitchError(
                    "Parameter with name %s passed two times" % name,
                    code=FaultCode.DUPLICATED_SWITCH,
                    action=action.name,
                    token=token,
                )
            passed.append(name)

    def _check_switches_are_known(self, action):
        names = set()
        for parameter in action.parameters:
            if parameter.kind is Kind.REQUIRED:
                continue
            names.add(parameter.name.lower())
            names.update(name.lower() for name in self._metadata.optional_info(parameter).altnames)
        for token in self.optional_tokens(action):
            if self.parameter_name(token) not in names:
                raise UnknownSwitchError(
                    "Unknown parameter name %s" % token,
                    code=FaultCode.UNKNOWN_SWITCH,
                    action=action.name,
                    token=token,
                )

    def build_parameter_array(self, action, /):
        context = self._context(action)
        index = self.offset
        for position, parameter in enumerate(action.parameters):
            if parameter.kind is Kind.REQUIRED:
                context.values[position] = converters.convert(self._tokens[index], parameter.type)
                index += 1
        for token in self.optional_tokens(action):
            context.assign(self.parameter_name(token), self.parameter_value(token))
        return context.values

    def display_name(self, parameter, /):
        if parameter.kind is Kind.REQUIRED:
            return parameter.name
        altnames = self._metadata.optional_info(parameter).altnames
        name = altnames[0] if altnames else parameter.name
        if converters.unwrap(parameter.type)[0] is not bool:
            name += VALUE_SEPARATOR + converters.describe(parameter.type)
        return "[" + self.marker + name + "]"


class PositionalNotation(NotationStrategy):
    """
    prog [action] [-name value]... required...
    """

    marker = "-"

    def validate_input(self, action, /):
        pass

    def build_parameter_array(self, action, /):
        context = self._context(action)
        tokens = self._tokens[self.offset:]
        boundary = len(tokens) - self._metadata.required_count(action)

        for index in range(0, boundary, 2):
            name = tokens[index][len(self.marker):]
            value = tokens[index + 1] if index + 1 < boundary else ""
            if name.lower() in context.aliases:
                context.assign(name, value)

        trailing = tokens[max(boundary, 0):]
        for position, parameter in enumerate(action.parameters):
            if parameter.kind is Kind.REQUIRED:
                context.values[position] = (
                    converters.convert(trailing[position], parameter.type) if position < len(trailing) else None
                )
        return context.values

    def arrange(self, entries, /):
        optional = [entry for entry in entries if entry[1].kind is Kind.OPTIONAL]
        required = [entry for entry in entries if entry[1].kind is Kind.REQUIRED]
        return optional + required

    def display_name(self, parameter, /):
        if parameter.kind is Kind.REQUIRED:
            return parameter.name
        altnames = self._metadata.optional_info(parameter).altnames
        name = altnames[0] if altnames else parameter.name
        return "[" + self.marker + name + " " + converters.describe(parameter.type) + "]"


_STRATEGIES = {
    Notation.SWITCH: SwitchNotation,
    Notation.POSITIONAL: PositionalNotation,
}


def strategy(notation, /, *args, **options):
    """
    build the strategy implementing a notation.
    """
    return _STRATEGIES[Notation(notation)](*args, **options)


__all__ = (
    "HELP_TOKENS",
    "Notation",
    "Slot",
    "BindingContext",
    "NotationStrategy",
    "SwitchNotation",
    "PositionalNotation",
    "strategy",
)
