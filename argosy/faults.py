"""
Argosy faults (contract errors).

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by phase to keep copy consistent and make logs/searches predictable.
- ContractError: the single error kind surfaced at the dispatch boundary. It carries
  the formatted message plus read-only options (code, action, parameter, token...).
- One subclass per violation so hosts and tests can tell them apart without parsing text.

Phases
- structural (21xxx): the declarative contract itself is broken (a bug in the host program).
- input (22xxx): the live token vector does not fit the chosen action.
- conversion (23xxx): a raw token cannot become a value of the declared type.

Integration
- The dispatcher catches ContractError, writes its message through the Messenger and
  sets the generic error exit status. Nothing else is caught there.
- Action bodies may raise ContractError on purpose to report a message the same way.
"""
from enum import IntEnum
from types import MappingProxyType


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - structural (211xx): NO_ACTIONS, PARAMETERLESS_ACTION, RESERVED_NAME,
      CONFLICTING_MARKERS, MARKER_ORDER, DEFAULT_TYPE, DUPLICATED_NAME
    - input (221xx): MISSING_REQUIRED, MALFORMED_SWITCH, DUPLICATED_SWITCH,
      UNKNOWN_SWITCH, UNKNOWN_ACTION
    - conversion (231xx): BAD_FORMAT, OUT_OF_RANGE, BAD_DATE, UNKNOWN_TYPE
    """
    # --- structural errors (21xxx) ---
    NO_ACTIONS             = 21101
    PARAMETERLESS_ACTION   = 21102
    RESERVED_NAME          = 21103
    CONFLICTING_MARKERS    = 21111
    MARKER_ORDER           = 21112
    DEFAULT_TYPE           = 21113
    DUPLICATED_NAME        = 21114

    # --- input errors (22xxx) ---
    MISSING_REQUIRED       = 22101
    MALFORMED_SWITCH       = 22111
    DUPLICATED_SWITCH      = 22112
    UNKNOWN_SWITCH         = 22113
    UNKNOWN_ACTION         = 22121

    # --- conversion errors (23xxx) ---
    BAD_FORMAT             = 23101
    OUT_OF_RANGE           = 23102
    BAD_DATE               = 23103
    UNKNOWN_TYPE           = 23111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ContractError(Exception):
    """
    declarative contract error carrying a formatted, user-facing message.

    options
    - code: FaultCode identifying the violation.
    - action / parameter / token / value / type: context for the offending piece,
      present when the raising site knows it.
    """

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __str__(self):
        return self.message

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


# structural
class StructuralError(ContractError): ...
class NoActionsError(StructuralError): ...
class ParameterlessActionError(StructuralError): ...
class ReservedNameError(StructuralError): ...
class ConflictingMarkersError(StructuralError): ...
class MarkerOrderError(StructuralError): ...
class DefaultTypeError(StructuralError): ...
class DuplicatedNameError(StructuralError): ...

# input
class InputError(ContractError): ...
class MissingRequiredError(InputError): ...
class MalformedSwitchError(InputError): ...
class DuplicatedSwitchError(InputError): ...
class UnknownSwitchError(InputError): ...
class UnknownActionError(InputError): ...

# conversion
class ConversionError(InputError): ...
class FormatError(ConversionError): ...
class RangeError(ConversionError): ...
class DateError(ConversionError): ...
class UnknownTypeError(ConversionError): ...


__all__ = (
    "FaultCode",
    "ContractError",
    "StructuralError",
    "NoActionsError",
    "ParameterlessActionError",
    "ReservedNameError",
    "ConflictingMarkersError",
    "MarkerOrderError",
    "DefaultTypeError",
    "DuplicatedNameError",
    "InputError",
    "MissingRequiredError",
    "MalformedSwitchError",
    "DuplicatedSwitchError",
    "UnknownSwitchError",
    "UnknownActionError",
    "ConversionError",
    "FormatError",
    "RangeError",
    "DateError",
    "UnknownTypeError",
)
