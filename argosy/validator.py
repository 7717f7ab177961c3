"""
Argosy metadata validator: structural checks over the declared actions.

Checks run before any token is read, in this order, and stop at the first failure:
1. at least one action exists
2. a single action declares at least one parameter
3. no action is named "help"
4. no parameter carries more than one marker
5. no required parameter follows an optional one
6. every optional default fits the declared type (a date-like string fits a date parameter)
7. no name collision between primary and alt names within one action (case-insensitive)

Each violation raises its own StructuralError subclass; the message names the offending
action and parameter.
"""
from . import converters
from .catalog import Kind, hostname
from .faults import (
    FaultCode,
    NoActionsError,
    ParameterlessActionError,
    ReservedNameError,
    ConflictingMarkersError,
    MarkerOrderError,
    DefaultTypeError,
    DuplicatedNameError,
)

RESERVED_NAME = "help"


class MetadataValidator:
    """
    Validate the declarative contract of a host.

    The validator is a pure function of the descriptors: running it twice over the
    same actions yields the same outcome.
    """

    def __init__(self, metadata, /, host=None):
        self._metadata = metadata
        self._host = host

    def validate(self):
        self._check_any_action_exists()
        self._check_single_action_has_parameters()
        for action in self._metadata:
            self._check_name_is_not_reserved(action)
            self._check_markers_do_not_conflict(action)
            self._check_optional_after_required(action)
            self._check_defaults_are_assignable(action)
            self._check_names_are_not_duplicated(action)

    def _hostname(self):
        return hostname(self._host, lower=False) or "actions"

    def _check_any_action_exists(self):
        if not len(self._metadata):
            raise NoActionsError(
                'Can not find any function marked with @action in "%s"' % self._hostname(),
                code=FaultCode.NO_ACTIONS,
            )

    def _check_single_action_has_parameters(self):
        if len(self._metadata) == 1 and not self._metadata.first.parameters:
            action = self._metadata.first
            raise ParameterlessActionError(
                '[Action] attribute applied once to the method "%s" without parameters. '
                'In this case argosy should not be used' % action.name,
                code=FaultCode.PARAMETERLESS_ACTION,
                action=action.name,
            )

    @staticmethod
    def _check_name_is_not_reserved(action):
        if action.name.lower() == RESERVED_NAME:
            raise ReservedNameError(
                'Method name "%s" is reserved. Please, choose another name' % action.name,
                code=FaultCode.RESERVED_NAME,
                action=action.name,
            )

    @staticmethod
    def _check_markers_do_not_conflict(action):
        for parameter in action.parameters:
            if len(parameter.markers) > 1:
                raise ConflictingMarkersError(
                    'More than one attribute is applied to the parameter "%s" in the method "%s"' % (
                        parameter.name,
                        action.name,
                    ),
                    code=FaultCode.CONFLICTING_MARKERS,
                    action=action.name,
                    parameter=parameter.name,
                )

    @staticmethod
    def _check_optional_after_required(action):
        found = False
        for parameter in action.parameters:
            if parameter.kind is Kind.OPTIONAL:
                found = True
            elif found:
                raise MarkerOrderError(
                    "It is not allowed to write a parameter with a Required attribute after a parameter "
                    'with an Optional one. See method "%s" parameter "%s"' % (action.name, parameter.name),
                    code=FaultCode.MARKER_ORDER,
                    action=action.name,
                    parameter=parameter.name,
                )

    def _check_defaults_are_assignable(self, action):
        for parameter in action.parameters:
            if parameter.kind is Kind.REQUIRED:
                continue
            default = self._metadata.optional_info(parameter).default
            target, _ = converters.unwrap(parameter.type)
            if isinstance(default, str) and target in converters.DATE_TYPES and converters.can_be_date(default):
                continue
            if not converters.accepts(parameter.type, default):
                raise DefaultTypeError(
                    'Default value for an optional parameter "%s" in method "%s" can not be assigned to the parameter' % (
                        parameter.name,
                        action.name,
                    ),
                    code=FaultCode.DEFAULT_TYPE,
                    action=action.name,
                    parameter=parameter.name,
                )

    def _check_names_are_not_duplicated(self, action):
        names = []
        for parameter in action.parameters:
            if parameter.kind is Kind.REQUIRED:
                names.append(parameter.name.lower())
                continue
            for name in (parameter.name, *self._metadata.optional_info(parameter).altnames):
                if name.lower() in names:
                    raise DuplicatedNameError(
                        'Found duplicated parameter name "%s" in method "%s". '
                        "Please check alt names for optional parameters" % (name, action.name),
                        code=FaultCode.DUPLICATED_NAME,
                        action=action.name,
                        parameter=parameter.name,
                    )
                names.append(name.lower())


__all__ = (
    "RESERVED_NAME",
    "MetadataValidator",
)
