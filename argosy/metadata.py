"""
Argosy action metadata: read-only queries over the discovered actions.
"""
from .catalog import Kind, OptionalInfo


class Metadata:
    """
    Pure queries over a fixed list of ActionDescriptor.

    Built once per dispatch call; never shared across calls.
    """

    def __init__(self, actions, /):
        self._actions = tuple(actions)

    @property
    def actions(self):
        return self._actions

    @property
    def is_multi(self):
        return len(self._actions) > 1

    @property
    def first(self):
        return self._actions[0] if self._actions else None

    def required_count(self, action, /):
        return sum(1 for parameter in action.parameters if parameter.kind is Kind.REQUIRED)

    def lookup(self, name, /):
        """
        case-insensitive exact match on the action name, None when nothing matches.
        """
        if not isinstance(name, str):
            return None
        name = name.lower()
        for action in self._actions:
            if action.name.lower() == name:
                return action
        return None

    def single_action_all_optional(self):
        """
        true only for one action without required parameters (may run with no tokens).
        """
        return len(self._actions) == 1 and self.required_count(self._actions[0]) == 0

    def optional_info(self, parameter, /):
        """
        default value and alt names of an optional parameter.

        parameters optional through a plain Python default get an OptionalInfo with
        no alt names and the native default.
        """
        if parameter.optional is not None:
            return parameter.optional
        return OptionalInfo(None, native=True)

    def __iter__(self):
        return iter(self._actions)

    def __len__(self):
        return len(self._actions)


__all__ = (
    "Metadata",
)
