"""
Argosy dispatcher: discover, validate, bind and invoke one action.

Flow of one call
    validate metadata ─ fail ─→ report
        │
    help requested? ─ yes ─→ usage
        │
    resolve action ─ none ─→ usage + "Unknown subcommand" report
        │
    validate input ─ fail ─→ report
        │
    build parameter array → invoke

Reporting
- Every ContractError (structural, input or conversion, and those raised on purpose by an
  action body) is written through the Messenger and turns the exit status into
  ExitCode.GENERIC_ERROR. Any other exception raised by the action body propagates untouched.

Configuration
- prog: explicit argument, else __prog__ in __main__, else the host's lowercased name,
  else the basename of sys.argv[0].
- __codes__ in __main__ relabels fault codes in debug traces (FaultCode.normalize).
"""
import logging
import os
import sys
from enum import IntEnum

from .catalog import discover, hostname
from .faults import ContractError, FaultCode, UnknownActionError
from .messengers import ConsoleMessenger
from .metadata import Metadata
from .notations import HELP_TOKENS, Notation, strategy
from .utils import *
from .validator import MetadataValidator

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    SUCCESS = 0
    GENERIC_ERROR = 1


def program_name(host, /, prog=Unset):
    """
    name shown in usage lines.
    """
    if prog is not Unset:
        if not isinstance(prog, str):
            raise TypeError("'prog' must be a string")
        return prog
    main = __import__("__main__")
    if isinstance(name := getattr(main, "__prog__", None), str):
        return name
    name = hostname(host)
    if name and name != "__main__":
        return name
    return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "program"


class Dispatcher:
    """
    One dispatch call over a host.

    Parameters
    - host: module | class | instance | Iterable[Callable]
    - tokens: Sequence[str]
    - messenger: Messenger
    - notation: Notation | str
    - prog: program name for usage lines

    Instances are single-use: each call builds its own metadata, validator and strategy.
    """

    def __init__(self, host, tokens, messenger, /, notation=Notation.SWITCH, *, prog=Unset):
        if isinstance(tokens, str):
            raise TypeError("'tokens' must be a sequence of strings, not a string")
        tokens = tuple(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("'tokens' must be a sequence of strings")

        self._host = host
        self._tokens = tokens
        self._messenger = messenger
        self._notation = Notation(notation)
        self._prog = program_name(host, prog)
        self._metadata = Metadata(discover(host))
        self._validator = MetadataValidator(self._metadata, host)
        self._strategy = strategy(self._notation, tokens, messenger, self._metadata, prog=self._prog)
        self._status = ExitCode.SUCCESS

    @property
    def metadata(self):
        return self._metadata

    @property
    def strategy(self):
        return self._strategy

    @property
    def status(self):
        return self._status

    def help_requested(self):
        if not self._tokens:
            return not self._metadata.single_action_all_optional()
        return self._tokens[0] in HELP_TOKENS

    def validate(self):
        self._validator.validate()

    def run(self):
        """
        run the addressed action and return the exit status.
        """
        try:
            self._run()
        except ContractError as error:
            code = error.code.normalize() if isinstance(error.code, FaultCode) else error.code
            logger.debug("contract error %s: %s", "-" if code is None else code, error.message)
            self._messenger.error(error.message)
            self._status = ExitCode.GENERIC_ERROR
        return self._status

    def _run(self):
        logger.debug("validating %d action(s) with %s notation", len(self._metadata), self._notation.value)
        self.validate()

        if self.help_requested():
            logger.debug("help requested")
            self._strategy.print_usage()
            return

        action = self._strategy.current_action()
        if action is None:
            logger.debug("no action matches %r", self._tokens[0] if self._tokens else None)
            self._strategy.print_usage()
            raise UnknownActionError(
                'Unknown subcommand "%s"' % (self._tokens[0] if self._tokens else ""),
                code=FaultCode.UNKNOWN_ACTION,
                token=self._tokens[0] if self._tokens else None,
            )

        logger.debug("action %r selected", action.name)
        self._strategy.validate_input(action)
        values = self._strategy.build_parameter_array(action)
        args, kwargs = action.arguments(values)
        logger.debug("invoking %r with %d argument(s)", action.name, len(values))
        action.callback(*args, **kwargs)


def run(host, args=Unset, /, messenger=Unset, notation=Notation.SWITCH, *, prog=Unset, shell=Unset):
    """
    Run the action addressed by the command line.

    Parameters
    - host: module | class | instance | Iterable[Callable]
      Where the @action functions live.
    - args: Sequence[str]
      Tokens to bind; sys.argv[1:] when omitted.
    - messenger: Messenger
      Output sink; a ConsoleMessenger when omitted.
    - notation: Notation | str
      Notation.SWITCH ("/name:value") or Notation.POSITIONAL ("-name value").
    - prog: str
      Program name shown in usage lines.
    - shell: bool
      Exit the process (sys.exit) on a non-zero status. Defaults to True when the
      tokens come from sys.argv, False otherwise.

    Returns
    - ExitCode: SUCCESS, or GENERIC_ERROR after a reported contract error.
    """
    if shell is Unset:
        shell = args is Unset
    tokens = coalesce(args, sys.argv[1:])
    messenger = ConsoleMessenger() if messenger is Unset else messenger

    status = Dispatcher(host, tokens, messenger, notation, prog=prog).run()
    if shell and status:
        sys.exit(status)
    return status


def validate(host, /):
    """
    Run the structural checks only, raising the first StructuralError found.

    Meant for host test suites: a broken declaration fails the build instead of a run.
    """
    MetadataValidator(Metadata(discover(host)), host).validate()


__all__ = (
    "ExitCode",
    "Dispatcher",
    "program_name",
    "run",
    "validate",
)
