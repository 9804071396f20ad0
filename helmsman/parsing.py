r"""
Helmsman parser/validator engine.

Two passes over a command's flag definitions:

scan(command, tokens)
- reads raw flag tokens the way the standard flag parser does:
  • '-name' and '--name' are equivalent
  • value flags take '--name=value' or '--name value' (the next token is consumed
    even when it starts with '-')
  • boolean flags take no separate value; '--name=false' style is accepted
  • a repeated flag keeps its last value
  • scanning stops at the first non-flag token or right after '--'
- returns the raw values (str for value flags, bool for boolean flags) and the
  unconsumed trailing tokens.

validate(command, values, exists=..., into=...)
- walks the flags in registration order and applies, per flag:
  1. required String/PathFile flags must be non-empty          → MissingFlagError
  2. PathFile + must_exist values must pass exists(value)       → MissingFileError
  3. Int/Float/Alphanumeric values (when required or non-empty)
     must fully match the kind's pattern (repeated with the
     separator when many is set)                                → Invalid*Error
  4. the raw string is stored under the flag name; booleans are
     stored as "true"/"false"
- fail-fast: the first fault is raised and validation stops; flags processed
  before it are already stored in 'into'.

Patterns
- Int:          [0-9]+
- Float:        [0-9]{1,16}\.[0-9]{1,16}
- Alphanumeric: [0-9a-zA-Z] plus '_' (underscore) and/or '.' (dots), one or more
- many:         VALUE(SEP VALUE)*  with SEP in {',', ':', ';'}
"""
import difflib
import functools
import logging
import os.path
import re
from collections import deque

from .faults import *
from .flags import Kind

logger = logging.getLogger(__name__)

# Spellings accepted for boolean flags given an inline value.
_BOOLEANS = {
    "1": True, "t": True, "T": True, "true": True, "TRUE": True, "True": True,
    "0": False, "f": False, "F": False, "false": False, "FALSE": False, "False": False,
}

_VALUES = {
    Kind.INT: r"[0-9]+",
    Kind.FLOAT: r"[0-9]{1,16}\.[0-9]{1,16}",
}

# kind → (fault, code, title, what)
_SYNTAX = {
    Kind.INT: (InvalidIntegerError, FaultCode.INVALID_INTEGER, "invalid integer", "a valid integer"),
    Kind.FLOAT: (InvalidFloatError, FaultCode.INVALID_FLOAT, "invalid float", "a valid float"),
    Kind.ALPHANUMERIC: (InvalidAlphanumericError, FaultCode.INVALID_ALPHANUMERIC, "invalid alphanumeric value",
                        "a valid alphanumeric value"),
}


@functools.cache
def _compile(traits):
    """
    Build (and cache) the full-match pattern for a flag's traits.
    """
    if traits.kind is Kind.ALPHANUMERIC:
        value = "[0-9a-zA-Z%s%s]+" % ("_" if traits.underscore else "", r"\." if traits.dots else "")
    else:
        value = _VALUES[traits.kind]
    if traits.many:
        return re.compile("%s(?:%s%s)*" % (value, re.escape(traits.separator), value))
    return re.compile(value)


def _example(traits):
    example = {
        Kind.INT: "42",
        Kind.FLOAT: "4.2",
        Kind.ALPHANUMERIC: "abc123",
    }[traits.kind]
    if traits.many:
        return traits.separator.join((example, example))
    return example


def scan(command, tokens, /):
    """
    split raw tokens into flag values and trailing arguments.

    parameters
    - command: Command whose flag definitions are known.
    - tokens: Iterable[str] following the command name.

    returns
    - tuple[dict[str, str | bool], list[str]]: values by flag name, remaining tokens.

    raises
    - MalformedTokenError, UnknownFlagError, FlagAssignmentError, FlagValueRequiredError
    """
    values = {}
    tokens = deque(tokens)

    while tokens:
        token = tokens[0]
        # '-' alone and anything not starting with '-' ends the flags
        if len(token) < 2 or token[0] != "-":
            break
        tokens.popleft()
        if token == "--":
            break

        match = re.fullmatch(r"--?(?P<input>[^-=][^=]*)(=(?P<value>.*))?", token, re.DOTALL)
        if not match:
            raise MalformedTokenError(
                "bad flag syntax %r" % token,
                title="malformed flag",
                code=FaultCode.MALFORMED_TOKEN,
                hint="write flags as --name=value, --name value or --name",
                token=token,
                docs=getdoc(FaultCode.MALFORMED_TOKEN)
            )

        input = match["input"]
        value = match["value"]  # None if no '=...' was present

        if (flag := command.get_flag(input)) is None:
            suggestions = difflib.get_close_matches(input, command.get_flags(), 5)
            try:
                hint = "did you mean --%s?" % suggestions[0]
            except IndexError:
                hint = "see the flags of %r below" % command.name
            raise UnknownFlagError(
                "unknown flag --%s" % input,
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                hint=hint,
                input=input,
                suggestions=suggestions,
                docs=getdoc(FaultCode.UNKNOWN_FLAG)
            )

        if flag.kind is Kind.BOOL:
            if value is None:
                values[input] = True
                continue
            try:
                values[input] = _BOOLEANS[value]
            except KeyError:
                raise FlagAssignmentError(
                    "flag --%s expects a boolean, got %r" % (input, value),
                    title="flag takes no value",
                    code=FaultCode.FLAG_ASSIGNMENT,
                    hint="remove everything from '=' (for example: --%s)" % input,
                    flag=flag,
                    input=value,
                    docs=getdoc(FaultCode.FLAG_ASSIGNMENT)
                ) from None
            continue

        if value is None:
            if not tokens:
                raise FlagValueRequiredError(
                    "flag --%s needs a value" % input,
                    title="value required",
                    code=FaultCode.FLAG_VALUE_REQUIRED,
                    hint="pass a value (for example: --%s=%s)" % (input, flag.metavar),
                    flag=flag,
                    docs=getdoc(FaultCode.FLAG_VALUE_REQUIRED)
                )
            value = tokens.popleft()
        values[input] = value

    return values, list(tokens)


def validate(command, values, /, exists=os.path.exists, into=None):
    """
    validate raw values against the command's flags and store them as strings.

    parameters
    - command: Command whose flags are walked in registration order.
    - values: Mapping[str, str | bool] as produced by scan().
    - exists: Callable[[str], bool] used for must_exist path flags.
    - into: dict to fill (a fresh dict when omitted).

    returns
    - the filled dict: flag name → string value ("true"/"false" for booleans).

    raises
    - MissingFlagError, MissingFileError, InvalidIntegerError, InvalidFloatError,
      InvalidAlphanumericError (first failure only).
    """
    parsed = {} if into is None else into

    for name, flag in command.flags.items():
        traits = flag.traits

        if traits.kind is Kind.BOOL:
            parsed[name] = "true" if values.get(name, False) else "false"
            logger.debug("flag --%s validated as boolean %s", name, parsed[name])
            continue

        value = values.get(name, "")

        if traits.required and traits.kind in (Kind.STRING, Kind.PATH_FILE) and not value:
            raise MissingFlagError(
                "flag --%s is missing" % name,
                title="missing flag",
                code=FaultCode.MISSING_FLAG,
                hint="pass a value (for example: --%s=%s)" % (name, flag.metavar),
                flag=flag,
                docs=getdoc(FaultCode.MISSING_FLAG)
            )

        if traits.kind is Kind.PATH_FILE and traits.must_exist and value and not exists(value):
            raise MissingFileError(
                "file '%s' from --%s does not exist" % (value, name),
                title="file not found",
                code=FaultCode.MISSING_FILE,
                hint="check the path given to --%s" % name,
                flag=flag,
                input=value,
                docs=getdoc(FaultCode.MISSING_FILE)
            )

        if traits.kind in _SYNTAX and (traits.required or value):
            if not _compile(traits).fullmatch(value):
                fault, code, title, what = _SYNTAX[traits.kind]
                raise fault(
                    "flag --%s is not %s" % (name, what),
                    title=title,
                    code=code,
                    hint="for example: --%s=%s" % (name, _example(traits)),
                    flag=flag,
                    input=value,
                    docs=getdoc(code)
                )

        parsed[name] = value
        logger.debug("flag --%s validated as %r", name, value)

    return parsed


def parse(command, tokens, /, exists=os.path.exists, into=None):
    """
    scan() then validate(); returns (parsed flags, trailing arguments).
    """
    values, arguments = scan(command, tokens)
    return validate(command, values, exists, into), arguments


__all__ = (
    "scan",
    "validate",
    "parse",
)
