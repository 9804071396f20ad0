"""
Helmsman faults (user-input errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing error.
  Codes are grouped by domain to keep copy consistent and logs searchable.
- CommandException: base type that carries message + options and knows how to
  render itself (rich), surface itself (__trigger__) and copy itself with merged
  options (__replace__).
- trigger(): central entry point to surface any fault.
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Flag-first messages: every validation message names the offending flag.
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.

Integration
- The parser raises the first fault it meets; Application.run catches it and calls
  trigger(fault, **ctx) with the runtime options (console, shell, fancy, colorful).
- In shell mode the fault is printed to the error sink; otherwise it is raised.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_COMMAND, NO_COMMAND
    - tokens (1111x)
      • MALFORMED_TOKEN, UNKNOWN_FLAG, FLAG_ASSIGNMENT, FLAG_VALUE_REQUIRED
    - validation (1115x)
      • MISSING_FLAG, MISSING_FILE, INVALID_INTEGER, INVALID_FLOAT, INVALID_ALPHANUMERIC

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND      = 11101
    NO_COMMAND           = 11103

    # --- token errors (11xxx) ---
    MALFORMED_TOKEN      = 11111
    UNKNOWN_FLAG         = 11112
    FLAG_ASSIGNMENT      = 11113
    FLAG_VALUE_REQUIRED  = 11117

    # --- validation errors (11xxx) ---
    MISSING_FLAG         = 11151
    MISSING_FILE         = 11152
    INVALID_INTEGER      = 11153
    INVALID_FLOAT        = 11154
    INVALID_ALPHANUMERIC = 11155

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base class of every user-input fault.

    options (all optional, merged in by trigger()/__replace__)
    - title, code, hint, docs: copy shown to the user.
    - tool: the Application (program name for the header).
    - console: rich Console bound to the error sink (shell mode).
    - shell: print instead of raising.
    - fancy: wrap the fault in a panel.
    - colorful: apply the palette.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "#737373",  # dim footer gray
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        try:
            prog = self.options["tool"].prog
        except KeyError:
            prog = "helmsman"
        prog = text(getattr(main, "__prog__", prog), styler("prog-name"))

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if code is not None else "", styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))
        parts = [message]
        if hint := self.options.get("hint"):
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        if docs := self.options.get("docs"):
            parts.append(text(docs, styler("docs")))

        if self.options.get("fancy", False):
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options["console"].print(self, soft_wrap=not self.options.get("fancy", False))

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class NoCommandError(CommandException): ...
class UnknownCommandError(CommandException): ...
class MalformedTokenError(CommandException): ...
class UnknownFlagError(CommandException): ...
class FlagAssignmentError(CommandException): ...
class FlagValueRequiredError(CommandException): ...

class ValidationError(CommandException): ...
class MissingFlagError(ValidationError): ...
class MissingFileError(ValidationError): ...
class InvalidIntegerError(ValidationError): ...
class InvalidFloatError(ValidationError): ...
class InvalidAlphanumericError(ValidationError): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise, the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "NoCommandError",
    "UnknownCommandError",
    "MalformedTokenError",
    "UnknownFlagError",
    "FlagAssignmentError",
    "FlagValueRequiredError",
    "ValidationError",
    "MissingFlagError",
    "MissingFileError",
    "InvalidIntegerError",
    "InvalidFloatError",
    "InvalidAlphanumericError",
    "FaultCode",
    "trigger",
    "getdoc",
)
