"""
Helmsman command layer: named units that own flags and a handler.

What this module provides
- Command: a name, a short description, an ordered set of Flag definitions and a
  handler callable. The handler receives the owning Application once the flags
  have been parsed and validated, and returns the exit code.

Quick start
    from helmsman import Command, Flag, Kind

    def build(app):
        print("building", app.flag("target"))
        return 0

    cmd = Command("build", "Build a target", build)
    cmd.add_flag(Flag("target", "what to build", Kind.ALPHANUMERIC, required=True))
    cmd.add_flag(Flag("verbose", "chatty output", Kind.BOOL))

Design notes
- Flags are keyed by name; re-adding a name replaces the previous definition in
  place (registration order of the first insertion is kept).
- Flags are iterated in registration order, which is the order used by usage
  text and by validation.
"""
import logging

from .flags import Flag
from .utils import *

logger = logging.getLogger(__name__)


class Command:
    """
    A named command with its flags and handler.

    Parameters
    - name: str (positional-only), the word selecting this command on the command line.
    - descr: str (positional-only), short help.
    - handler: Callable[[Application], int | None] (positional-only).

    Raises
    - TypeError: when name/descr are not strings or handler is not callable.
    - ValueError: when name is empty or starts with '-'.
    """
    name = mirror("name")
    descr = mirror("descr")
    handler = mirror("handler")
    flags = mirror("flags")

    def __init__(self, name, descr, handler, /):
        if not isinstance(name, str):
            raise TypeError("command 'name' must be a string")
        elif not (name := name.strip()) or name.startswith("-") or any(char.isspace() for char in name):
            raise ValueError(f"command 'name' is not a valid command name: {name!r}")
        if not isinstance(descr, str):
            raise TypeError("command 'descr' must be a string")
        if not callable(handler):
            raise TypeError("command 'handler' must be callable")

        self._name = name
        self._descr = descr.strip()
        self._handler = handler
        self._flags = {}

    def __repr__(self):
        return "command(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "name", self._name
        yield "descr", self._descr
        yield "flags", tuple(self._flags.values())

    def add_flag(self, flag, /):
        """
        Register a flag definition, keyed by its name (last write wins).

        Returns the command itself so calls can be chained.
        """
        if not isinstance(flag, Flag):
            raise TypeError("add_flag() argument must be a flag")
        if flag.name in self._flags:
            logger.debug("command %r: flag --%s redefined", self._name, flag.name)
        self._flags[flag.name] = flag
        return self

    def get_flags(self):
        """
        Names of the registered flags, in registration order.
        """
        return tuple(self._flags)

    def get_flag(self, name, /):
        """
        The flag registered under name, or None.
        """
        return self._flags.get(name)

    def get_flags_usage(self):
        """
        One-line usage fragment for all flags, e.g. " --input <file> [--verbose]".
        """
        return "".join(flag.usage for flag in self._flags.values())

    def run(self, app, /):
        """
        Invoke the handler with the owning application and return its exit code.

        A handler returning None counts as success (0). Exceptions raised by the
        handler propagate unchanged.
        """
        code = self._handler(app)
        if code is None:
            return 0
        if isinstance(code, bool) or not isinstance(code, int):
            raise TypeError(f"command {self._name!r} handler must return an integer exit code")
        return code


__all__ = (
    "Command",
)
