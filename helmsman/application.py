"""
Helmsman application registry: holds commands, resolves the invoked one, runs it.

What this module provides
- Application: display metadata (name, descr, author), a registry of Commands,
  the output sinks and the flags parsed by the last run.

Run
    Start ─ no command given ──────────────────────────→ usage + fail (1)
          ─ unknown command ───────────────────────────→ usage + fail (1)
          ─ command matched → parsing ─ fault ─────────→ usage + fail (1)
                                      ─ success → handler → handler's exit code

Quick start
    import sys
    from helmsman import Application, Flag, Kind

    app = Application("shipyard", "Builds ships", "The Crew")

    @app.command("launch", "Launch a ship")
    def launch(app):
        print("launching", app.flag("name"), "to", app.flag("port"))
        return 0

    launch.add_flag(Flag("name", "ship name", Kind.ALPHANUMERIC, required=True))
    launch.add_flag(Flag("port", "target ports", Kind.INT, many=True))

    if __name__ == "__main__":
        sys.exit(app.run())

Configuration (keyword-only)
- prog: program name shown in usage (defaults to __main__.__prog__, then to the
  basename of argv[0]).
- shell: print faults and return 1 (True, default) or raise them (False).
- fancy: wrap usage and faults in rich panels.
- colorful: style usage and faults with the palette (see __styles__ in __main__).
"""
import difflib
import logging
import os.path
import shlex
import sys
from collections.abc import Iterable

from rich.console import Console

from .commands import Command
from .faults import *
from .parsing import parse
from .usage import render
from .utils import *

logger = logging.getLogger(__name__)


class Application:
    """
    A command-line application made of named commands.

    Parameters
    - name, descr, author: str (positional-only), display metadata for usage text.
    - prog, shell, fancy, colorful: keyword-only runtime options (see module docs).
    """
    name = mirror("name")
    descr = mirror("descr")
    author = mirror("author")
    commands = mirror("cmds")
    parsed_flags = mirror("parsed")
    arguments = mirror("arguments")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def __init__(self, name, descr="", author="", /, *, prog=Unset, shell=True, fancy=False, colorful=False):
        for label, value in (("name", name), ("descr", descr), ("author", author)):
            if not isinstance(value, str):
                raise TypeError(f"application {label!r} must be a string")
        if not isinstance(prog, str | Unset):
            raise TypeError("application 'prog' must be a string")

        self._name = name
        self._descr = descr
        self._author = author
        self._prog = prog
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._cmds = {}
        self._parsed = {}
        self._arguments = []
        self._argv0 = Unset
        self._stdout = Unset
        self._stderr = Unset

    def __repr__(self):
        return "application(name=%r, commands=%r)" % (self._name, tuple(self._cmds))

    @property
    def prog(self):
        """
        Program name printed in usage lines.
        """
        if self._prog is not Unset:
            return self._prog
        argv0 = coalesce(self._argv0, sys.argv[0] if sys.argv else "")
        return getattr(__import__("__main__"), "__prog__", os.path.basename(argv0))

    @property
    def stdout(self):
        return coalesce(self._stdout, sys.stdout)

    @property
    def stderr(self):
        return coalesce(self._stderr, sys.stderr)

    def add_command(self, name, descr, handler, /):
        """
        Create a Command, attach it and return it for further flag registration.
        """
        command = Command(name, descr, handler)
        self.attach_command(command)
        return command

    def command(self, name, descr="", /):
        """
        Decorator form of add_command(): the decorated handler becomes a Command.

            @app.command("launch", "Launch a ship")
            def launch(app): ...
            launch.add_flag(...)
        """
        def wrapper(handler, /):
            if not callable(handler):
                raise TypeError("@command() must be applied to a callable")
            return self.add_command(name, descr, handler)

        return wrapper

    def attach_command(self, command, /):
        """
        Insert a pre-built Command keyed by its name (re-attaching a name overwrites it).
        """
        if not isinstance(command, Command):
            raise TypeError("attach_command() argument must be a command")
        if command.name in self._cmds:
            logger.debug("command %r replaced", command.name)
        self._cmds[command.name] = command

    def get_command(self, name, /):
        """
        The command registered under name, or None.
        """
        return self._cmds.get(name)

    def get_commands(self):
        """
        Names of the registered commands.
        """
        return tuple(self._cmds)

    def flag(self, name, /):
        """
        Value of a flag parsed by the last run ("" when absent or not parsed yet).
        """
        return self._parsed.get(name, "")

    def _console(self, file):
        return Console(
            file=file,
            color_system="auto" if self._colorful else None,
            highlight=False,
            markup=False,
            emoji=False,
            # panels wrap their own content; plain text is never wrapped
            soft_wrap=not self._fancy,
        )

    def print_usage(self, command=None, /):
        """
        Write the usage text to the output sink.
        """
        self._console(self.stdout).print(render(self, command))

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this application's runtime options merged in.

        In shell mode the fault is printed to the error sink; otherwise it is raised.
        """
        trigger(
            fault,
            **options,
            tool=self,
            console=self._console(self.stderr),
            shell=self._shell,
            fancy=self._fancy,
            colorful=self._colorful
        )

    def run(self, argv=Unset, stdout=Unset, stderr=Unset, /, *, exists=os.path.exists):
        """
        Parse argv, validate the flags of the selected command and run its handler.

        Parameters
        - argv:
          • Unset: read sys.argv.
          • str: shell-like command line (program first); split via shlex.split.
          • Iterable[str]: argument vector, index 0 being the program path.
        - stdout, stderr: writable text sinks (sys.stdout / sys.stderr by default).
        - exists: Callable[[str], bool] used for must_exist path flags.

        Returns
        - the handler's exit code, or 1 when the command line is rejected.

        Raises
        - TypeError: when argv is not Unset/str/Iterable[str].
        - CommandException: on rejected command lines when shell is False.
        """
        if argv is Unset:
            argv = list(sys.argv)
        elif isinstance(argv, str):
            argv = shlex.split(argv)
        elif isinstance(argv, Iterable):
            argv = list(argv)
            if not all(isinstance(item, str) for item in argv):
                raise TypeError("run() argument must be a string or an iterable of strings")
        else:
            raise TypeError("run() argument must be a string or an iterable of strings")

        if not callable(exists):
            raise TypeError("run() 'exists' must be callable")

        self._stdout = coalesce(stdout, sys.stdout)
        self._stderr = coalesce(stderr, sys.stderr)
        self._argv0 = argv[0] if argv else ""
        self._parsed = {}
        self._arguments = []

        command = None
        try:
            if len(argv) < 2:
                raise NoCommandError(
                    "no command given",
                    title="no command",
                    code=FaultCode.NO_COMMAND,
                    hint="pick one of the commands below",
                    docs=getdoc(FaultCode.NO_COMMAND)
                )

            if (command := self._cmds.get(argv[1])) is None:
                suggestions = difflib.get_close_matches(argv[1], self._cmds.keys(), 5)
                try:
                    hint = "did you mean %r?" % suggestions[0]
                except IndexError:
                    hint = "pick one of the commands below"
                raise UnknownCommandError(
                    "unknown command %r" % argv[1],
                    title="unknown command",
                    code=FaultCode.UNKNOWN_COMMAND,
                    hint=hint,
                    input=argv[1],
                    suggestions=suggestions,
                    docs=getdoc(FaultCode.UNKNOWN_COMMAND)
                )

            logger.debug("running command %r with %d token(s)", command.name, len(argv) - 2)
            _, self._arguments = parse(command, argv[2:], exists, self._parsed)
        except CommandException as fault:
            logger.debug("command line rejected: %s", fault)
            self.trigger(fault)
            self.print_usage(command)
            return 1

        code = command.run(self)
        logger.debug("command %r exited with %d", command.name, code)
        return code


__all__ = (
    "Application",
)
