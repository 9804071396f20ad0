"""
Helmsman usage renderer.

render(app, command=None) builds the usage text of an application as a rich
renderable; it reads the application and its commands and never mutates them,
so rendering the same state twice yields the same text.

Layout (plain mode)
    NAME by AUTHOR
    DESCR

    Available commands:
    PROG COMMAND FLAGS-USAGE
    ...

When a command is given (a command was matched but its flags were rejected),
its flag listing follows:

    Flags of COMMAND:
      --name <metavar>
            description

Palette keys
- program-name, author, description, commands-label, command-name, flags-usage,
  flag-name, metavar, flag-description, panel-title
Define a mapping named __styles__ in __main__ to override any palette entry.
"""
from collections import defaultdict

from rich.panel import Panel
from rich.text import Text

from .flags import Kind


def render(app, command=None, /):
    """
    Build the usage text of app (plus the flag listing of command, if any).

    Returns a rich Text, or a Panel wrapping it when app.fancy is set.
    """
    styles = defaultdict(str, {
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "author": "#A3A3A3",
        "description": "italic #A3A3A3",  # Neutral gray
        "commands-label": "bold #FFFFFF",  # Pure white headers
        "command-name": "bold #36C5F0",  # Sky-blue commands
        "flags-usage": "#9CA3AF",
        "flag-name": "bold #00E6FF",  # CYAN for flags
        "metavar": "bold #FFD600",  # AMBER for values
        "flag-description": "#9CA3AF",  # Muted gray
        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        return Text(str(fragment), styles[style] if app.colorful else "")

    lines = [
        Text.assemble(text(app.name, "program-name"), " by ", text(app.author, "author")),
        text(app.descr, "description"),
        Text(""),
        text("Available commands:", "commands-label"),
    ]

    for name, cmd in app.commands.items():
        lines.append(Text.assemble(
            text(app.prog, "program-name"),
            " ",
            text(name, "command-name"),
            text(cmd.get_flags_usage(), "flags-usage"),
        ))

    if command is not None and command.flags:
        lines.append(Text(""))
        lines.append(text("Flags of %s:" % command.name, "commands-label"))
        for name, flag in command.flags.items():
            if flag.kind is Kind.BOOL:
                lines.append(Text.assemble("  ", text("--" + name, "flag-name")))
            else:
                lines.append(Text.assemble("  ", text("--" + name, "flag-name"), " ", text(flag.metavar, "metavar")))
            if flag.descr:
                lines.append(Text.assemble("        ", text(flag.descr, "flag-description")))

    usage = Text("\n").join(lines)

    if app.fancy:
        return Panel(usage, title=text(app.prog, "panel-title"), title_align="left")

    return usage


__all__ = (
    "render",
)
