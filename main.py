import sys

from rich.pretty import pprint

from helmsman import *

app = Application("shipyard", "Builds and launches ships", "The Crew")


@app.command("launch", "Launch a ship")
def launch(app):
    pprint(dict(app.parsed_flags))
    return 0


launch.add_flag(Flag("name", "ship name", Kind.ALPHANUMERIC, required=True, underscore=True))
launch.add_flag(Flag("manifest", "cargo manifest", Kind.PATH_FILE, must_exist=True))
launch.add_flag(Flag("ports", "ports of call", Kind.INT, many=True, separator=Separator.COLON))
launch.add_flag(Flag("speed", "cruise speed", Kind.FLOAT))
launch.add_flag(Flag("dry-run", "do not leave the dock", Kind.BOOL))


if __name__ == '__main__':
    sys.exit(app.run())
