r"""
Helmsman flag definitions.

Overview
- Kind: the base type of a flag (exactly one per flag).
  • STRING, PATH_FILE, INT, FLOAT, ALPHANUMERIC, BOOL
- Separator: delimiter between values of a multi-value flag.
  • COMMA (default), COLON, SEMICOLON
- Traits: read-only snapshot of a flag's kind plus its independent modifiers
  (required, must_exist, many, separator, underscore, dots).
- Flag: an immutable, named flag definition used as "--name" on the command line.

Modifiers
- required: a String/PathFile flag must receive a non-empty value; Int/Float/
  Alphanumeric flags are validated even when empty.
- must_exist: a PathFile value must name an existing path.
- many: the value is a delimiter-separated list of same-typed tokens.
- separator: the delimiter used when many is set.
- underscore / dots: extend the Alphanumeric character class with "_" / ".".

Trait combinations are not checked here; they are only interpreted when a
command line is parsed (see helmsman.parsing). A Bool flag ignores required.

Quick example:
    >>> from helmsman.flags import Flag, Kind, Separator
    >>> Flag("ports", "ports to open", Kind.INT, many=True, separator=Separator.COLON)
    flag(name='ports', descr='ports to open', kind=int, ...)
"""
import enum
import re
from typing import NamedTuple

from .utils import *


class Kind(enum.Enum):
    """
    base type of a flag value.

    the enum value doubles as the metavar printed in usage text.
    """
    STRING       = "value"
    PATH_FILE    = "file"
    INT          = "int"
    FLOAT        = "float"
    ALPHANUMERIC = "alnum"
    BOOL         = "bool"

    def __repr__(self):
        return self.name.lower()


class Separator(enum.StrEnum):
    """
    delimiter between the values of a multi-value flag.
    """
    COMMA     = ","
    COLON     = ":"
    SEMICOLON = ";"


class Traits(NamedTuple):
    kind: Kind
    required: bool
    must_exist: bool
    many: bool
    separator: Separator
    underscore: bool
    dots: bool


class FlagType(type):
    """
    Metaclass giving flag definitions read-only fields and stable representations.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_{name}" backing field.
    - Provide __repr__/__rich_repr__ implementations for diagnostics.
    - Seal the resulting class against subclassing.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join("%s=%r" % pair for pair in self.__rich_repr__())
            )
        self.__repr__ = __repr__

        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        def __init_subclass__(cls, **options):
            raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
        self.__init_subclass__ = classmethod(__init_subclass__)

        return self


class Flag(metaclass=FlagType):
    """
    An immutable flag definition.

    Parameters
    - name: str (positional-only)
      Identifier used on the command line as "--name". It must be non-empty and
      must not start with "-" nor contain "=" or whitespace.
    - descr: str (positional-only, default "")
      Short help shown in the flag listing.
    - kind: Kind (positional-only, default Kind.STRING)
    - required, must_exist, many, underscore, dots: bool (keyword-only)
    - separator: Separator | str (keyword-only, default Separator.COMMA)

    Raises
    - TypeError: when an argument has the wrong type.
    - ValueError: when the name is malformed or the separator is unknown.
    """
    __introspectable__ = (
        "name",
        "descr",
        "kind",
        "required",
        "must_exist",
        "many",
        "separator",
        "underscore",
        "dots",
    )

    def __init__(
            self,
            name,
            descr="",
            kind=Kind.STRING,
            /,
            *,
            required=False,
            must_exist=False,
            many=False,
            separator=Separator.COMMA,
            underscore=False,
            dots=False,
    ):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif not re.fullmatch(r"[^\s=-][^\s=]*", name):
            raise ValueError(f"{type(self).__typename__} 'name' is not a valid flag name: {name!r}")

        if not isinstance(descr, str):
            raise TypeError(f"{type(self).__typename__} 'descr' must be a string")

        if not isinstance(kind, Kind):
            raise TypeError(f"{type(self).__typename__} 'kind' must be a Kind")

        try:
            separator = Separator(separator)
        except ValueError:
            raise ValueError(f"{type(self).__typename__} 'separator' must be one of "
                             f"{', '.join(map(repr, map(str, Separator)))}") from None

        self._name = name
        self._descr = descr.strip()
        self._kind = kind
        self._required = bool(required)
        self._must_exist = bool(must_exist)
        self._many = bool(many)
        self._separator = separator
        self._underscore = bool(underscore)
        self._dots = bool(dots)

    @property
    def traits(self):
        """
        Read-only snapshot of the kind and modifiers (hashable).
        """
        return Traits(
            self._kind,
            self._required,
            self._must_exist,
            self._many,
            self._separator,
            self._underscore,
            self._dots,
        )

    @property
    def metavar(self):
        """
        Value placeholder used in usage text, e.g. "<int>" or "<int>[:<int>...]".
        """
        metavar = "<%s>" % self._kind.value
        if self._many:
            return "%s[%s%s...]" % (metavar, self._separator, metavar)
        return metavar

    @property
    def usage(self):
        """
        Usage fragment of this flag, e.g. " --name <value>" or " [--verbose]".
        """
        if self._kind is Kind.BOOL:
            return " [--%s]" % self._name
        if self._required:
            return " --%s %s" % (self._name, self.metavar)
        return " [--%s %s]" % (self._name, self.metavar)


__all__ = (
    "Kind",
    "Separator",
    "Traits",
    "Flag",
)

# The metaclass is an implementation detail of Flag.
del FlagType
