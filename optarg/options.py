r"""
optarg option specifications.

Overview
- Arity: whether an option takes no argument, an optional argument, or a
  required argument.
- Option: a named option with at most one short alias ("-o") and at most one
  long alias ("--output"), immutable once built.

Metadata (sanitized on construction)
- names: "-x" (single letter or digit) and/or "--long-name"; at least one.
- arity: Arity | "none" | "optional" | "required".
- default: Unset | str (value-bearing options only).
- metavar: Unset | str (label in help; value-bearing options only).
- group: Unset | str (defaults to "options"), non-empty when provided.
- descr: Unset | str | Text (short help), non-empty when provided.
- hidden: bool (suppresses from help).
- deprecated: bool (warns when used).
- helper: bool (built-in help/version; stops parsing; cannot be hidden or deprecated).

Validation highlights
- Short names must match r"-[^\W_]"; long names must match r"--[^\W\d_][^\W_]*(?:-[^\W_]+)*".
- group/descr/metavar strings are trimmed; empty strings are rejected.

Quick example:
    >>> from optarg.options import Option, Arity
    >>> Option("-o", "--output", arity=Arity.REQUIRED, metavar="FILE")
    >>> Option.from_syntax("-a", "--opt-with-arg [ARG]", "takes an optional argument")
"""
import functools
import operator
import re
from enum import StrEnum

from rich.text import Text

from .utils import *


class Arity(StrEnum):
    """
    Argument arity of an option.
    """
    NONE = "none"
    OPTIONAL = "optional"
    REQUIRED = "required"


class OptionType(type):
    """
    Metaclass that turns option specs into introspectable, read-only records.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_<name>" field.
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
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

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the help metadata ('group' and 'descr').

    - group: defaults to "options"; must be a non-empty string after trimming.
    - descr: becomes None when omitted; must be a non-empty string after trimming.

    Raises
    - TypeError: if 'group' or 'descr' is not a string or Unset.
    - ValueError: if 'group' or 'descr' is a string but empty after trimming.
    """
    if not isinstance(group := metadata["group"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'group' must be a string")
    elif isinstance(group, str) and not (group := group.strip()):
        raise ValueError(f"{cls.__typename__} 'group' cannot be empty")
    metadata["group"] = coalesce(group, "options")

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: validate the names and split them into 'short' and 'long'.

    Accepted forms
    - short: "-x" where x is a single unicode letter or digit.
    - long: "--name" or "--long-name" (segments start with a letter, no underscores).

    Raises
    - TypeError: when no name is given or a name is not a string.
    - ValueError: on empty or malformed names, duplicates, or two names of the same kind.
    """
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    metadata["short"] = metadata["long"] = None
    for name in metadata.pop("names"):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif re.fullmatch(r"-[^\W_]", name):
            kind = "short"
        elif re.fullmatch(r"--[^\W\d_][^\W_]*(?:-[^\W_]+)*", name):
            kind = "long"
        else:
            raise ValueError(f"{cls.__typename__} name {name!r} is not a valid short (-x) or long (--name) option name")
        if metadata[kind] == name:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        elif metadata[kind] is not None:
            raise ValueError(f"{cls.__typename__} can have only one {kind} name")
        metadata[kind] = name


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate arity and the value-bearing fields ('default', 'metavar').

    - arity: Arity or one of its string values.
    - default: Unset or a string; forbidden when arity is NONE.
    - metavar: Unset or a non-empty string; forbidden when arity is NONE.
      Defaults to the long name upper-cased ("--output" → "OUTPUT") or "ARG".
    """
    try:
        metadata["arity"] = arity = Arity(metadata["arity"])
    except ValueError:
        raise ValueError(f"{cls.__typename__} 'arity' must be one of 'none', 'optional', or 'required'") from None

    if not isinstance(default := metadata["default"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'default' must be a string")
    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")

    if arity is Arity.NONE:
        if default is not Unset:
            raise TypeError(f"{cls.__typename__} without argument cannot have a 'default'")
        if metavar is not Unset:
            raise TypeError(f"{cls.__typename__} without argument cannot have a 'metavar'")
        metadata["default"] = metadata["metavar"] = None
        return

    if metavar is Unset:
        metavar = metadata["long"][2:].upper() if metadata["long"] else "ARG"
    metadata["default"] = coalesce(default)
    metadata["metavar"] = metavar


class Option(metaclass=OptionType):
    """
    Named option specification.

    Highlights
    - Identity: a short alias ("-v"), a long alias ("--verbose"), or both.
    - Arity: no argument, optional argument, or required argument.
    - Default: applied when an optional-argument option is given without a value,
      and reported by ParseResult.value() when the option is absent.
    - Help/UX metadata: metavar, group, descr, hidden, deprecated.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      on instances, mirroring the sanitized metadata values.
    """

    __introspectable__ = (
        "short",
        "long",
        "arity",
        "default",
        "metavar",
        "group",
        "descr",
        "helper",
        "hidden",
        "deprecated",
    )

    def __new__(
            cls,
            *names,
            arity=Arity.NONE,
            default=Unset,
            metavar=Unset,
            group=Unset,
            descr=Unset,
            helper=False,
            hidden=False,
            deprecated=False
    ):
        """
        Construct an Option with the provided metadata.

        Parameters
        - names: one or two str
          "-x" and/or "--long-name". Unicode letters are allowed.
        - arity: Arity | str
          Whether the option takes no, an optional, or a required argument.
        - default: Unset | str
          Value used when an optional argument is omitted.
        - metavar: Unset | str
          Display name for the argument in help.
        - group: Unset | str
          Help section the option is listed under. Defaults to "options".
        - descr: Unset | str | Text
          Short description for help. If Unset, becomes None.
        - helper: bool
          Built-in help/version option; parsing stops when it is matched.
        - hidden: bool
          Suppress from help output.
        - deprecated: bool
          Warn when specified.
        """
        metadata = {
            "names": names,
            "arity": arity,
            "default": default,
            "metavar": metavar,
            "group": group,
            "descr": descr,
            "helper": bool(helper),
            "hidden": bool(hidden),
            "deprecated": bool(deprecated),
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_parametric_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        if self.helper:
            if self.hidden:
                raise TypeError(f"helper {cls.__typename__} cannot be hidden")
            if self.deprecated:
                raise TypeError(f"helper {cls.__typename__} cannot be deprecated")

        return self

    def __setattr__(self, name, value):
        # Only private fields can be set, and only once (during construction).
        if not name.startswith("_") or name in self.__dict__:
            raise AttributeError(f"{type(self).__typename__} is immutable")
        super().__setattr__(name, value)

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__typename__} is immutable")

    @classmethod
    def from_syntax(cls, short, long, descr=Unset, /, **metadata):
        """
        Build an option from the compact "--name [ARG]" syntax.

        - "--name"        → no argument
        - "--name ARG"    → required argument, metavar ARG
        - "--name [ARG]"  → optional argument, metavar ARG
        An empty short (or long) string means the option has no such alias.
        """
        match = re.fullmatch(r"(?P<name>\S*)(\s+(?P<optional>\[)?(?P<metavar>[^\s\[\]]+)(?(optional)\]))?", long.strip())
        if not match:
            raise ValueError(f"{cls.__typename__} syntax {long!r} is malformed")
        if match["metavar"]:
            metadata.setdefault("arity", Arity.OPTIONAL if match["optional"] else Arity.REQUIRED)
            metadata.setdefault("metavar", match["metavar"])
        names = [name for name in (short.strip(), match["name"]) if name]
        return cls(*names, descr=descr, **metadata)

    @property
    def names(self):
        """
        Every alias of this option, short first.
        """
        return tuple(name for name in (self.short, self.long) if name)

    @property
    def key(self):
        """
        Canonical name: the long alias when present, otherwise the short one.
        """
        return self.long or self.short

    def matches(self, name, /):
        return name in self.names


__all__ = (
    "Arity",
    "Option",
)

# Not part of the public API.
del OptionType
