"""
optarg faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings), grouped by domain so logs and searches stay predictable.
- OptionError / OptionWarning: base types that carry a message plus options and
  know how to render themselves with rich in a short, lowercased, actionable way.
- ParseExit: exception group bundling every error collected by a deferred parse.
- trigger(): central entry point to surface any fault (raise errors, warn warnings).

Message style
- Position-first: parse faults name the 1-based token position
  (“unknown option '--nmae' at second position”).
- Short titles, one-sentence bodies, a single clear hint.

Integration
- The matcher builds faults with code/title/hint/input/index and calls trigger().
- Callers that want to show faults (see Registry.run) print them through a rich
  Console; the styling palette can be overridden with __styles__ in __main__.
"""
import copy
import inspect
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - option errors (111xx)
      • UNKNOWN_OPTION, UNEXPECTED_ARGUMENT, DUPLICATE_OPTION, MISSING_ARGUMENT
    - warnings (121xx)
      • EMPTY_VALUE, DEPRECATED_OPTION

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- option errors (111xx) ---
    UNKNOWN_OPTION      = 11112
    UNEXPECTED_ARGUMENT = 11113
    DUPLICATE_OPTION    = 11115
    MISSING_ARGUMENT    = 11117

    # --- warnings (121xx) ---
    EMPTY_VALUE         = 12111
    DEPRECATED_OPTION   = 12112

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, kind, palette):
    """
    Shared rich layout for errors and warnings: header, message, hint.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

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

    prog = text(options.get("prog", getattr(main, "__prog__", "optarg")), styler("prog-name"))

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(options["code"].normalize() if "code" in options else "?", styler("code")),
        " | ",
        text(options.get("title", kind).title(), styler(kind + "-title")),
        " ]"
    )
    message = text(fault.message, styler(kind + "-message"))
    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if options.get("fancy", False):
        return Panel(Group(*renders), title=header, title_align="left")
    return Group(header, *renders)


class OptionError(Exception):
    """
    Base class of every error raised by optarg.

    The message is positional; everything else (code, title, hint, input,
    index, suggestions, prog, colorful, fancy) travels as keyword options and
    is exposed read-only through `options`.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name):
        # Fault context (code, input, index, ...) reads as attributes.
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(name) from None

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, "error", {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self):
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownOptionError(OptionError): ...
class UnexpectedArgumentError(OptionError): ...
class DuplicateOptionError(OptionError): ...
class MissingArgumentError(OptionError): ...


class OptionWarning(Warning):
    """
    Base class of every warning emitted by optarg (soft, non-fatal feedback).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name):
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(name) from None

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, "warning", {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self):
        warnings.warn(self, stacklevel=len(inspect.stack()))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyValueWarning(OptionWarning): ...
class DeprecatedOptionWarning(OptionWarning): ...


class ParseExit(ExceptionGroup):
    """
    Every error collected by a deferred parse, in the order they were found.
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad arguments", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad arguments", tuple(exceptions))
        self.options = MappingProxyType(options)

    def derive(self, exceptions):
        return type(self)(exceptions, **self.options)

    def __rich__(self):
        renders = [copy.replace(exception, **self.options) for exception in self.exceptions]
        return Group(*renders)

    def __trigger__(self):
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - errors are raised, warnings are emitted through warnings.warn().
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "OptionError",
    "UnknownOptionError",
    "UnexpectedArgumentError",
    "DuplicateOptionError",
    "MissingArgumentError",
    "OptionWarning",
    "EmptyValueWarning",
    "DeprecatedOptionWarning",
    "ParseExit",
    "trigger",
)
