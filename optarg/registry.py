"""
optarg registry: the declared options of a program and its help metadata.

What this module provides
- Registry: holds Option specs (unique short and long names), program
  metadata (prog, usage, banner, epilog, version) and runtime flags
  (colorful, fancy, width); parses argument vectors and renders help.

Built-in helpers
- "-h/--help" is registered by default (help=False disables it).
- "--version" is registered when a version string is given.
- A user option may take over a helper's name: the helper simply loses that
  alias (and disappears once it has none left). Any other name clash raises
  DuplicateOptionError at registration time.

Quick start
    from optarg import Arity, Registry, Status

    registry = Registry(usage="[FILE...]", banner="Print files.", version="1.0")
    registry.add("-o", "--output", arity=Arity.REQUIRED, metavar="FILE", descr="write here")
    registry.add("-v", "--verbose", descr="say more")

    result = registry.run()
    if result.status is Status.SUCCESS:
        ...
"""
import os.path
import sys
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .faults import *
from .help import format_help, format_version, print_help, render_help
from .options import Option
from .parser import Matcher, Status
from .utils import *

# Narrowest width that still leaves room for descriptions.
DESCRIPTION_MINIMUM = 40


class Registry:
    """
    Set of declared options plus the metadata needed to render help.

    Responsibilities
    - Registration: enforces unique option identities (setup-time errors).
    - Lookup: resolves "-x" / "--name" to the registered Option.
    - Parsing: parse()/run() delegate to the Matcher.
    - Rendering: format_help()/render_help()/print_help() delegate to the help renderer.
    """

    prog = mirror("prog")
    usage = mirror("usage")
    banner = mirror("banner")
    epilog = mirror("epilog")
    version = mirror("version")
    colorful = mirror("colorful")
    fancy = mirror("fancy")
    width = mirror("width")

    def __init__(
            self,
            prog=Unset,
            usage=Unset,
            banner=Unset,
            epilog=Unset,
            version=Unset,
            *,
            help=True,
            colorful=False,
            fancy=False,
            width=80
    ):
        """
        Parameters
        - prog: Unset | str
          Program name shown in usage and faults. Defaults to __main__.__prog__
          when defined, otherwise the base name of sys.argv[0].
        - usage: Unset | str
          Text after the program name in the usage line. Synthesized from the
          visible options when omitted.
        - banner: Unset | str | Text
          Short summary displayed under the usage line.
        - epilog: Unset | str | Text
          Tail banner displayed below the list of options.
        - version: Unset | str
          Registers a "--version" helper option when given.
        - help: bool
          Register the built-in "-h/--help" helper option.
        - colorful, fancy: bool
          Styling of help and faults (palette, panel chrome).
        - width: int
          Column at which help is wrapped.
        """
        for name, object in {"prog": prog, "usage": usage, "version": version}.items():
            if not isinstance(object, str | Unset):
                raise TypeError(f"registry {name!r} must be a string")
        for name, object in {"banner": banner, "epilog": epilog}.items():
            if not isinstance(object, str | Text | Unset):
                raise TypeError(f"registry {name!r} must be a string")
        if not isinstance(width, int) or width < DESCRIPTION_MINIMUM:
            raise ValueError(f"registry 'width' must be an integer of at least {DESCRIPTION_MINIMUM}")

        main = __import__("__main__")
        self._prog = coalesce(prog, getattr(main, "__prog__", os.path.basename(sys.argv[0]) or "prog"))
        self._usage = coalesce(usage)
        self._banner = coalesce(banner)
        self._epilog = coalesce(epilog)
        self._version = coalesce(version)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._width = width

        self._options = []
        self._names = {}
        self._helper = None
        self._versioner = None

        if help:
            self._helper = self.register(Option(
                "-h", "--help", descr="show this help message and exit", helper=True
            ))
        if version is not Unset:
            self._versioner = self.register(Option(
                "--version", descr="show the version and exit", helper=True
            ))

    @property
    def helper(self):
        """
        The built-in help option (None when disabled or fully overridden).
        """
        return self._helper

    @property
    def versioner(self):
        """
        The built-in version option (None when no version is set or fully overridden).
        """
        return self._versioner

    @property
    def options(self):
        """
        Every registered option, in registration order.
        """
        return tuple(self._options)

    @property
    def names(self):
        """
        Every registered option name.
        """
        return tuple(self._names)

    @property
    def groups(self):
        """
        Options by help group, groups in first registration order.
        """
        groups = defaultdict(list)
        for option in self._options:
            groups[option.group].append(option)
        return {group: tuple(options) for group, options in groups.items()}

    def _displace(self, builtin, name):
        """
        Drop 'name' from a built-in helper; returns the replacement (or None).
        """
        position = self._options.index(builtin)
        del self._options[position]
        for alias in builtin.names:
            del self._names[alias]

        names = [alias for alias in builtin.names if alias != name]
        replacement = None
        if names:
            # the helper keeps its place in the listing
            replacement = Option(*names, descr=builtin.descr, helper=True)
            self._options.insert(position, replacement)
            self._names.update(dict.fromkeys(names, replacement))

        if builtin is self._helper:
            self._helper = replacement
        else:
            self._versioner = replacement
        return replacement

    def register(self, option, /):
        """
        Add 'option' to the registry and return it.

        Raises
        - TypeError: when 'option' is not an Option.
        - DuplicateOptionError: when one of its names is already taken by a
          non-helper option (or the very same option is registered twice).
        """
        if not isinstance(option, Option):
            raise TypeError("register() argument must be an option")

        for name in option.names:
            if (taken := self._names.get(name)) is None:
                continue
            if taken is option or taken not in (self._helper, self._versioner):
                trigger(DuplicateOptionError(
                    "option name %r is already registered" % name,
                    title="duplicate option",
                    code=FaultCode.DUPLICATE_OPTION,
                    input=name,
                    option=taken,
                    hint="give %r a different name or remove the earlier registration" % name,
                ), prog=self._prog, colorful=self._colorful, fancy=self._fancy)

        for name in option.names:
            if (taken := self._names.get(name)) is not None:
                self._displace(taken, name)

        self._options.append(option)
        self._names.update(dict.fromkeys(option.names, option))
        return option

    def add(self, *names, **metadata):
        """
        Build an Option from the arguments and register it (see Option).
        """
        return self.register(Option(*names, **metadata))

    def lookup(self, name, /):
        """
        The option registered under 'name' ("-x" or "--name").

        Raises
        - KeyError: when no option has that name.
        """
        try:
            return self._names[name]
        except (KeyError, TypeError):
            raise KeyError(name) from None

    def __contains__(self, name):
        if isinstance(name, Option):
            return name in self._options
        return name in self._names

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def __repr__(self):
        return f"registry(prog={self._prog!r}, options={[option.key for option in self._options]!r})"

    def __rich_repr__(self):
        yield "prog", self._prog
        yield "usage", self._usage
        yield "version", self._version
        yield "options", tuple(self._options)

    def parse(self, argv=Unset, /, *, deferred=False):
        """
        Parse 'argv' (see optarg.parser.parse).
        """
        return Matcher(self, deferred=deferred).match(argv)

    def render_help(self, *, width=Unset, colorful=Unset):
        return render_help(self, width=width, colorful=colorful)

    def format_help(self, *, width=Unset):
        return format_help(self, width=width)

    def print_help(self, *, console=Unset, stderr=False):
        print_help(self, console=console, stderr=stderr)

    def run(self, argv=Unset, /, *, console=Unset):
        """
        Parse 'argv' and report the outcome, leaving the exit decision to the caller.

        - help requested: print the help to stdout.
        - version requested: print the version to stdout.
        - errors: print every fault (rich) and a help hint to stderr.

        Returns
        - ParseResult, whose status tells what happened (faults holds the errors).
        """
        matcher = Matcher(self, deferred=True)
        try:
            result = matcher.match(argv)
        except ParseExit as fault:
            errors = coalesce(console, Console(stderr=True))
            errors.print(fault)
            errors.print(Text("try '%s --help' for more information" % self._prog))
            return matcher.result

        match result.status:
            case Status.HELP:
                self.print_help(console=console)
            case Status.VERSION:
                coalesce(console, Console()).print(Text(format_version(self)), soft_wrap=True)
        return result


__all__ = (
    "Registry",
)
