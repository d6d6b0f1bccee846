"""
optarg matcher: turn an argument vector into a ParseResult.

What this module provides
- Status: outcome of a parse (success, help or version requested, error).
- ParseResult: occurrences of every matched option plus the ordered positionals.
- Matcher: the single-pass, left-to-right tokenizer/matcher.
- parse(registry, argv): convenience wrapper around Matcher.

Token classes
- "--"            terminator; every later token is positional.
- "--name[=ARG]"  long option, value split on the first '='.
- "-abc"          short cluster; an option taking an argument consumes the rest
                  of the cluster ("-ofile", "-o=file") or, when last, the next token.
- "-" and others  positional.

Argument attachment (for options taking a value)
1. inline value ("--opt=ARG" or attached to a cluster);
2. the next token, unless it is a registered option or "--";
3. the default (optional arguments only), otherwise None.
A required argument with nothing to attach raises MissingArgumentError.

Faults
- Non-deferred parses raise the first error.
- Deferred parses collect every error and raise them together as ParseExit.
"""
import difflib
import shlex
import sys
from collections import deque
from collections.abc import Iterable
from enum import Enum

from .faults import *
from .options import Arity, Option
from .utils import *


class Status(Enum):
    """
    Outcome of a parse.
    """
    SUCCESS = "success"
    HELP = "help"
    VERSION = "version"
    ERROR = "error"


class ParseResult:
    """
    Structured result of one parse call.

    - Occurrences are kept per option, in command-line order, so repeated
      flags ("-vvv") and repeated values ("-m a -m b") are preserved.
    - Lookups accept any option name ("-o", "--output") or the Option itself.
    - positionals holds the non-option tokens in their original order.
    """

    def __init__(self, registry, /):
        self._registry = registry
        self._occurrences = {}
        self._positionals = []
        self._status = Status.SUCCESS
        self._faults = ()

    positionals = mirror("positionals")
    status = mirror("status")
    faults = mirror("faults")

    @property
    def help(self):
        """
        True when a help option was matched.
        """
        return self._status is Status.HELP

    @property
    def version(self):
        """
        True when the version option was matched.
        """
        return self._status is Status.VERSION

    def _resolve(self, name):
        if isinstance(name, Option):
            return name
        return self._registry.lookup(name)

    def _record(self, option, value):
        self._occurrences.setdefault(option, []).append(value)

    def is_set(self, name, /):
        """
        Whether the option appeared at least once.
        """
        return self._resolve(name) in self._occurrences

    def count(self, name, /):
        """
        Number of times the option appeared.
        """
        return len(self._occurrences.get(self._resolve(name), ()))

    def values(self, name, /):
        """
        Values of every occurrence, in order (None for occurrences without value).
        """
        return tuple(self._occurrences.get(self._resolve(name), ()))

    def value(self, name, /):
        """
        Value of the last occurrence; the option's default when absent.
        """
        option = self._resolve(name)
        try:
            return self._occurrences[option][-1]
        except KeyError:
            return option.default

    def items(self):
        """
        (option, values) pairs for every matched option, in first-match order.
        """
        return tuple((option, tuple(values)) for option, values in self._occurrences.items())

    def __getitem__(self, name):
        return self.value(name)

    def __contains__(self, name):
        try:
            return self.is_set(name)
        except KeyError:
            return False

    def __iter__(self):
        return iter(self._occurrences)

    def __len__(self):
        return len(self._occurrences)

    def __repr__(self):
        matched = ", ".join("%s=%r" % (option.key, tuple(values)) for option, values in self._occurrences.items())
        return f"parse-result(status={self._status.value!r}, options={{{matched}}}, positionals={tuple(self._positionals)!r})"

    def __rich_repr__(self):
        yield "status", self._status
        yield "options", {option.key: tuple(values) for option, values in self._occurrences.items()}
        yield "positionals", tuple(self._positionals)


def _tokenize(argv):
    """
    Normalize the caller's argv into a list of tokens.

    - Unset: sys.argv[1:].
    - str: shell-like string, split with shlex.split.
    - Iterable[str]: used as-is (tokens are not trimmed; empty strings are positionals).
    """
    if argv is Unset:
        return list(sys.argv[1:])
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argv must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argv must be a string or an iterable of strings")


class Matcher:
    """
    Single-pass matcher of an argument vector against a Registry.

    A Matcher is cheap and holds per-run state only; every call to
    match() starts from a clean ParseResult.
    """

    def __init__(self, registry, /, *, deferred=False):
        self._registry = registry
        self._deferred = bool(deferred)
        self._tokens = deque()
        self._faults = []
        self._index = 0
        self._result = None

    @property
    def result(self):
        """
        The ParseResult of the latest match() call (None before the first one).
        """
        return self._result

    def trigger(self, fault, /):
        """
        Surface a fault with the registry's runtime options.

        Errors are collected in deferred mode and raised immediately otherwise;
        warnings are always emitted right away.
        """
        options = {
            "prog": self._registry.prog,
            "colorful": self._registry.colorful,
            "fancy": self._registry.fancy,
        }
        if isinstance(fault, OptionError) and self._deferred:
            self._faults.append(fault)
            return
        trigger(fault, **options)

    def _hint(self):
        return "try '%s --help' to see all available options" % self._registry.prog

    def _is_option(self, token):
        """
        Whether a token would be matched as a registered option (or is "--").
        """
        if token == "--":
            return True
        if token.startswith("--"):
            return token.partition("=")[0] in self._registry
        if token.startswith("-") and len(token) > 1:
            return "-" + token[1] in self._registry
        return False

    def _unknown(self, input, index):
        suggestions = difflib.get_close_matches(input, self._registry.names, 5)
        try:
            hint = "did you mean %r? you can also run '%s --help' to see all options" % (
                suggestions[0], self._registry.prog
            )
        except IndexError:
            hint = self._hint()
        self.trigger(UnknownOptionError(
            "unknown option %r at %s position" % (input, ordinal(index)),
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            input=input,
            index=index,
            suggestions=tuple(suggestions),
            hint=hint,
        ))

    def _getvalue(self, option, input, value, index):
        """
        Resolve the argument of a value-bearing option.

        'value' is the inline value (None when the option was not given inline).
        The next token is only consumed when it cannot be matched as an option.
        """
        if value is not None:
            if not value:
                self.trigger(EmptyValueWarning(
                    "empty inline value for option %r at %s position" % (input, ordinal(index)),
                    title="empty inline value",
                    code=FaultCode.EMPTY_VALUE,
                    input=input,
                    index=index,
                    hint="add a value after '=' (for example: %s=%s)" % (input, option.metavar),
                ))
            return value

        if self._tokens and not self._is_option(self._tokens[0]):
            self._index += 1
            return self._tokens.popleft()

        if option.arity is Arity.REQUIRED:
            self.trigger(MissingArgumentError(
                "option %r at %s position requires an argument" % (input, ordinal(index)),
                title="missing argument",
                code=FaultCode.MISSING_ARGUMENT,
                input=input,
                index=index,
                hint="provide a value (for example: %s=%s or %s %s)" % (
                    option.key, option.metavar, input, option.metavar
                ),
            ))
        return option.default

    def _match(self, option, input, value, index):
        """
        Record one occurrence of 'option'. Returns False when parsing must stop.
        """
        if option.deprecated:
            self.trigger(DeprecatedOptionWarning(
                "option %r at %s position is deprecated" % (input, ordinal(index)),
                title="deprecated option",
                code=FaultCode.DEPRECATED_OPTION,
                input=input,
                index=index,
                hint="run '%s --help' to see current usage and alternatives" % self._registry.prog,
            ))

        if option.arity is Arity.NONE:
            if value is not None:
                self.trigger(UnexpectedArgumentError(
                    "option %r at %s position does not take an argument, but %r was given" % (
                        input, ordinal(index), value
                    ),
                    title="unexpected argument",
                    code=FaultCode.UNEXPECTED_ARGUMENT,
                    input=input,
                    index=index,
                    hint="remove everything from '=' (for example: %s)" % input,
                ))
                return True
            self._result._record(option, None)
        else:
            self._result._record(option, self._getvalue(option, input, value, index))

        if option.helper:
            self._result._status = Status.VERSION if option is self._registry.versioner else Status.HELP
            return False
        return True

    def _parse_long(self, token, index):
        input, equals, value = token.partition("=")
        try:
            option = self._registry.lookup(input)
        except KeyError:
            self._unknown(input, index)
            return True
        return self._match(option, input, value if equals else None, index)

    def _parse_short(self, token, index):
        cluster = token[1:]
        for position, char in enumerate(cluster):
            input = "-" + char
            rest = cluster[position + 1:]
            try:
                option = self._registry.lookup(input)
            except KeyError:
                self._unknown(input, index)
                continue

            if option.arity is Arity.NONE:
                # "-o=x" on a flag: report the stray value and drop the rest of the cluster
                if rest.startswith("="):
                    return self._match(option, input, rest[1:], index)
                if not self._match(option, input, None, index):
                    return False
                continue

            # value-bearing option: the remainder of the cluster is its value
            return self._match(option, input, rest.removeprefix("=") if rest else None, index)
        return True

    def match(self, argv=Unset, /):
        """
        Parse 'argv' and return a fresh ParseResult.

        phases
        - setup: reset per-run state, normalize argv into a token deque.
        - loop: classify each token and match it against the registry.
        - finalize: in deferred mode, raise every collected error as ParseExit.
        """
        self._tokens = deque(_tokenize(argv))
        self._faults = []
        self._index = 0
        self._result = result = ParseResult(self._registry)

        terminated = False
        while self._tokens:
            token = self._tokens.popleft()
            self._index += 1

            if terminated:
                result._positionals.append(token)
            elif token == "--":
                terminated = True
            elif token.startswith("--"):
                if not self._parse_long(token, self._index):
                    break
            elif token.startswith("-") and len(token) > 1:
                if not self._parse_short(token, self._index):
                    break
            else:
                result._positionals.append(token)

        if self._faults:
            result._status = Status.ERROR
            result._faults = tuple(self._faults)
            trigger(
                ParseExit(self._faults),
                prog=self._registry.prog,
                colorful=self._registry.colorful,
                fancy=self._registry.fancy,
            )
        return result


def parse(registry, argv=Unset, /, *, deferred=False):
    """
    Parse 'argv' against 'registry'.

    Parameters
    - registry: Registry
    - argv: Unset (sys.argv[1:]) | str (split with shlex) | Iterable[str]
    - deferred: collect every error and raise them together as ParseExit.

    Returns
    - ParseResult

    Raises
    - OptionError subclasses (first error) or ParseExit (deferred).
    """
    return Matcher(registry, deferred=deferred).match(argv)


__all__ = (
    "Status",
    "ParseResult",
    "Matcher",
    "parse",
)
