"""
optarg help renderer.

Layout
    usage: PROG [-h] [-o FILE] ...

    banner paragraph, word-wrapped

    options:
      -h, --help              show this help message and exit
      -o, --output FILE       description wrapped with a hanging indent
                              at the description column
          --long-only [ARG]   options without a short alias line up

    epilog paragraph, word-wrapped

Palette keys
- usage-label, program-name, usage-section, banner-section, epilog-section
- group-label, option-name, metavar, argument-description, default
- panel-title

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When colorful is False, no style is applied (format_help always returns plain text).
"""
import textwrap
from collections import defaultdict

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .options import Arity
from .utils import *

# Column where option descriptions start (and wrap back to).
DESCRIPTION_COLUMN = 26
# Leading spaces before the names column.
PADDING = 2


def _palette(colorful):
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "usage-section": "bold #36C5F0",
        "banner-section": "italic #A3A3A3",
        "epilog-section": "#737373",

        "group-label": "bold #FFFFFF",
        "option-name": "bold #00E6FF",
        "metavar": "bold #FFD600",
        "argument-description": "#9CA3AF",
        "default": "dim #9CA3AF",

        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    return styler


def _metavar(option, styler):
    """
    " ARG" for required arguments, " [ARG]" for optional ones, nothing otherwise.
    """
    match option.arity:
        case Arity.REQUIRED:
            return Text.assemble(" ", (option.metavar, styler("metavar")))
        case Arity.OPTIONAL:
            return Text.assemble(" [", (option.metavar, styler("metavar")), "]")
        case _:
            return Text("")


def _names(option, styler):
    """
    Names column of one option ("-s, --long", "-s" or "    --long"), metavar included.
    """
    style = styler("option-name")
    if option.short and option.long:
        names = Text.assemble((option.short, style), ", ", (option.long, style))
    elif option.short:
        names = Text(option.short, style)
    else:
        # line long-only names up with the long names of "-s, --long" entries
        names = Text.assemble("    ", (option.long, style))
    return Text.assemble(" " * PADDING, names, _metavar(option, styler))


def _wrap(fragment, width, style, colorful):
    """
    Word-wrap a user-supplied str or Text into lines of at most 'width' cells.

    A Text keeps its own styling when colorful (the palette style only applies to
    plain strings); otherwise only its plain content is used.
    """
    width = max(width, 1)
    if isinstance(fragment, Text):
        text = fragment.copy() if colorful else Text(fragment.plain)
        lines = text.wrap(Console(width=width), width)
        for line in lines:
            line.rstrip()
        return list(lines)
    return [Text(line, style) for line in textwrap.wrap(str(fragment), width)]


def _paragraph(fragment, width, style, colorful):
    return Text("\n").join(_wrap(fragment, width, style, colorful))


def _usage(registry, width, styler):
    """
    Usage line: explicit usage string, or synthesized from the visible options.
    """
    usage = Text()
    usage.append("usage", styler("usage-label")).append(": ")
    usage.append(registry.prog, styler("program-name"))

    if registry.usage:
        return usage.append(" ").append(str(registry.usage), styler("usage-section"))

    offset = len(usage) + 1  # hanging-indent column for wrapped usage items
    items = []
    for option in registry.options:
        if option.hidden:
            continue
        items.append(Text.assemble(
            "[", (option.short or option.long, styler("option-name")), _metavar(option, styler), "]"
        ))

    line = len(usage)
    for item in items:
        if line + 1 + len(item) > width and line > offset:
            usage.append("\n").append(" " * (offset - 1))
            line = offset - 1
        usage.append(" ").append(item)
        line += 1 + len(item)
    return usage


def _entry(option, width, styler, colorful):
    """
    One option entry: names column plus the wrapped description.
    """
    entry = _names(option, styler)

    descr = option.descr
    if option.default is not None:
        suffix = "(default: %s)" % option.default
        if isinstance(descr, Text):
            descr = Text.assemble(descr, " ", suffix)
        else:
            descr = " ".join(filter(None, (descr, suffix)))
    if not descr:
        return entry

    lines = _wrap(descr, width - DESCRIPTION_COLUMN, styler("argument-description"), colorful)
    if len(entry) + PADDING <= DESCRIPTION_COLUMN:
        entry.append(" " * (DESCRIPTION_COLUMN - len(entry)))
    else:
        entry.append("\n").append(" " * DESCRIPTION_COLUMN)

    for index, line in enumerate(lines):
        if index:
            entry.append("\n").append(" " * DESCRIPTION_COLUMN)
        entry.append(line)
    return entry


def render_help(registry, /, *, width=Unset, colorful=Unset):
    """
    Build the help text of 'registry' as a rich Text.

    Parameters
    - width: columns to wrap at; defaults to registry.width.
    - colorful: apply the palette; defaults to registry.colorful.

    Sections are separated by one blank line; hidden options and empty groups
    are skipped; groups keep their first registration order.
    """
    width = coalesce(width, registry.width)
    colorful = coalesce(colorful, registry.colorful)
    styler = _palette(colorful)

    sections = [_usage(registry, width, styler)]

    if registry.banner:
        sections.append(_paragraph(registry.banner, width, styler("banner-section"), colorful))

    for group, options in registry.groups.items():
        visible = [option for option in options if not option.hidden]
        if not visible:
            continue
        section = Text()
        section.append(group, styler("group-label")).append(":")
        for option in visible:
            section.append("\n").append(_entry(option, width, styler, colorful))
        sections.append(section)

    if registry.epilog:
        sections.append(_paragraph(registry.epilog, width, styler("epilog-section"), colorful))

    return Text("\n\n").join(sections)


def format_help(registry, /, *, width=Unset):
    """
    Plain-text help of 'registry' (no trailing newline).
    """
    return render_help(registry, width=width, colorful=False).plain


def format_version(registry, /):
    """
    Plain-text version line ("PROG VERSION").
    """
    return "%s %s" % (registry.prog, registry.version)


def print_help(registry, /, *, console=Unset, stderr=False):
    """
    Print the help of 'registry' through a rich Console.

    When registry.fancy is set, the help is framed in a Panel titled with the
    program name.
    """
    console = coalesce(console, Console(stderr=stderr))
    renderable = render_help(registry)
    if registry.fancy:
        styler = _palette(registry.colorful)
        renderable = Panel(
            renderable,
            title=Text.assemble("[ ", f"{registry.prog} help".upper(), " ]", style=styler("panel-title")),
            title_align="left",
            expand=False,
        )
        console.print(renderable)
    else:
        console.print(renderable, soft_wrap=True)


__all__ = (
    "render_help",
    "format_help",
    "format_version",
    "print_help",
)
