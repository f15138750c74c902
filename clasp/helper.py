"""
clasp help and version rendering.

The parsing core only exposes iteration over its registered descriptors plus
the program metadata (prog, name, version, descr); this module turns them
into rich renderables:

    <name> <version>
    <description>

    usage: prog [-h | --help] (-c | --cfg) <file> [-s] INPUT [OUTPUT]

    options:
      -h, --help     show this help message and exit
      -c, --cfg <file>
                     sets the config file

    positionals:
      INPUT          file to read

Palette keys
- program-name, program-version, description-section
- usage-label, usage-section
- group-label, argument-description
- option-name, flag-name, positional-name, metavar, choice
- panel-title

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When colorful is False, styling is suppressed.
"""
from collections import defaultdict

from rich.console import Console, Group
from rich.containers import Lines
from rich.panel import Panel
from rich.text import Text

_PALETTE = {
    # === Head sections ===
    "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
    "program-version": "bold #36C5F0",  # SKY-BLUE
    "description-section": "italic #A3A3A3",  # Neutral gray
    "usage-label": "bold #00E6FF",  # CYAN → signature info color
    "usage-section": "bold #36C5F0",

    # === Groups / arguments ===
    "group-label": "bold #FFFFFF",  # Pure white headers
    "argument-description": "#9CA3AF",  # Muted gray

    # === Names / metavars ===
    "option-name": "bold #00E6FF",  # CYAN for options
    "flag-name": "bold #22C55E",  # GREEN for flags
    "positional-name": "bold #FFD600",  # AMBER for positionals
    "metavar": "bold #FFD600",  # AMBER for parameters
    "choice": "bold #FF4D94",  # MAGENTA → choices stand out

    # === Fancy panel ===
    "panel-title": "bold #FF4D94",
}

_PADDING = 2  # leading spaces before the names column
_INDENT = 17  # column where descriptions start


class _Painter:
    """
    styling helpers bound to one parser's colorful flag and the host palette.
    """

    def __init__(self, colorful):
        self.colorful = colorful
        self.styles = defaultdict(str, _PALETTE | getattr(__import__("__main__"), "__styles__", {}))

    def style(self, style):
        return self.styles[style] if self.colorful else ""

    def text(self, fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if self.colorful else Text(fragment.plain)
        return Text(str(fragment), self.style(style))


def _names(option, painter):
    style = "flag-name" if option.switch else "option-name"
    return [painter.text(name, style) for name in option.names]


def _metavar(option, painter):
    """
    label of the value an option takes, or None for flags.
    """
    if option.switch:
        return None
    if option.positional:
        return painter.text(option.metavar or option.label, "positional-name")
    if option.choices:
        return Text.assemble(
            "{",
            Text(",").join(painter.text(choice, "choice") for choice in sorted(option.choices)),
            "}",
        )
    return Text.assemble("<", painter.text(option.metavar or option.display.lstrip("-"), "metavar"), ">")


def usage(parser, /, *, width=80):
    """
    synthesize the usage line: program, named options in registration order,
    then positionals. optional entries are bracketed; lines wrap with a hanging
    indent under the first entry.
    """
    painter = _Painter(parser.colorful)

    line = Text()
    line.append("usage", painter.style("usage-label")).append(":")
    line.append(" ")
    line.append(painter.text(parser.prog, "program-name"))
    line.append(" ")
    offset = len(line)

    inputs = []
    for option in sorted(parser.options, key=lambda option: option.positional):
        if option.positional:
            entry = _metavar(option, painter)
        else:
            entry = Text(" | ").join(_names(option, painter))
            # required alternatives are grouped
            if option.required and len(option.names) > 1:
                entry = Text.assemble("(", entry, ")")
            if (metavar := _metavar(option, painter)) is not None:
                entry = Text.assemble(entry, " ", metavar)
        if not option.required:
            entry = Text.assemble("[", entry, "]")
        inputs.append(entry)

    lines = Lines()
    for entry in inputs:
        if lines and len(lines[-1]) + 1 + len(entry) <= width - offset:
            lines[-1].append(Text(" ") + entry)
        else:
            lines.append(entry)

    for index, entry in enumerate(lines):
        if index:
            line.append("\n").append(" " * offset)
        line.append(entry)
    line.rstrip()
    return line


def _section(title, options, painter, width):
    section = Text()
    section.append(painter.text(title, "group-label")).append(":")
    section.append("\n")
    for option in options:
        if option.positional:
            names = _metavar(option, painter)
        else:
            names = Text(", ").join(_names(option, painter))
            if (metavar := _metavar(option, painter)) is not None:
                names = Text.assemble(names, " ", metavar)

        entry = Text(" " * _PADDING).append(names)
        if option.descr:
            # wide names push the description to its own line
            if len(entry) >= _INDENT - 1:
                entry.append("\n").append(" " * _INDENT)
            else:
                entry.append(" " * (_INDENT - len(entry)))
            wrapped = painter.text(option.descr, "argument-description").wrap(Console(), max(width - _INDENT, 20))
            for index, fragment in enumerate(wrapped):
                if index:
                    entry.append("\n").append(" " * _INDENT)
                entry.append(fragment)
        section.append(entry).append("\n")
    return section


def render_help(parser, /, *, width=80):
    """
    build the help renderable for `parser` (a Text, or a Panel in fancy mode).
    """
    painter = _Painter(parser.colorful)
    text = Text()

    heading = Text(" ").join(fragment for fragment in (
        painter.text(parser.name, "program-name"),
        painter.text(parser.version, "program-version"),
    ) if fragment)
    if heading:
        text.append(heading).append("\n")
    if parser.descr:
        text.append(painter.text(parser.descr, "description-section")).append("\n")
    if heading or parser.descr:
        text.append("\n")

    text.append(usage(parser, width=width)).append("\n")

    named = [option for option in parser.options if not option.positional]
    positionals = [option for option in parser.options if option.positional]
    if named:
        text.append("\n").append(_section("options", named, painter, width))
    if positionals:
        text.append("\n").append(_section("positionals", positionals, painter, width))
    text.rstrip()

    if parser.fancy:
        return Panel(
            text,
            title=Text.assemble("[", " ", f"{parser.name or parser.prog} HELP".upper(), " ", "]", style=painter.style("panel-title")),
            title_align="left",
        )
    return text


def render_version(parser, /):
    painter = _Painter(parser.colorful)
    text = Text(" ").join(fragment for fragment in (
        painter.text(parser.name or parser.prog, "program-name"),
        painter.text(parser.version, "program-version"),
    ) if fragment)
    if parser.fancy:
        return Panel(
            Group(text),
            title=Text.assemble("[", " ", f"{parser.name or parser.prog} VERSION".upper(), " ", "]", style=painter.style("panel-title")),
            title_align="left",
        )
    return text


__all__ = (
    "usage",
    "render_help",
    "render_version",
)
