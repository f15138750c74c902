"""
clasp faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings), grouped by domain so logs and searches stay predictable.
- ParserException / ParserWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: parse-time messages include the ordinal position of
  the offending token (“at third position”).
- Short titles, one-sentence bodies, a single clear hint.

Integration
- The parser builds a fault and calls trigger(fault, **ctx).
- In non-shell mode, exceptions are raised and warnings go through the warnings
  module; in shell mode, they are rendered via rich and errors exit with status 1.
"""
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - configuration (10xxx)
      • BAD_REGISTRATION, DUPLICATED_NAME, LATE_CONFIGURATION
    - matching (111xx)
      • MISSING_ARGUMENT, FLAG_ASSIGNMENT, UNEXPECTED_POSITIONAL
    - values (112xx)
      • CONVERSION_FAILED, INVALID_CHOICE
    - validation (113xx)
      • REQUIRED_OPTION_MISSING
    - warnings (12xxx)
      • EMPTY_INLINE_VALUE

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- configuration errors (10xxx) ---
    BAD_REGISTRATION            = 10101
    DUPLICATED_NAME             = 10102
    LATE_CONFIGURATION          = 10103

    # --- matching errors (111xx) ---
    MISSING_ARGUMENT            = 11101
    FLAG_ASSIGNMENT             = 11102
    UNEXPECTED_POSITIONAL       = 11103

    # --- value errors (112xx) ---
    CONVERSION_FAILED           = 11201
    INVALID_CHOICE              = 11202

    # --- validation errors (113xx) ---
    REQUIRED_OPTION_MISSING     = 11301

    # --- warnings (12xxx) ---
    EMPTY_INLINE_VALUE          = 12101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, title):
    """
    build the rich renderable shared by exceptions and warnings.

    header: program name, fault code and title in brackets, then the message and a hint arrow.
    fancy mode wraps both lines in a panel.
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

    tool = options.get("tool")
    prog = text(getattr(main, "__prog__", getattr(tool, "prog", "clasp")), styler("prog-name"))

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(options["code"].normalize() if "code" in options else "", styler("code")),
        " | ",
        text(options.get("title", "").title(), styler(title)),
        " ]"
    )
    message = text(fault.message, styler(title.replace("title", "message")))
    parts = [message]
    if options.get("hint"):
        parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(options["hint"], styler("hint"))))

    if options.get("fancy", False):
        return Panel(Group(*parts), title=header, title_align="left")
    return Group(header, *parts)


class ParserException(Exception):
    """
    base type of every error surfaced by clasp.

    the message is the first positional argument; keyword options carry the
    rendering and diagnostic context (title, code, hint, option, token, index,
    and the runtime flags tool/shell/fancy/colorful once triggered).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, "error-title")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ConfigurationError(ParserException): ...
class ConversionError(ParserException): ...
class InvalidChoiceError(ParserException): ...
class MissingArgumentError(ParserException): ...
class FlagAssignmentError(ParserException): ...
class UnexpectedPositionalError(ParserException): ...
class RequiredOptionMissingError(ParserException): ...


class ParserWarning(Warning):
    """
    base type of every non-fatal fault surfaced by clasp.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning-title")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyInlineValueWarning(ParserWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised.

    typical options
    - tool, shell, fancy, colorful, title, code, hint, docs, and any other
      context the reporter may want to show (e.g., token/index/option).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ParserException",
    "ConfigurationError",
    "ConversionError",
    "InvalidChoiceError",
    "MissingArgumentError",
    "FlagAssignmentError",
    "UnexpectedPositionalError",
    "RequiredOptionMissingError",
    "ParserWarning",
    "EmptyInlineValueWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
