"""
clasp parser: register options, then parse one argument vector.

What this module provides
- ArgumentParser: owns the descriptor registry, the converter registry and the
  state of a single parse() run.

Quick start
    from clasp import ArgumentParser

    parser = ArgumentParser(sys.argv, "Sample Application", "1.0.0", "Some really useful cli program.")
    parser.add_help()

    settings = {}
    parser.option("-c", "--cfg").required().metavar("json config file").store(settings, "cfg")
    parser.option("-s").flag().description("silent mode").store(settings, "silent")
    parser.positional("INPUT").description("file to read")

    if parser.parse():
        ...

Parse pipeline
- scan: walk argv[1:] left to right. A 'name=value' token whose name is a
  registered option is split and the value spliced back as the next token.
  Registered names match their option (flags take no value, other options
  consume the next token); every other token fills the next free positional.
- overruling: the first matched option flagged as overruling (help, version)
  runs its callback alone and parse() returns False.
- validation: unset options receive their default; required options without
  a value or a default are reported.
- dispatch: callbacks run in match order, once per match.

Faults surface through trigger(): raised outside shell mode, rendered with rich
and followed by exit status 1 in shell mode. The first fault found left to
right wins; missing required options are only reported after the full scan.
"""
import io
import logging
import os.path
import sys
from collections import deque
from collections.abc import Sequence

from rich.console import Console
from rich.text import Text

from . import helper
from .converters import defaults
from .faults import *
from .options import OptionHandle
from .registry import Registry
from .utils import *

logger = logging.getLogger(__name__)


def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth") for nicer phrasing in messages.
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _describe(option):
    return "%s %r" % ("positional" if option.positional else "option", option.display)


class ArgumentParser:
    """
    Declarative command-line parser for a single argument vector.

    Parameters
    - argv: Sequence[str] | Unset
      Program name followed by the arguments; defaults to sys.argv.
    - name, version, descr: str | Unset
      Display metadata used by help() and the version flag.
    - shell: bool
      Render faults with rich and exit(1) instead of raising them.
    - fancy: bool
      Wrap help, version and fault renders in a panel.
    - colorful: bool
      Enable the color palette (see __styles__ in helper and faults).
    - converters: Converters | Unset
      Base converter registry; copied, so later registrations stay local.

    Lifecycle
    - configure: option()/positional()/converter()/add_help()/add_version().
    - parse() exactly once; every option is locked when it starts.
    """

    def __init__(
            self,
            argv=Unset,
            /,
            name=Unset,
            version=Unset,
            descr=Unset,
            *,
            shell=False,
            fancy=False,
            colorful=False,
            converters=Unset
    ):
        argv = coalesce(argv, sys.argv)
        if isinstance(argv, str) or not isinstance(argv, Sequence):
            raise TypeError("ArgumentParser() argument must be a sequence of strings")
        if not all(isinstance(token, str) for token in argv):
            raise TypeError("ArgumentParser() argument must be a sequence of strings")
        for metadata, label in ((name, "name"), (version, "version"), (descr, "descr")):
            if not isinstance(metadata, str | Unset):
                raise TypeError(f"ArgumentParser() {label!r} must be a string")

        self._argv = list(argv)
        self._name = coalesce(name) or None
        self._version = coalesce(version) or None
        self._descr = coalesce(descr) or None
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._converters = coalesce(converters, defaults).copy()
        self._registry = Registry()
        self._tokens = deque()
        self._matches = []
        self._parsed = False

    name = mirror("name")
    version = mirror("version")
    descr = mirror("descr")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    argv = mirror("argv")

    @property
    def prog(self):
        """
        Program name shown in usage and fault headers: basename of argv[0].
        """
        if self._argv and self._argv[0]:
            return os.path.basename(self._argv[0])
        return self._name or "clasp"

    @property
    def options(self):
        """
        Registered descriptors in registration order.
        """
        return tuple(self._registry)

    @property
    def matches(self):
        """
        Descriptors in the order they were matched by the last parse().
        """
        return tuple(self._registry[index] for index in self._matches)

    @property
    def converters(self):
        return self._converters

    # ── Registration ───────────────────────────────────────────────────────

    def _configurable(self):
        if self._parsed:
            raise ConfigurationError(
                "options cannot be registered once parsing started",
                title="late configuration",
                code=FaultCode.LATE_CONFIGURATION,
                hint="register every option before calling parse()",
            )

    def option(self, *names, type=Unset):
        """
        Register a named option from up to one short name ("-c", "-cfg") and
        one long name ("--cfg"). Empty names are placeholders.

        Returns the OptionHandle to configure it further.
        """
        self._configurable()
        return OptionHandle(self._registry[self._registry.register_named(*names, type=type)])

    def positional(self, label, /, type=str):
        """
        Register a positional option; positionals are filled in registration order.
        """
        self._configurable()
        return OptionHandle(self._registry[self._registry.register_positional(label, type=type)])

    def converter(self, type, function=Unset, /):
        """
        Register a converter for `type` on this parser only (decorator when no function).
        """
        self._configurable()
        return self._converters.register(type, function)

    def add_help(self, *names):
        """
        Register the overruling help flag (-h/--help by default) printing help().
        """
        return self.option(*(names or ("-h", "--help"))).flag().overruling().description(
            "show this help message and exit"
        ).callback(lambda value: self.print_help())

    def add_version(self, *names):
        """
        Register the overruling version flag (-v/--version by default).
        """
        return self.option(*(names or ("-v", "--version"))).flag().overruling().description(
            "show this version message and exit"
        ).callback(lambda value: self.print_version())

    # ── Rendering ──────────────────────────────────────────────────────────

    def help(self, *, width=80):
        """
        Return the plain-text help message.
        """
        renderable = helper.render_help(self, width=width - 4 * self.fancy)
        if isinstance(renderable, Text):
            return renderable.plain
        # panels only exist once laid out by a console
        console = Console(file=io.StringIO(), width=width, color_system=None)
        console.print(renderable)
        return console.file.getvalue()

    def print_help(self, *, file=None):
        console = Console(file=file)
        console.print(helper.render_help(self, width=console.width - 4 * self.fancy))

    def print_version(self, *, file=None):
        Console(file=file).print(helper.render_version(self))

    # ── Faults ─────────────────────────────────────────────────────────────

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime flags.
        """
        trigger(fault, **options, tool=self, shell=self.shell, fancy=self.fancy, colorful=self.colorful)

    # ── Parsing ────────────────────────────────────────────────────────────

    def parse(self):
        """
        Parse the argument vector, store values and invoke callbacks.

        Returns
        - True when every required option is satisfied and callbacks ran.
        - False when an overruling option short-circuited the run, or when the
          input is empty while a required option has no default (show usage).

        Raises
        - ParserException subclasses on the first fault (outside shell mode).
        """
        if self._parsed:
            raise ConfigurationError(
                "a parser parses its argument vector only once",
                title="late configuration",
                code=FaultCode.LATE_CONFIGURATION,
                hint="create a new parser for every argument vector",
            )
        self._parsed = True
        for option in self._registry:
            option._locked = True

        if len(self._argv) < 2 and any(option.required and not option.has_default for option in self._registry):
            logger.debug("vacuous input with required options, nothing parsed")
            if self.shell:
                self.print_help()
            return False

        self._scan()

        if (option := self._overruling()) is not None:
            logger.debug("overruling %s matched, short-circuiting", _describe(option))
            option.invoke()
            return False

        self._validate()
        self._dispatch()
        return True

    def _scan(self):
        """
        Match every token of argv[1:] left to right.

        Tokens travel as (position, text) pairs so messages keep pointing at the
        original argv position; an inline value reuses its option's position.
        """
        self._tokens = deque(enumerate(self._argv[1:], start=1))
        self._matches.clear()
        slots = deque(self._registry.positionals())

        while self._tokens:
            position, token = self._tokens.popleft()

            name, separator, value = token.partition("=")
            if separator and (index := self._registry.lookup(name)) is not None:
                self._split(index, name, value, position)
                token = name

            if (index := self._registry.lookup(token)) is not None:
                self._match_named(index, position)
            elif slots:
                self._match(slots.popleft(), token, position)
            else:
                self.trigger(UnexpectedPositionalError(
                    "unexpected positional argument %r at %s position" % (token, _ordinal(position)),
                    title="unexpected positional",
                    code=FaultCode.UNEXPECTED_POSITIONAL,
                    token=token,
                    index=position,
                    hint="remove this extra value or run '%s --help' to see the expected usage" % self.prog,
                    docs=getdoc(FaultCode.UNEXPECTED_POSITIONAL),
                ))

    def _split(self, index, name, value, position):
        """
        Splice the inline value of 'name=value' back as the next token.
        """
        option = self._registry[index]
        if option.switch:
            self.trigger(FlagAssignmentError(
                "flag %r at %s position cannot have an inline value" % (name, _ordinal(position)),
                title="flag cannot take a value",
                code=FaultCode.FLAG_ASSIGNMENT,
                option=option,
                index=position,
                hint="remove everything from '=' (for example: %s)" % name,
                docs=getdoc(FaultCode.FLAG_ASSIGNMENT),
            ))
        if not value:
            self.trigger(EmptyInlineValueWarning(
                "empty inline value for option %r at %s position" % (name, _ordinal(position)),
                title="empty inline value",
                code=FaultCode.EMPTY_INLINE_VALUE,
                option=option,
                index=position,
                hint="add a value after '=' (for example: %s=<value>)" % name,
                docs=getdoc(FaultCode.EMPTY_INLINE_VALUE),
            ))
        self._tokens.appendleft((position, value))

    def _match_named(self, index, position):
        option = self._registry[index]
        if option.switch:
            return self._match(index, "", position)

        try:
            at, raw = self._tokens.popleft()
        except IndexError:
            return self.trigger(MissingArgumentError(
                "expected argument after %r at %s position, but none given" % (option.display, _ordinal(position)),
                title="missing argument",
                code=FaultCode.MISSING_ARGUMENT,
                option=option,
                index=position,
                hint="pass a value after it (for example: %s <value>)" % option.display,
                docs=getdoc(FaultCode.MISSING_ARGUMENT),
            ))

        # a registered name right after a value option means its value is missing
        if self._registry.lookup(raw) is not None:
            return self.trigger(MissingArgumentError(
                "expected argument after %r at %s position, but option %r followed" % (
                    option.display, _ordinal(position), raw
                ),
                title="missing argument",
                code=FaultCode.MISSING_ARGUMENT,
                option=option,
                token=raw,
                index=position,
                hint="pass a value before %r (for example: %s <value> %s)" % (raw, option.display, raw),
                docs=getdoc(FaultCode.MISSING_ARGUMENT),
            ))

        self._match(index, raw, at)

    def _match(self, index, raw, position):
        """
        Convert, check and store one value, then record the match.
        """
        option = self._registry[index]
        try:
            value = self._converters.convert(option.type, raw)
        except ConversionError as exception:
            return self.trigger(ConversionError(
                "value %r of %s at %s position is not a valid %s" % (
                    raw, _describe(option), _ordinal(position), getattr(option.type, "__name__", option.type)
                ),
                **{
                    "title": "conversion failed",
                    "code": FaultCode.CONVERSION_FAILED,
                    **exception.options,
                    "option": option,
                    "index": position,
                    "hint": "check the value; run '%s --help' to see the expected usage" % self.prog,
                    "docs": getdoc(FaultCode.CONVERSION_FAILED),
                },
            ))

        if option.choices and not option.switch and raw not in option.choices:
            return self.trigger(InvalidChoiceError(
                "invalid choice %r for %s at %s position" % (raw, _describe(option), _ordinal(position)),
                title="invalid choice",
                code=FaultCode.INVALID_CHOICE,
                option=option,
                token=raw,
                index=position,
                choices=option.choices,
                hint="use one of: %s" % ", ".join(map(repr, sorted(option.choices))),
                docs=getdoc(FaultCode.INVALID_CHOICE),
            ))

        option.assign(value)
        self._matches.append(index)
        logger.debug("matched %s at position %d: %r", _describe(option), position, value)

    def _overruling(self):
        for index in self._matches:
            if (option := self._registry[index]).overruling:
                return option
        return None

    def _validate(self):
        """
        Apply defaults to unset options; report required options left unset.
        """
        for option in self._registry:
            if option.set:
                continue
            if option.fallback():
                logger.debug("default applied to %s: %r", _describe(option), option.value)
            elif option.required:
                self.trigger(RequiredOptionMissingError(
                    "%s is required" % _describe(option),
                    title="required option missing",
                    code=FaultCode.REQUIRED_OPTION_MISSING,
                    option=option,
                    hint="pass %s; run '%s --help' to see the expected usage" % (
                        option.display if option.positional or option.switch else "%s <value>" % option.display,
                        self.prog,
                    ),
                    docs=getdoc(FaultCode.REQUIRED_OPTION_MISSING),
                ))

    def _dispatch(self):
        for index in self._matches:
            self._registry[index].invoke()


__all__ = (
    "ArgumentParser",
)
