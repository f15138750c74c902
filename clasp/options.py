r"""
clasp option descriptors and registration handles.

Overview
- Option: the registered metadata and runtime state of one command-line option,
  named (-x/--long) or positional (identified by its slot). Read-only from the
  outside; the parser mutates it only during parse().
- OptionHandle: what registration returns. Its chainable methods configure the
  underlying Option before parsing begins:

    >>> parser.option("-c", "--cfg").required().metavar("FILE").store(settings, "cfg")

Modes
- flag: presence-only, consumes no following token; the stored value is the
  conversion of the empty string (True for bool).
- value-consuming: takes the next token (or the inline '=value') as raw text.

Value resolution
- assign(): convert-once result of a match; updates value, marks as set,
  writes bound storage.
- fallback(): applies the default to an unset option (also written to storage).
- invoke(): runs the callback with the current value.

Introspection
- OptionType exposes the fields listed in __introspectable__ as read-only
  properties and provides stable __repr__/__rich_repr__ implementations.
"""
import functools
import operator
import re
from collections.abc import Iterable, MutableMapping

from .faults import ConfigurationError, FaultCode
from .utils import *


class OptionType(type):
    """
    Metaclass turning option classes into introspectable descriptors.

    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages and representations.
    - every name listed in __introspectable__ becomes a read-only property
      mirroring the private "_{name}" field.
    """

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
            for name in type(self).__displayable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Option(metaclass=OptionType):
    """
    Descriptor for one registered option.

    Identity
    - short/long: named forms ("-c", "--cfg"); None when absent.
    - label: positional display name (also its internal key); None for named options.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    - value and default are returned as stored, so containers keep their type.
    """

    __introspectable__ = (
        "short",
        "long",
        "label",
        "type",
        "metavar",
        "descr",
        "choices",
        "required",
        "switch",
        "positional",
        "overruling",
        "callback",
        "set",
    )

    __displayable__ = (
        "short",
        "long",
        "label",
        "type",
        "required",
        "switch",
        "overruling",
        "value",
        "set",
    )

    def __init__(self, *, short=Unset, long=Unset, label=Unset, type=Unset):
        self._short = coalesce(short)
        self._long = coalesce(long)
        self._label = coalesce(label)
        self._positional = label is not Unset
        self._explicit = type is not Unset
        self._type = coalesce(type, str)
        self._metavar = None
        self._descr = None
        self._choices = frozenset()
        self._default = Unset
        self._required = False
        self._switch = False
        self._overruling = False
        self._callback = None
        self._storage = Unset
        self._value = None
        self._set = False
        self._locked = False

    @property
    def names(self):
        """
        Registry keys of a named option (short first); empty for positionals.
        """
        return tuple(name for name in (self._short, self._long) if name)

    @property
    def display(self):
        """
        Human-facing name: long form preferred, then short form, then the label.
        """
        return self._long or self._short or self._label

    @property
    def value(self):
        """
        Current value, exactly as converted or defaulted (never copied).
        """
        return self._value

    @property
    def default(self):
        return self._default

    @property
    def has_default(self):
        return self._default is not Unset

    def assign(self, value, /):
        self._value = value
        self._set = True
        self._write(value)

    def fallback(self):
        """
        Apply the default to an unset option; returns whether it did.
        """
        if self._set or self._default is Unset:
            return False
        self._value = self._default
        self._write(self._default)
        return True

    def invoke(self):
        if self._callback is not None:
            self._callback(self._value)

    def _write(self, value):
        if self._storage is Unset:
            return
        target, key = self._storage
        if isinstance(target, MutableMapping):
            target[key] = value
        else:
            setattr(target, key, value)


class OptionHandle:
    """
    Chainable configuration surface returned by registration.

    Every method returns the handle itself, so calls compose:

        parser.option("-o", "--output", type=Path).required().description("output file")

    Configuration must complete before parse(); calling a configuration
    method afterwards raises ConfigurationError.
    """

    __slots__ = ("_option",)

    def __init__(self, option, /):
        self._option = option

    def __repr__(self):
        return f"handle({self._option!r})"

    @property
    def option(self):
        return self._option

    @property
    def value(self):
        """
        Current value: the matched value, the default after validation, or None.
        """
        return self._option.value

    def _configure(self, name, value):
        if self._option._locked:
            raise ConfigurationError(
                "option %r cannot be configured once parsing started" % self._option.display,
                title="late configuration",
                code=FaultCode.LATE_CONFIGURATION,
                option=self._option,
            )
        setattr(self._option, "_" + name, value)
        return self

    def required(self):
        return self._configure("required", True)

    def optional(self):
        return self._configure("required", False)

    def flag(self):
        """
        Presence-only mode: the option consumes no following token.

        When no type was given at registration, the option becomes a bool flag.
        """
        if self._option.positional:
            raise ConfigurationError(
                "positional %r cannot be a flag" % self._option.display,
                title="bad registration",
                code=FaultCode.BAD_REGISTRATION,
                option=self._option,
            )
        if not self._option._explicit:
            self._configure("type", bool)
        return self._configure("switch", True)

    def choices(self, *values):
        """
        Restrict accepted raw values; accepts values or a single iterable.
        """
        if len(values) == 1 and isinstance(values[0], Iterable) and not isinstance(values[0], str):
            values = tuple(values[0])
        return self._configure("choices", frozenset(map(str, values)))

    def default(self, value, /):
        return self._configure("default", value)

    def store(self, target, key, /):
        """
        Bind external storage: a mapping entry (target[key]) or an attribute (target.key).
        """
        if not isinstance(target, MutableMapping) and not isinstance(key, str):
            raise TypeError("store() attribute name must be a string")
        return self._configure("storage", (target, key))

    def callback(self, function, /):
        if not callable(function):
            raise TypeError("callback() argument must be callable")
        return self._configure("callback", function)

    def overruling(self):
        return self._configure("overruling", True)

    def description(self, text, /):
        if not isinstance(text, str):
            raise TypeError("description() argument must be a string")
        return self._configure("descr", text.strip() or None)

    def metavar(self, text, /):
        if not isinstance(text, str):
            raise TypeError("metavar() argument must be a string")
        return self._configure("metavar", text.strip() or None)


__all__ = (
    "Option",
    "OptionHandle",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports.
del OptionType
