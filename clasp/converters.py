"""
clasp type conversion registry.

Every value-bearing option names a target type; the registry maps that type
to a function turning the raw command-line text into a value of the type.

Built-ins
- int   → base-10 integer
- float → floating point
- bool  → True for "", "1" and "true"; False for anything else
- str   → identity

Unregistered types fall back to the type itself used as a single-argument
constructor, so any class accepting one string works out of the box.

Each parser owns a copy of the module-level `defaults`, so registrations made
through one parser never leak into another.
"""
import logging

from .faults import ConversionError, FaultCode
from .utils import Unset

logger = logging.getLogger(__name__)


def _boolean(value, /):
    return value in ("", "1", "true")


class Converters:
    """
    Mapping of target types to `str -> T` conversion functions.
    """

    def __init__(self, mapping=Unset, /):
        self._mapping = dict(mapping) if mapping is not Unset else {
            int: lambda value: int(value, 10),
            float: float,
            bool: _boolean,
            str: str,
        }

    def __contains__(self, type, /):
        return type in self._mapping

    def __len__(self):
        return len(self._mapping)

    def register(self, type, function=Unset, /):
        """
        Register `function` as the converter of `type`.

        Without a function, returns a decorator:

            @converters.register(Path)
            def path(value):
                return Path(value).expanduser()
        """
        if not callable(type):
            raise TypeError("register() first argument must be a type or a callable")
        if function is Unset:
            def wrapper(function, /):
                self.register(type, function)
                return function
            return wrapper
        if not callable(function):
            raise TypeError("register() second argument must be callable")
        logger.debug("converter registered for %r", type)
        self._mapping[type] = function
        return function

    def resolve(self, type, /):
        try:
            return self._mapping[type]
        except KeyError:
            return type

    def convert(self, type, value, /):
        """
        Convert `value` (raw command-line text) into `type`.

        Raises ConversionError, chained to the original exception, whenever
        the conversion function fails on the text.
        """
        try:
            return self.resolve(type)(value)
        except Exception as exception:
            raise ConversionError(
                "cannot convert %r to %s" % (value, getattr(type, "__name__", repr(type))),
                title="conversion failed",
                code=FaultCode.CONVERSION_FAILED,
                value=value,
                type=type,
                exception=exception,
            ) from exception

    def copy(self):
        return type(self)(self._mapping)


defaults = Converters()


__all__ = (
    "Converters",
    "defaults",
)
