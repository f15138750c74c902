"""
clasp option registry: the owned, ordered descriptor table of one parser.

Layout
- descriptors are kept in registration order in a plain list; the integer
  position is the descriptor's handle throughout the parser.
- named keys ("-x", "-cfg", "--long") map to their descriptor index.
- positional descriptors are additionally queued (by index) in registration
  order; the matcher fills them strictly in that order.

Naming rules
- a named option has at most one short form (single dash, e.g. "-c" or
  "-cfg") and at most one long form ("--config"). Empty strings are accepted
  as placeholders for an absent form, but not both.
- a positional label is a display name and internal key: it must be non-empty,
  must not start with '-', and must be unique among positionals.
"""
import logging

from .faults import ConfigurationError, FaultCode
from .options import Option

logger = logging.getLogger(__name__)


class Registry:
    """
    Descriptor table plus name lookup for one parser instance.
    """

    def __init__(self):
        self._options = []
        self._keys = {}
        self._positionals = []
        self._labels = set()

    def __len__(self):
        return len(self._options)

    def __iter__(self):
        return iter(self._options)

    def __getitem__(self, index, /):
        return self._options[index]

    def lookup(self, token, /):
        """
        Return the index of the named option registered as `token`, or None.
        """
        return self._keys.get(token)

    def positionals(self):
        """
        Indexes of the positional descriptors, in registration order.
        """
        return tuple(self._positionals)

    def register_named(self, *names, type):
        short = long = None
        for name in names:
            if not isinstance(name, str):
                raise TypeError("option names must be strings")
            if not (name := name.strip()):
                continue
            if not name.startswith("-") or name in ("-", "--"):
                raise ConfigurationError(
                    "option name %r must start with '-' or '--'" % name,
                    title="bad registration",
                    code=FaultCode.BAD_REGISTRATION,
                    hint="register positional options with positional(%r)" % name,
                )
            kind = "long" if name.startswith("--") else "short"
            if (long if kind == "long" else short) is not None:
                raise ConfigurationError(
                    "option cannot have two %s names (%r and %r)" % (kind, long if kind == "long" else short, name),
                    title="bad registration",
                    code=FaultCode.BAD_REGISTRATION,
                    hint="pass at most one short name and one long name",
                )
            if name in self._keys:
                raise ConfigurationError(
                    "option name %r is already registered" % name,
                    title="duplicated name",
                    code=FaultCode.DUPLICATED_NAME,
                    hint="each short or long name can be registered only once",
                )
            if kind == "long":
                long = name
            else:
                short = name

        if short is None and long is None:
            raise ConfigurationError(
                "short option and long option name cannot both be empty",
                title="bad registration",
                code=FaultCode.BAD_REGISTRATION,
                hint="pass a short name (for example: -x), a long name (for example: --name), or both",
            )

        index = self._append(Option(short=short, long=long, type=type))
        self._keys.update(dict.fromkeys(self._options[index].names, index))
        return index

    def register_positional(self, label, /, *, type):
        if not isinstance(label, str):
            raise TypeError("positional label must be a string")
        if not (label := label.strip()):
            raise ConfigurationError(
                "positional label cannot be empty",
                title="bad registration",
                code=FaultCode.BAD_REGISTRATION,
                hint="name the positional after its value (for example: INPUT_FILE)",
            )
        if label.startswith("-"):
            raise ConfigurationError(
                "positional label %r cannot start with '-'" % label,
                title="bad registration",
                code=FaultCode.BAD_REGISTRATION,
                hint="register named options with option(%r)" % label,
            )
        if label in self._labels:
            raise ConfigurationError(
                "positional %r is already registered" % label,
                title="duplicated name",
                code=FaultCode.DUPLICATED_NAME,
                hint="each positional label can be registered only once",
            )

        index = self._append(Option(label=label, type=type))
        self._positionals.append(index)
        self._labels.add(label)
        return index

    def _append(self, option):
        self._options.append(option)
        logger.debug("registered %r as #%d", option.display, len(self._options) - 1)
        return len(self._options) - 1


__all__ = (
    "Registry",
)
