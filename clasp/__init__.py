__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'clasp'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "1.1.0"

from .converters import *
from .faults import *
from .options import *
from .parser import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(1, 1, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the converters
__all__ += converters.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the options
__all__ += options.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parser
__all__ += parser.__all__  # type: ignore[attr-defined]
