__title__ = 'komando'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .arguments import *
from .binder import *
from .coercion import *
from .commands import *
from .faults import *
from .helper import *
from .log import *
from .resolver import *
from .runtime import *
from .tokenizer import *
from .utils import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the specs
__all__ += arguments.__all__  # type: ignore[attr-defined]
__all__ += coercion.__all__  # type: ignore[attr-defined]
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the pipeline
__all__ += tokenizer.__all__  # type: ignore[attr-defined]
__all__ += resolver.__all__  # type: ignore[attr-defined]
__all__ += binder.__all__  # type: ignore[attr-defined]
__all__ += helper.__all__  # type: ignore[attr-defined]
__all__ += runtime.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults and logging
__all__ += faults.__all__  # type: ignore[attr-defined]
__all__ += log.__all__  # type: ignore[attr-defined]
# Load the exposed API of the utilities
__all__ += utils.__all__  # type: ignore[attr-defined]
