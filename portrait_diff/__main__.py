"""Allow running as ``python -m portrait_diff``."""

import sys

from .cli import main

sys.exit(main())
