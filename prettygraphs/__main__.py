"""Allow running as ``python -m prettygraphs``."""

import sys

from .cli import main

sys.exit(main())
