"""Allow ``python -m circle_royale``."""

import sys

from .cli import main

sys.exit(main())
