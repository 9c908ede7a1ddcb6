"""Allow running as ``python -m sqlsh``."""

import sys

from .cli import main

sys.exit(main())
