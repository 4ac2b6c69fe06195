"""Allow ``python -m filechecksum``."""

import sys

from .checksummer.cli import main

sys.exit(main())
