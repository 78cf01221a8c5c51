"""Allow ``python -m sqlpad``."""

import sys

from sqlpad.cli.main import main

sys.exit(main())
