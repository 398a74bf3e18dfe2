"""Allow running as ``python -m simple_sql``."""

import sys

from simple_sql.repl import main

sys.exit(main())
