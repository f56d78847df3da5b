"""Allow running as python -m padring."""

import sys

from .cli import main

sys.exit(main())
