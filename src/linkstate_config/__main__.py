"""Allow ``python -m linkstate_config``."""
import sys

from .cli import main

sys.exit(main())
