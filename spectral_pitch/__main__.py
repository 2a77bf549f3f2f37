"""Allow ``python -m spectral_pitch``."""

import sys

from .cli import main

sys.exit(main())
