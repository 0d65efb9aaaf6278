"""Allow running githashprop as ``python -m githashprop``."""

import sys

from githashprop.cli_app import main

sys.exit(main())
