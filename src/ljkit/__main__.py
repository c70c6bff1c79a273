# =============================================================================
# LJKit Entry Point for `python -m ljkit`
# =============================================================================
# Equivalent to running the 'ljkit' command after installation:
#
#   python -m ljkit login alice
# =============================================================================

import sys

from ljkit.app import main

if __name__ == "__main__":
    sys.exit(main())
