# =============================================================================
# LJKit: A Client Library for the LiveJournal Flat Protocol
# =============================================================================
#
# LJKit talks to LiveJournal-style servers over the line-oriented "flat"
# client protocol. It handles the account session (login, logout and
# arbitrary protocol requests) and keeps the data a posting client needs
# between runs.
#
# Features:
#   - Login with hashed passwords (the plaintext never leaves the process)
#   - Incremental mood downloads into a sorted, searchable mood directory
#   - Journal, userpic, web menu and friends list parsing
#   - Lifecycle events and a connect veto hook for UI integration
#   - JSON account snapshots and XDG compliant configuration
#
# =============================================================================

__version__ = "0.1.0"
__app_name__ = "ljkit"

# Main entry point - this is what gets called by the 'ljkit' command
from ljkit.app import main

__all__ = ["main", "__version__", "__app_name__"]
