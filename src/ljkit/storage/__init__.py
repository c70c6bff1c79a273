# =============================================================================
# LJKit Storage Module
# =============================================================================
# Persistence for account snapshots (versioned JSON documents).
# =============================================================================

from ljkit.storage.snapshot import (
    SNAPSHOT_VERSION,
    AccountSnapshot,
    decode_snapshot,
    encode_snapshot,
    load_snapshot,
    save_snapshot,
)

__all__ = [
    "SNAPSHOT_VERSION",
    "AccountSnapshot",
    "encode_snapshot",
    "decode_snapshot",
    "save_snapshot",
    "load_snapshot",
]
