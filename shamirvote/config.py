"""Global configuration for ShamirVote."""

import os

# ---------- Share-value numerals ----------
# Digits are 0-9 then a-z (case-insensitive), so base 36 is the ceiling.
MIN_BASE = 2
MAX_BASE = 36

# ---------- Reconstruction limits ----------
# C(n, k) grows fast; the service refuses jobs above this many subsets.
MAX_COMBINATIONS = int(os.environ.get("SHAMIRVOTE_MAX_COMBINATIONS", "1000000"))
# Wall-clock budget for one /recover request, polled between combinations.
RECOVER_TIMEOUT_SECONDS = float(os.environ.get("SHAMIRVOTE_RECOVER_TIMEOUT", "30"))

# ---------- Parallel tally ----------
DEFAULT_WORKERS = int(os.environ.get("SHAMIRVOTE_WORKERS", "1"))   # 1 = sequential
PARALLEL_CHUNK_SIZE = 256   # combinations per worker task

# ---------- Service endpoint (used by the CLI in remote mode) ----------
SERVICE_URL = os.environ.get("SHAMIRVOTE_URL", "http://localhost:8000")
