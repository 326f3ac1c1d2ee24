"""
HUMAN logging level -- Readable progress of a generation run.

Custom level between INFO (20) and WARNING (30). It does not indicate
severity; it marks the few events a person running the CLI wants to see
(layout loaded, validation finished, files written) without technical noise.

Hierarchy:
    debug  (10) -> per-file and per-issue details, cache hits/misses
    info   (20) -> locale switches, configuration
    human  (25) -> * generation progress
    warn   (30) -> failed loads, retries
    error  (40) -> fatal errors
"""

import logging

# Custom level: between INFO (20) and WARNING (30)
HUMAN = 25
logging.addLevelName(HUMAN, "HUMAN")
