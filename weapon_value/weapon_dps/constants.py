"""
Formula constants for weapon DPS evaluation.
"""

# Critical strike defaults used for the crit-adjusted DPS figure
DEFAULT_CRIT_CHANCE_PCT = 5.0
DEFAULT_CRIT_MULTIPLIER = 1.5

# Absolute tolerance for reverse/forward round-trip checks
ROUND_TRIP_TOLERANCE = 0.01

# Policy: rune sockets assumed when a listing shows no socket markup.
# Unverified against the trade site for items without socket markup.
FALLBACK_SOCKET_COUNT = 2

# Entries shown in the "best value" list
DEFAULT_TOP_N = 5
