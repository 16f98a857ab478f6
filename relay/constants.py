"""
Application-level constants for the relay protocol.

These values define the wire protocol and internal safety limits and should
NEVER be changed via environment variables. For configurable values (listen
address, endpoint path, logging), see relay/settings.py.
"""

# ============================================================================
# Wire Message Types
# ============================================================================

# Discriminant of a chat message; the last one seen is replayed to new clients
MSG_TYPE_CHAT = "message"

# Discriminant of an ephemeral cursor position update
MSG_TYPE_CURSOR_MOVE = "user-place"


# ============================================================================
# WebSocket Protocol Constants
# ============================================================================

# Close codes treated as an orderly disconnect (RFC 6455 normal / going away)
WS_ORDERLY_CLOSE_CODES = frozenset({1000, 1001})

# Close code reported for a connection the relay dropped after a failed send
WS_DROPPED_CLOSE_CODE = 1006

# Timeout (seconds) when closing WebSocket connections during shutdown
WS_CLOSE_TIMEOUT_SECONDS = 5


# ============================================================================
# Logging
# ============================================================================

# Maximum size of a single structured log line shipped to Loki
LOKI_MAX_LOG_SIZE_BYTES = 256 * 1024
