"""
Prometheus metrics for the relay.

Import metrics from this package rather than from the submodules.
"""

from relay.utils.metrics.websocket import (
    ws_broadcast_duration_seconds,
    ws_connections_active,
    ws_connections_total,
    ws_messages_received_total,
    ws_messages_sent_total,
    ws_send_failures_total,
)

__all__ = [
    "ws_broadcast_duration_seconds",
    "ws_connections_active",
    "ws_connections_total",
    "ws_messages_received_total",
    "ws_messages_sent_total",
    "ws_send_failures_total",
]
