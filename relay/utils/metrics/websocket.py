"""
Prometheus metrics for WebSocket relay monitoring.

This module defines metrics for tracking relay connections, message rates,
send failures and broadcast fan-out durations.
"""

from relay.utils.metrics._helpers import (
    _get_or_create_counter,
    _get_or_create_gauge,
    _get_or_create_histogram,
)

ws_connections_active = _get_or_create_gauge(
    "ws_connections_active", "Number of active WebSocket connections"
)

ws_connections_total = _get_or_create_counter(
    "ws_connections_total",
    "Total WebSocket connections",
    ["status"],  # accepted, replay_failed
)

ws_messages_received_total = _get_or_create_counter(
    "ws_messages_received_total",
    "Total WebSocket messages received",
    ["type"],  # message, user-place, unknown, invalid
)

ws_messages_sent_total = _get_or_create_counter(
    "ws_messages_sent_total", "Total WebSocket messages sent"
)

ws_send_failures_total = _get_or_create_counter(
    "ws_send_failures_total", "Total failed WebSocket sends"
)

ws_broadcast_duration_seconds = _get_or_create_histogram(
    "ws_broadcast_duration_seconds",
    "Time spent delivering one broadcast to all recipients",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)
