"""Snapshot distribution: in-process hub plus its WebSocket transport."""

from chessmirror.hub.broadcast import BroadcastHub, Subscription

__all__ = ["BroadcastHub", "Subscription"]
