"""WebSocket presentation layer."""

from voicebridge.presentation.ws.endpoint import live_websocket_endpoint

__all__ = ["live_websocket_endpoint"]
