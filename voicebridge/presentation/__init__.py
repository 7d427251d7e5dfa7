"""Presentation layer: HTTP routes, the live WebSocket and the browser client."""
