"""Upstream service providers."""
