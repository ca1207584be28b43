"""Upstream API connectors."""
