"""Shared helpers: colored CLI output and the HTTP session wrapper."""
