"""Fetch current or historical weather from pluggable providers."""
