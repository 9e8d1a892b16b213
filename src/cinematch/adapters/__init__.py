"""Adapters between the domain core and the outside world."""
