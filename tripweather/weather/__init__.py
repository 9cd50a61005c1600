"""Destination weather lookup over the tracking event store."""
