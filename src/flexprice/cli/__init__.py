"""Command handlers for the flexprice CLI."""
