"""Home Assistant service handlers."""
