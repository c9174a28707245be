"""Services operating on simulator state."""
