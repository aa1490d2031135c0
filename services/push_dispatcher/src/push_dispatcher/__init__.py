"""Push notification dispatcher for blood request responses."""
