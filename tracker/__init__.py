"""Device location tracking backend."""
