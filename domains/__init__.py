"""Domain modules for the club portal reminder service."""
