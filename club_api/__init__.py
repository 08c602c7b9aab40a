"""HTTP host for the club portal reminder service."""
