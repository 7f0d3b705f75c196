"""Core building blocks shared by the server: logging, security and persistence."""
