"""Core application plumbing: configuration, extensions, logging and error handling."""
