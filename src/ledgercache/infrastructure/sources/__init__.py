"""Source-of-record implementations."""
