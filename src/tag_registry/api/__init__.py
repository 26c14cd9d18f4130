"""Tag registry API package."""
