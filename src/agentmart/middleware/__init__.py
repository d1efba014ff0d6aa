"""Request middleware and access control."""
