"""Product catalog administration service."""
