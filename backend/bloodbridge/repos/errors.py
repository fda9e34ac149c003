class DuplicateEmail(Exception):
    """A user with this email is already registered."""
