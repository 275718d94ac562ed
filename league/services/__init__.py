"""Domain access functions. Each takes an AsyncSession first and returns DTOs."""


class InvalidReference(Exception):
    """Input names a row that does not exist (bad team, user or role id)."""
