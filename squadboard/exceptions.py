"""
Exceptions raised by the Squadboard analytics engine.

Outcome classification never fails, so there is no classification error here.
"""


class SquadboardError(Exception):
    """Base class for all engine errors."""
    pass


class DataSourceError(SquadboardError):
    """An underlying read or write against the team data store failed."""
    pass


class InvalidInputError(SquadboardError):
    """Input rejected before it reaches the store (bad times, bad week, ...)."""
    pass
