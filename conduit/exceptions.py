"""
Domain errors raised by the service layer.

Services never build HTTP responses; they raise these and the handlers
registered in ``conduit.main`` translate them (404 / 403).
"""


class ConduitError(Exception):
    """Base class for all service-layer errors."""


class NotFoundError(ConduitError):
    """A referenced user, article, comment or profile does not exist."""

    def __init__(self, entity: str, key) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key!r}")


class UnauthorizedError(ConduitError):
    """The acting user does not own the resource being modified."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"Not allowed to {action}")
