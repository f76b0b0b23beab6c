"""
Error types shared by the plan engine, the stores and the provider clients.

Routers translate any PlanError into an HTTPException using its status_code.
"""


class PlanError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class PlanValidationError(PlanError):
    """Required fields are missing or malformed. Nothing was mutated."""

    status_code = 400


class NoActivePlanError(PlanError):
    """A category mutation was attempted without a session plan."""

    status_code = 400

    def __init__(self, message: str = "No active travel plan"):
        super().__init__(message)


class UnknownCategoryError(PlanError):
    status_code = 400

    def __init__(self, category: str | None):
        self.category = category
        super().__init__(f"Invalid category: {category}")


class ItemNotFoundError(PlanError):
    status_code = 404


class StoreUnavailableError(PlanError):
    """The durable itinerary store failed."""

    status_code = 503


class UpstreamProviderError(PlanError):
    """A third-party travel data provider failed."""

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        self.provider = provider
        self.status_code = status_code or 500
        super().__init__(f"[{provider}] {message}")
