class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400

    def payload(self) -> dict:
        """Extra JSON fields returned alongside the error message."""
        return {}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when the requested entity does not exist."""

    status_code = 404


class LocationError(AuthorizationError):
    """Raised when a clock in/out happens outside the office radius."""

    def __init__(self, message: str, *, distance: float, threshold: float):
        super().__init__(message)
        self.distance = distance
        self.threshold = threshold

    def payload(self) -> dict:
        return {"distance": round(self.distance), "threshold": self.threshold}


class FaceMatchError(AuthenticationError):
    """Raised when no stored face descriptor is close enough to the probe."""

    def __init__(self, message: str, *, best_similarity: float, threshold: float):
        super().__init__(message)
        self.best_similarity = best_similarity
        self.threshold = threshold

    def payload(self) -> dict:
        return {"bestSimilarity": round(self.best_similarity, 4), "threshold": self.threshold}
