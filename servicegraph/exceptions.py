from collections.abc import Sequence


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} '{resource_id}' not found", code="NOT_FOUND")


class ValidationError(AppError):
    status_code = 422

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class UnknownLifeEventError(ValidationError):
    """Raised at the service boundary; the planner itself skips unknown ids."""

    def __init__(self, event_ids: Sequence[str]):
        self.event_ids = list(event_ids)
        super().__init__(
            f"Unknown life event IDs: {', '.join(self.event_ids)}. "
            "List /life-events to see valid IDs."
        )


class CorpusError(AppError):
    """The corpus file is missing, unreadable or inconsistent."""

    def __init__(self, message: str):
        super().__init__(message, code="CORPUS_ERROR")
