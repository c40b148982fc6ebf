"""Domain rule errors raised after authorization, before persistence."""

from fastapi import status


class DomainError(Exception):
    """Base class for business-rule failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class DomainValidationError(DomainError):
    """Cross-field or reference rule violated."""

    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateRecordError(DomainError):
    """A record with the same identifying fields already exists."""

    status_code = status.HTTP_409_CONFLICT


class ResourceInUse(DomainError):
    """The record is still referenced and cannot be removed."""

    status_code = status.HTTP_409_CONFLICT


class ResourceNotFound(DomainError):
    """The requested record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str) -> None:
        self.resource = resource
        super().__init__(f"{resource.capitalize()} not found")
