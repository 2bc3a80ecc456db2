# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Custom exceptions for the H5P content bank service.

Every failure a caller can observe carries a machine-stable ErrorKind
next to its human-readable message:
- H5PError: Base exception for all content bank errors
- InvalidPayloadError: Payload or filename failed validation
- ScopeNotFoundError: Scope or collection does not exist
- ContentTypeUnavailableError: No enabled handler for the content kind
- IngestionFailedError: Handler could not turn the upload into an item
- ContentNotFoundError: Content item does not exist
- AuthorizationDeniedError: Principal lacks the required capability
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-stable error identifiers surfaced to callers."""

    INVALID_PAYLOAD = "invalid_payload"
    SCOPE_NOT_FOUND = "scope_not_found"
    CONTENT_TYPE_UNAVAILABLE = "content_type_unavailable"
    INGESTION_FAILED = "ingestion_failed"
    CONTENT_NOT_FOUND = "content_not_found"
    AUTHORIZATION_DENIED = "authorization_denied"


class H5PError(Exception):
    """Base exception for all content bank errors.

    Attributes:
        kind: Machine-stable error identifier.
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    kind: ErrorKind = ErrorKind.INGESTION_FAILED

    def __init__(self, message: str, details: dict | None = None):
        """Initialize H5P error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class InvalidPayloadError(H5PError):
    """Upload payload or filename is not acceptable.

    Attributes:
        field: Name of the offending request field.
    """

    kind = ErrorKind.INVALID_PAYLOAD

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict | None = None,
    ):
        """Initialize invalid payload error.

        Args:
            message: Human-readable error description.
            field: Name of the offending request field.
            details: Optional dictionary with additional error context.
        """
        self.field = field
        super().__init__(message, details)

    def __str__(self) -> str:
        """Return string representation with the offending field."""
        if self.field:
            return f"[{self.field}] {self.message}"
        return self.message


class ScopeNotFoundError(H5PError):
    """Requested scope, or the scope of a collection, does not exist."""

    kind = ErrorKind.SCOPE_NOT_FOUND

    def __init__(
        self,
        message: str,
        scope_id: int | None = None,
        collection_id: int | None = None,
        details: dict | None = None,
    ):
        """Initialize scope not found error.

        Args:
            message: Human-readable error description.
            scope_id: Scope id that was requested, if any.
            collection_id: Collection id that was requested, if any.
            details: Optional dictionary with additional error context.
        """
        self.scope_id = scope_id
        self.collection_id = collection_id
        super().__init__(message, details)


class ContentTypeUnavailableError(H5PError):
    """No handler is registered and enabled for a content kind in a scope.

    Attributes:
        content_kind: The content kind that was requested.
    """

    kind = ErrorKind.CONTENT_TYPE_UNAVAILABLE

    def __init__(
        self,
        message: str,
        content_kind: str | None = None,
        details: dict | None = None,
    ):
        """Initialize content type unavailable error.

        Args:
            message: Human-readable error description.
            content_kind: The content kind that was requested.
            details: Optional dictionary with additional error context.
        """
        self.content_kind = content_kind
        super().__init__(message, details)

    def __str__(self) -> str:
        """Return string representation with the content kind."""
        if self.content_kind:
            return f"[{self.content_kind}] {self.message}"
        return self.message


class IngestionFailedError(H5PError):
    """Content-type handler failed to produce a content item."""

    kind = ErrorKind.INGESTION_FAILED


class ContentNotFoundError(H5PError):
    """Content item not found.

    Attributes:
        content_id: The ID of the content that was not found.
    """

    kind = ErrorKind.CONTENT_NOT_FOUND

    def __init__(
        self,
        message: str,
        content_id: int | None = None,
        details: dict | None = None,
    ):
        """Initialize content not found error.

        Args:
            message: Human-readable error description.
            content_id: The ID of the content that was not found.
            details: Optional dictionary with additional error context.
        """
        self.content_id = content_id
        super().__init__(message, details)

    def __str__(self) -> str:
        """Return string representation with content ID."""
        if self.content_id is not None:
            return f"{self.message} (content_id: {self.content_id})"
        return self.message


class AuthorizationDeniedError(H5PError):
    """Principal does not hold a capability in a scope.

    Attributes:
        capability: The capability that was required.
        scope_id: The scope the check was made against.
    """

    kind = ErrorKind.AUTHORIZATION_DENIED

    def __init__(
        self,
        message: str,
        capability: str | None = None,
        scope_id: int | None = None,
        details: dict | None = None,
    ):
        """Initialize authorization denied error.

        Args:
            message: Human-readable error description.
            capability: The capability that was required.
            scope_id: The scope the check was made against.
            details: Optional dictionary with additional error context.
        """
        self.capability = capability
        self.scope_id = scope_id
        super().__init__(message, details)
