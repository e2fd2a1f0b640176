"""
Error taxonomy for the lead qualification engine.

Request-level errors (validation, lookup, ownership) reject a request before
any state is touched. Extraction and persistence failures are raised by their
components and contained by the conversation service.
"""


class LeadQualifierError(Exception):
    """Base class for all engine errors."""

    # Safe text for the transport layer; the exception message stays internal.
    public_message = "Failed to process your request"


class ValidationError(LeadQualifierError):
    """A required input (lead name, message text, conversation id) is missing."""

    public_message = "Invalid request"


class NotFoundError(LeadQualifierError):
    """Unknown conversation or industry id."""

    public_message = "Resource not found"


class AuthorizationError(LeadQualifierError):
    """A session tried to write to a conversation it does not own."""

    public_message = "Not allowed to access this conversation"


class ExtractionFailure(LeadQualifierError):
    """Metadata extraction raised while processing a user message."""


class PersistenceError(LeadQualifierError):
    """Writing a classification record to the ledger failed."""
