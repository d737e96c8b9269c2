"""
Error hierarchy for transfer order generation.

Every failure carries a human-readable message plus an optional context
dict so API handlers and the CLI can report the cause without parsing
strings.
"""

from typing import Any


class TransferOrderError(Exception):
    """Base exception for transfer order errors."""
    
    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}
    
    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class ValidationError(TransferOrderError):
    """
    User input rejected before composition.
    
    Raised on the first failing field only; the user fixes it and resubmits.
    """
    
    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, {"field": field})
        self.field = field


class InvalidRibError(TransferOrderError, ValueError):
    """A RIB that is not exactly 24 ASCII digits."""
    
    def __init__(self, rib: str) -> None:
        super().__init__(
            "Le RIB doit contenir exactement 24 chiffres.",
            {"rib": rib},
        )
        self.rib = rib


class UnknownRecordError(TransferOrderError):
    """An account or supplier id that the directory does not know."""
    
    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"Unknown {kind}: {record_id}", {"kind": kind, "id": record_id})
        self.kind = kind
        self.record_id = record_id


class CompositionError(TransferOrderError):
    """Drawing or serializing the PDF failed. Terminal for the attempt."""
    pass


class MalformedLetterheadError(CompositionError):
    """The letterhead bytes could not be parsed as a PDF document."""
    pass


class GenerationInProgressError(TransferOrderError):
    """A generation was requested while another one is still running."""
    
    def __init__(self) -> None:
        super().__init__("A transfer order is already being generated")
