"""
Error types and centralized error handling for the batch notes pipeline.

Every failure the pipeline reports is a ProcessingError carrying a category,
a severity and the context (component, operation, work item) it happened in.
Errors are never retried here; callers decide whether to continue.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Optional, Union
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Error severity levels for categorizing failures."""
    LOW = "low"           # Affects a single value, e.g. a date hint
    MEDIUM = "medium"     # Aborts one work item
    HIGH = "high"         # Aborts the whole run
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for better handling and user guidance."""
    INVALID_FORMAT = "invalid_format"
    TRANSCRIPTION = "transcription"
    NOTES_GENERATION = "notes_generation"
    FILE_SYSTEM = "file_system"
    NETWORK = "network"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


@dataclass
class ErrorContext:
    """Context information for an error occurrence."""
    timestamp: datetime
    component: str
    operation: str
    work_item: Optional[str] = None


class ProcessingError(Exception):
    """
    Base error with categorization and context information.
    """

    default_category = ErrorCategory.UNKNOWN
    default_severity = ErrorSeverity.MEDIUM

    def __init__(
        self,
        message: str,
        category: Optional[ErrorCategory] = None,
        severity: Optional[ErrorSeverity] = None,
        context: Optional[ErrorContext] = None,
        user_message: Optional[str] = None,
        technical_details: Optional[str] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.severity = severity or self.default_severity
        self.context = context or ErrorContext(
            timestamp=datetime.now(),
            component="unknown",
            operation="unknown"
        )
        self.user_message = user_message or message
        self.technical_details = technical_details
        self.original_exception = original_exception

    @property
    def work_item(self) -> Optional[str]:
        """Name of the work item being processed when the error occurred."""
        return self.context.work_item

class InvalidFormatError(ProcessingError, ValueError):
    """A date token could not be parsed into a real calendar date-time."""
    default_category = ErrorCategory.INVALID_FORMAT
    default_severity = ErrorSeverity.LOW


class MissingCredentialError(ProcessingError):
    """The selected provider has no usable API key."""
    default_category = ErrorCategory.CONFIGURATION
    default_severity = ErrorSeverity.HIGH


class UnsupportedProviderError(ProcessingError):
    """A provider name that has no transcriber implementation."""
    default_category = ErrorCategory.CONFIGURATION
    default_severity = ErrorSeverity.HIGH


class TranscriptionFailedError(ProcessingError):
    """The transcription capability returned no usable text."""
    default_category = ErrorCategory.TRANSCRIPTION


class NotesGenerationFailedError(ProcessingError):
    """The notes capability returned no usable text."""
    default_category = ErrorCategory.NOTES_GENERATION


class ProviderAPIError(ProcessingError):
    """An HTTP call to a transcription or chat provider failed."""
    default_category = ErrorCategory.NETWORK

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code


class ArtifactExistsError(ProcessingError):
    """Attempt to overwrite a write-once artifact."""
    default_category = ErrorCategory.FILE_SYSTEM


class ErrorRecoveryManager:
    """
    Converts errors raised while processing work items and attaches context.
    """

    def handle_error(
        self,
        error: Union[Exception, ProcessingError],
        context: Optional[ErrorContext] = None
    ) -> ProcessingError:
        """
        Handle an error and attach context to it.

        Args:
            error: The error that occurred
            context: Additional context about the error

        Returns:
            ProcessingError wrapping or enriching the original error
        """
        if isinstance(error, ProcessingError):
            processing_error = error
            if context is not None:
                # Keep the more specific context the error was raised with,
                # but make sure the work item name is always known.
                if processing_error.context.component == "unknown":
                    processing_error.context = context
                elif processing_error.context.work_item is None:
                    processing_error.context.work_item = context.work_item
        else:
            processing_error = self._convert_to_processing_error(error, context)

        self._log_error(processing_error)

        return processing_error

    def _convert_to_processing_error(
        self,
        error: Exception,
        context: Optional[ErrorContext]
    ) -> ProcessingError:
        """Convert a generic exception to a ProcessingError."""
        category, severity = self._categorize_error(error)

        return ProcessingError(
            message=str(error),
            category=category,
            severity=severity,
            context=context,
            user_message=self._generate_user_message(error, category),
            technical_details=f"{type(error).__name__}: {str(error)}",
            original_exception=error
        )

    def _categorize_error(self, error: Exception) -> tuple[ErrorCategory, ErrorSeverity]:
        """Categorize an error based on its type and message."""
        error_str = str(error).lower()

        if isinstance(error, (FileNotFoundError, PermissionError, IsADirectoryError)):
            return ErrorCategory.FILE_SYSTEM, ErrorSeverity.MEDIUM

        if "transcription" in error_str or "whisper" in error_str:
            return ErrorCategory.TRANSCRIPTION, ErrorSeverity.MEDIUM

        if "notes" in error_str or "chat" in error_str:
            return ErrorCategory.NOTES_GENERATION, ErrorSeverity.MEDIUM

        if isinstance(error, OSError) or "disk" in error_str:
            return ErrorCategory.FILE_SYSTEM, ErrorSeverity.MEDIUM

        if "connection" in error_str or "timeout" in error_str or "network" in error_str:
            return ErrorCategory.NETWORK, ErrorSeverity.MEDIUM

        return ErrorCategory.UNKNOWN, ErrorSeverity.MEDIUM

    def _generate_user_message(self, error: Exception, category: ErrorCategory) -> str:
        """Generate a user-friendly error message."""
        messages = {
            ErrorCategory.TRANSCRIPTION: (
                "Speech-to-text conversion failed. The audio file is untouched "
                "and transcription will be retried on the next run."
            ),
            ErrorCategory.NOTES_GENERATION: (
                "Notes generation failed. The transcript has been kept "
                "and notes will be retried on the next run."
            ),
            ErrorCategory.FILE_SYSTEM: (
                "File operation failed. Please check paths and file permissions."
            ),
            ErrorCategory.NETWORK: (
                "Network connection failed. Please check your internet connection "
                "and try again."
            ),
        }

        return messages.get(category, f"An error occurred: {str(error)}")

    def _log_error(self, error: ProcessingError) -> None:
        """Record the error with its context at debug level; callers report failures."""
        where = f"[{error.context.component}.{error.context.operation}]"
        if error.context.work_item:
            where += f" ({error.context.work_item})"

        logger.debug(f"{where} {error.category.value} ({error.severity.value}): {error.message}")
        if error.technical_details:
            logger.debug(f"Technical details: {error.technical_details}")


# Global error recovery manager instance
error_recovery_manager = ErrorRecoveryManager()


def handle_processing_error(
    error: Union[Exception, ProcessingError],
    component: str,
    operation: str,
    work_item: Optional[str] = None
) -> ProcessingError:
    """
    Convenience function to handle processing errors with context.

    Args:
        error: The error that occurred
        component: Component where error occurred
        operation: Operation that failed
        work_item: Work item name if applicable

    Returns:
        ProcessingError with context information
    """
    context = ErrorContext(
        timestamp=datetime.now(),
        component=component,
        operation=operation,
        work_item=work_item
    )

    return error_recovery_manager.handle_error(error, context)
