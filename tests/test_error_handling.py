"""
Tests for error types, categorization and context handling.
"""

import gc
import logging
import weakref
import pytest
from datetime import datetime

from meeting_batch_notes.error_handling import (
    ArtifactExistsError, ErrorCategory, ErrorContext, ErrorRecoveryManager, ErrorSeverity,
    InvalidFormatError, MissingCredentialError, NotesGenerationFailedError, ProcessingError,
    ProviderAPIError, TranscriptionFailedError, UnsupportedProviderError, handle_processing_error
)


class TestProcessingError:
    """Test ProcessingError class functionality."""

    def test_processing_error_creation(self):
        context = ErrorContext(
            timestamp=datetime.now(),
            component="artifact_pipeline",
            operation="transcribe",
            work_item="241029"
        )

        error = ProcessingError(
            message="Test error",
            category=ErrorCategory.TRANSCRIPTION,
            severity=ErrorSeverity.HIGH,
            context=context,
            user_message="User-friendly error message",
            technical_details="Technical details here"
        )

        assert error.message == "Test error"
        assert error.category == ErrorCategory.TRANSCRIPTION
        assert error.severity == ErrorSeverity.HIGH
        assert error.user_message == "User-friendly error message"
        assert error.work_item == "241029"
        assert str(error) == "Test error"

    def test_defaults(self):
        error = ProcessingError("Something broke")

        assert error.category == ErrorCategory.UNKNOWN
        assert error.severity == ErrorSeverity.MEDIUM
        assert error.user_message == "Something broke"
        assert error.context.component == "unknown"
        assert error.work_item is None

    @pytest.mark.parametrize("error_cls, category", [
        (InvalidFormatError, ErrorCategory.INVALID_FORMAT),
        (MissingCredentialError, ErrorCategory.CONFIGURATION),
        (UnsupportedProviderError, ErrorCategory.CONFIGURATION),
        (TranscriptionFailedError, ErrorCategory.TRANSCRIPTION),
        (NotesGenerationFailedError, ErrorCategory.NOTES_GENERATION),
        (ProviderAPIError, ErrorCategory.NETWORK),
        (ArtifactExistsError, ErrorCategory.FILE_SYSTEM),
    ])
    def test_error_kinds(self, error_cls, category):
        error = error_cls("failure")

        assert isinstance(error, ProcessingError)
        assert error.category == category

    def test_run_level_errors_are_high_severity(self):
        assert MissingCredentialError("x").severity == ErrorSeverity.HIGH
        assert UnsupportedProviderError("x").severity == ErrorSeverity.HIGH

    def test_provider_api_error_status(self):
        error = ProviderAPIError("failed", status_code=503)

        assert error.status_code == 503


class TestErrorRecoveryManager:
    """Test ErrorRecoveryManager functionality."""

    @pytest.fixture
    def recovery_manager(self):
        return ErrorRecoveryManager()

    @pytest.fixture
    def context(self):
        return ErrorContext(
            timestamp=datetime.now(),
            component="artifact_pipeline",
            operation="transcribe",
            work_item="standup"
        )

    def test_handle_generic_exception(self, recovery_manager, context):
        exception = ValueError("Test value error")

        processing_error = recovery_manager.handle_error(exception, context)

        assert isinstance(processing_error, ProcessingError)
        assert processing_error.message == "Test value error"
        assert processing_error.original_exception is exception
        assert processing_error.work_item == "standup"
        assert processing_error.technical_details == "ValueError: Test value error"

    def test_handle_processing_error_keeps_identity(self, recovery_manager, context):
        original_error = TranscriptionFailedError("no text")

        result = recovery_manager.handle_error(original_error, context)

        assert result is original_error
        assert result.context is context

    def test_existing_context_gets_work_item(self, recovery_manager, context):
        inner = ErrorContext(timestamp=datetime.now(), component="file_manager", operation="write")
        error = ArtifactExistsError("exists", context=inner)

        result = recovery_manager.handle_error(error, context)

        assert result.context.component == "file_manager"
        assert result.work_item == "standup"

    def test_categorize_file_errors(self, recovery_manager):
        processing_error = recovery_manager.handle_error(FileNotFoundError("tmp/x.ogg"))

        assert processing_error.category == ErrorCategory.FILE_SYSTEM

    def test_categorize_network_errors(self, recovery_manager):
        processing_error = recovery_manager.handle_error(Exception("Connection refused"))

        assert processing_error.category == ErrorCategory.NETWORK
        assert "Network connection failed" in processing_error.user_message

    def test_categorize_transcription_errors(self, recovery_manager):
        processing_error = recovery_manager.handle_error(RuntimeError("transcription backend crashed"))

        assert processing_error.category == ErrorCategory.TRANSCRIPTION

    def test_categorize_unknown(self, recovery_manager):
        processing_error = recovery_manager.handle_error(KeyError("x"))

        assert processing_error.category == ErrorCategory.UNKNOWN
        assert processing_error.user_message.startswith("An error occurred")


class TestHandleProcessingError:

    def test_builds_context(self):
        error = handle_processing_error(
            RuntimeError("boom"), "artifact_pipeline", "generate_notes", work_item="241029"
        )

        assert error.context.component == "artifact_pipeline"
        assert error.context.operation == "generate_notes"
        assert error.work_item == "241029"

    def test_handled_errors_are_not_retained(self):
        """Handling an error keeps no reference to it once the caller drops it."""
        error = TranscriptionFailedError("no text")
        ref = weakref.ref(error)

        handle_processing_error(error, "artifact_pipeline", "transcribe", work_item="a")
        del error
        gc.collect()

        assert ref() is None

    def test_logs_only_at_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="meeting_batch_notes.error_handling")

        handle_processing_error(MissingCredentialError("no key"), "main", "create_transcriber")
        handle_processing_error(TranscriptionFailedError("no text"), "artifact_pipeline", "transcribe")

        records = [r for r in caplog.records if r.name == "meeting_batch_notes.error_handling"]
        assert records
        assert all(r.levelno == logging.DEBUG for r in records)
