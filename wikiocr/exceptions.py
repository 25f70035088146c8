#!/usr/bin/env python3
"""
OCR Exceptions Module

This module defines custom exception classes for dictionary, image and OCR
errors. None of them is fatal to the application: callers translate them into
a visible status or an inline error line and carry on.
"""

from typing import Optional, List


class OCRError(Exception):
    """Base exception class for OCR-related errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DictionaryLoadError(OCRError):
    """Raised when an exclusion dictionary file cannot be read or decoded."""

    def __init__(self, file_path: Optional[str] = None, original_error: Optional[Exception] = None):
        message = "Dictionary file could not be loaded."
        if file_path:
            message += f" File: {file_path}"
        if original_error:
            message += f" Reason: {original_error}"

        details = {
            'file_path': file_path,
            'original_error': str(original_error) if original_error else None,
            'suggestion': "Choose a UTF-8 text file with one word per line."
        }
        super().__init__(message, details)


class ImageDecodeError(OCRError):
    """Raised when an image cannot be decoded or preprocessed."""

    def __init__(self, file_path: Optional[str] = None, operation: Optional[str] = None,
                 original_error: Optional[Exception] = None):
        message = "Image processing failed."
        if operation:
            message += f" Operation: {operation}"
        if file_path:
            message += f" File: {file_path}"

        details = {
            'file_path': file_path,
            'operation': operation,
            'original_error': str(original_error) if original_error else None,
            'suggestion': "Ensure image file is valid and supported format (PNG, JPG)."
        }
        super().__init__(message, details)


class OCRProcessingError(OCRError):
    """Raised when the OCR invocation for an image fails."""

    def __init__(self, file_path: Optional[str] = None, engine_name: Optional[str] = None,
                 original_error: Optional[Exception] = None, suggestion: Optional[str] = None):
        message = "OCR processing failed."
        if file_path:
            message += f" File: {file_path}"
        if engine_name:
            message += f" Engine: {engine_name}"

        details = {
            'file_path': file_path,
            'engine': engine_name,
            'original_error': str(original_error) if original_error else None
        }
        if suggestion:
            details['suggestion'] = suggestion
        super().__init__(message, details)


class OCREngineNotAvailableError(OCRError):
    """Raised when no OCR engines are available."""

    def __init__(self, engines_tried: Optional[List[str]] = None):
        message = "No OCR engines available for processing."
        details = {
            'engines_tried': engines_tried or [],
            'suggestion': "Install at least one OCR engine: pip install easyocr or pip install pytesseract"
        }
        super().__init__(message, details)


class OCREngineInitializationError(OCRError):
    """Raised when OCR engine fails to initialize."""

    def __init__(self, engine_name: str, original_error: Optional[Exception] = None):
        message = f"Failed to initialize {engine_name} OCR engine."
        details = {
            'engine': engine_name,
            'original_error': str(original_error) if original_error else None,
            'suggestion': f"Check {engine_name} installation and dependencies."
        }
        super().__init__(message, details)


class MemoryLimitExceededError(OCRError):
    """Raised when memory limits are exceeded."""

    def __init__(self, operation: str, memory_used: Optional[int] = None,
                 memory_limit: Optional[int] = None):
        message = f"Memory limit exceeded during {operation}."

        details = {
            'operation': operation,
            'memory_used': memory_used,
            'memory_limit': memory_limit,
            'suggestion': "Try processing smaller images or increase the memory limit."
        }
        super().__init__(message, details)


def describe_error(error: OCRError) -> str:
    """Render an error and its suggestion as a single user-facing string."""
    text = str(error)
    suggestion = error.details.get('suggestion') if error.details else None
    if suggestion:
        text += f"\n\nSuggestion: {suggestion}"
    return text
