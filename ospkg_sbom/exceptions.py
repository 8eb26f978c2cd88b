"""Custom exceptions for ospkg-sbom."""


class OspkgSbomError(Exception):
    """Base exception for all ospkg-sbom operations."""


class ConfigurationError(OspkgSbomError):
    """Raised when configuration validation fails."""


class ScannerError(OspkgSbomError):
    """Raised when the external package scanner cannot be run or fails."""


class FileProcessingError(OspkgSbomError):
    """Raised when file operations fail."""
