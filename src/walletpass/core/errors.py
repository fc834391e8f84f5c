"""Exceptions raised by the pass builder."""


class BundleClosedError(RuntimeError):
    """Raised when a frozen bundle (or its pass) is mutated."""


class CertificatesError(TypeError):
    """Raised when signing material is missing, incomplete or unusable."""


class ModelNotFoundError(FileNotFoundError):
    """Raised when a template folder or one of its files cannot be read."""
