"""Pass bundle core functionality."""

from .bundle import Bundle
from .errors import BundleClosedError, CertificatesError, ModelNotFoundError
from .fields_array import FieldsArray
from .pkpass import PKPass

__all__ = [
    "Bundle",
    "FieldsArray",
    "PKPass",
    "BundleClosedError",
    "CertificatesError",
    "ModelNotFoundError",
]
