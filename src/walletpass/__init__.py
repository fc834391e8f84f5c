"""walletpass - signed wallet pass (.pkpass) builder."""

__version__ = "0.3.0"

from .core import (  # noqa: E402
    Bundle,
    BundleClosedError,
    CertificatesError,
    FieldsArray,
    ModelNotFoundError,
    PKPass,
)
from .schemas import Certificates, Template  # noqa: E402

__all__ = [
    "PKPass",
    "Bundle",
    "FieldsArray",
    "Certificates",
    "Template",
    "BundleClosedError",
    "CertificatesError",
    "ModelNotFoundError",
]
