"""
Signature engine: manifest digests and the detached PKCS#7 signature.
"""
import hashlib
from dataclasses import dataclass
from typing import Union

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.serialization import pkcs7

from walletpass.core import messages
from walletpass.core.errors import CertificatesError
from walletpass.schemas import Certificates
from walletpass.utils.logging import get_logger

logger = get_logger(__name__)

SignerKey = Union[rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey]


@dataclass(frozen=True)
class SigningMaterial:
    """Parsed certificates, ready to sign a manifest."""

    wwdr: x509.Certificate
    signer_cert: x509.Certificate
    signer_key: SignerKey


def create_hash(data: bytes) -> str:
    """SHA-1 hex digest of a file, as listed in manifest.json."""
    return hashlib.sha1(data).hexdigest()


def _as_bytes(value: Union[bytes, str]) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


def load_signing_material(certificates: Certificates) -> SigningMaterial:
    """
    Parse PEM certificates and decrypt the signer key.

    Raises:
        CertificatesError: On invalid PEM data or a wrong/missing passphrase
    """
    passphrase = certificates.signer_key_passphrase
    password = passphrase.encode("utf-8") if passphrase else None

    try:
        wwdr = x509.load_pem_x509_certificate(_as_bytes(certificates.wwdr))
        signer_cert = x509.load_pem_x509_certificate(_as_bytes(certificates.signer_cert))
        signer_key = serialization.load_pem_private_key(
            _as_bytes(certificates.signer_key),
            password=password,
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        logger.error("signing_material_invalid", error=str(exc))
        raise CertificatesError(messages.format(messages.CERTIFICATES_INVALID, exc)) from exc

    if not isinstance(signer_key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
        raise CertificatesError(
            messages.format(
                messages.CERTIFICATES_INVALID,
                f"unsupported signer key type {type(signer_key).__name__}",
            )
        )

    return SigningMaterial(wwdr=wwdr, signer_cert=signer_cert, signer_key=signer_key)


def create_signature(manifest: bytes, certificates: Union[Certificates, SigningMaterial]) -> bytes:
    """
    Sign the manifest bytes.

    Produces a DER encoded, detached PKCS#7 SignedData structure that
    embeds the signer and WWDR certificates and carries the content-type,
    message-digest and signing-time authenticated attributes.

    Raises:
        CertificatesError: If the certificates cannot be used
    """
    material = (
        certificates
        if isinstance(certificates, SigningMaterial)
        else load_signing_material(certificates)
    )

    try:
        signature = (
            pkcs7.PKCS7SignatureBuilder()
            .set_data(manifest)
            .add_signer(material.signer_cert, material.signer_key, hashes.SHA256())
            .add_certificate(material.wwdr)
            .sign(
                serialization.Encoding.DER,
                [
                    pkcs7.PKCS7Options.DetachedSignature,
                    pkcs7.PKCS7Options.Binary,
                    pkcs7.PKCS7Options.NoCapabilities,
                ],
            )
        )
    except (ValueError, TypeError) as exc:
        raise CertificatesError(messages.format(messages.CERTIFICATES_INVALID, exc)) from exc

    logger.debug("manifest_signed", manifest_bytes=len(manifest), signature_bytes=len(signature))
    return signature
