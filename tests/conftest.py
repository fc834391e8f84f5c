import datetime
import json
import sys
from pathlib import Path
from typing import Dict

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from walletpass.schemas import Certificates  # noqa: E402

SIGNER_KEY_PASSPHRASE = "p477w0rb"

# Smallest valid PNG (1x1, transparent)
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c63000100000500010d0a2db40000000049454e44ae426082"
)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast unit tests")
    config.addinivalue_line(
        "markers",
        "integration: tests that touch the filesystem or run the CLI",
    )


def _name(common_name: str) -> x509.Name:
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])


def _certificate(subject: str, issuer: str, public_key, signing_key, is_ca: bool) -> x509.Certificate:
    now = datetime.datetime.now(datetime.timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(_name(subject))
        .issuer_name(_name(issuer))
        .public_key(public_key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=is_ca, path_length=None), critical=True)
        .sign(signing_key, hashes.SHA256())
    )


@pytest.fixture(scope="session")
def pem_material() -> Dict[str, bytes]:
    """Self-signed WWDR-like root plus a signer certificate with an encrypted key."""
    root_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    root_cert = _certificate("Test WWDR", "Test WWDR", root_key.public_key(), root_key, True)

    signer_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    signer_cert = _certificate(
        "Pass Type ID: pass.com.example.test",
        "Test WWDR",
        signer_key.public_key(),
        root_key,
        False,
    )

    return {
        "wwdr": root_cert.public_bytes(serialization.Encoding.PEM),
        "signer_cert": signer_cert.public_bytes(serialization.Encoding.PEM),
        "signer_key": signer_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.BestAvailableEncryption(SIGNER_KEY_PASSPHRASE.encode()),
        ),
    }


@pytest.fixture
def certificates(pem_material) -> Certificates:
    return Certificates(
        wwdr=pem_material["wwdr"],
        signer_cert=pem_material["signer_cert"],
        signer_key=pem_material["signer_key"],
        signer_key_passphrase=SIGNER_KEY_PASSPHRASE,
    )


@pytest.fixture
def pem_files(tmp_path, pem_material) -> Dict[str, Path]:
    """PEM material written to disk."""
    cert_dir = tmp_path / "certs"
    cert_dir.mkdir()
    paths = {}
    for name, data in pem_material.items():
        path = cert_dir / f"{name}.pem"
        path.write_bytes(data)
        paths[name] = path
    return paths


@pytest.fixture
def pass_json() -> Dict:
    return {
        "formatVersion": 1,
        "passTypeIdentifier": "pass.com.example.test",
        "teamIdentifier": "ABCDE12345",
        "organizationName": "Example Inc.",
        "description": "Example store card",
        "serialNumber": "0001",
        "backgroundColor": "rgb(20, 40, 60)",
        "storeCard": {
            "primaryFields": [{"key": "balance", "label": "BALANCE", "value": "21.00"}],
            "backFields": [{"key": "terms", "label": "TERMS", "value": "None"}],
        },
    }


@pytest.fixture
def model_dir(tmp_path, pass_json) -> Path:
    """Template folder ``storeCard.pass`` with assets, translations and leftovers."""
    model = tmp_path / "storeCard.pass"
    model.mkdir()
    (model / "pass.json").write_text(json.dumps(pass_json), encoding="utf-8")
    (model / "icon.png").write_bytes(PNG_BYTES)
    (model / "icon@2x.png").write_bytes(PNG_BYTES)
    (model / "logo.png").write_bytes(PNG_BYTES)
    (model / ".DS_Store").write_bytes(b"hidden")
    (model / "manifest.json").write_bytes(b"{}")
    (model / "signature").write_bytes(b"old")
    (model / "README").write_bytes(b"no extension")

    italian = model / "it.lproj"
    italian.mkdir()
    (italian / "pass.strings").write_text(
        '/* Balance label */\n"BALANCE" = "SALDO";\n"TERMS" = "TERMINI";\n',
        encoding="utf-8",
    )
    (italian / "logo.png").write_bytes(PNG_BYTES)
    (italian / ".hidden").write_bytes(b"hidden")
    return model
