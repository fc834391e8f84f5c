from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from walletpass.schemas import Certificates


class SigningConfig(BaseModel):
    """Where the signing material and templates live."""

    model_config = ConfigDict(protected_namespaces=())

    wwdr_path: Path = Field(..., description="Apple WWDR certificate (PEM)")
    signer_cert_path: Path = Field(..., description="Pass Type ID certificate (PEM)")
    signer_key_path: Path = Field(..., description="Pass Type ID private key (PEM)")
    signer_key_passphrase: Optional[str] = Field(
        None,
        description="Passphrase of the signer key, if encrypted",
    )
    model_dir: Optional[Path] = Field(
        None,
        description="Directory that relative template names are resolved against",
    )

    @classmethod
    def from_env(cls) -> "SigningConfig":
        required = {
            "wwdr_path": "WALLETPASS_WWDR_PATH",
            "signer_cert_path": "WALLETPASS_SIGNER_CERT_PATH",
            "signer_key_path": "WALLETPASS_SIGNER_KEY_PATH",
        }
        values = {}
        for field, env_name in required.items():
            value = os.getenv(env_name)
            if not value:
                raise RuntimeError(f"{env_name} must be set")
            values[field] = value

        passphrase = os.getenv("WALLETPASS_SIGNER_KEY_PASSPHRASE")
        model_dir = os.getenv("WALLETPASS_MODEL_DIR")

        return cls(
            **values,
            signer_key_passphrase=passphrase if passphrase else None,
            model_dir=model_dir if model_dir else None,
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "SigningConfig":
        """Load configuration from YAML file."""
        import yaml

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def resolve_model(self, model: str | Path) -> Path:
        """Resolve a template name against model_dir (absolute paths are kept)."""
        model_path = Path(model)
        if self.model_dir is None or model_path.is_absolute():
            return model_path
        return self.model_dir / model_path

    def to_certificates(self) -> Certificates:
        """Read the configured PEM files."""
        return Certificates.from_files(
            wwdr=self.wwdr_path,
            signer_cert=self.signer_cert_path,
            signer_key=self.signer_key_path,
            signer_key_passphrase=self.signer_key_passphrase,
        )


__all__ = ["SigningConfig"]
