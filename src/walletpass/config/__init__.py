"""walletpass configuration."""

from .config import SigningConfig

__all__ = ["SigningConfig"]
