"""walletpass command line interface."""
