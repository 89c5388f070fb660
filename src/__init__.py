"""Crypto portfolio synchronization and valuation package."""
