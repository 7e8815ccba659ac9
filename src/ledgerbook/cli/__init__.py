"""CLI package for ledgerbook."""
