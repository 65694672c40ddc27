"""Command line interface for release-chain."""
