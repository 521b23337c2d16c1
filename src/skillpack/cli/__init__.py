"""Command-line interface for Skillpack."""
