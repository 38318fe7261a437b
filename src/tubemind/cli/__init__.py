"""Command-line interface for tubemind."""
