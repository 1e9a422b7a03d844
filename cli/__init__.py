"""Command-line interface for static-export."""
