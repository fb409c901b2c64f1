"""Command line interface for iamx."""
