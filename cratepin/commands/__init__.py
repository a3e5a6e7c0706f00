"""CLI subcommands for cratepin."""
