"""Command handlers for the flakenotes CLI."""
