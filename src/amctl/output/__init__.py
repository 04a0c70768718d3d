"""Output layer — renders responses and the verb table for the CLI."""
