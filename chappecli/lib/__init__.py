"""Context resolution and task orchestration for the chappe CLI."""
