"""Provider abstractions."""
