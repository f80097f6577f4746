"""Parse, extract and validate pipeline."""
