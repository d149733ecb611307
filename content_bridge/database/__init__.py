"""SQL persistence for the content store."""
