"""User-facing interfaces for scopekit."""
