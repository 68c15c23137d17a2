"""GitHub users and repositories browser: API client and view-models."""
