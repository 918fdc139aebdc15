"""Administrative backend for the citizen-service portal."""
