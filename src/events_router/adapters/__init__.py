"""Reference collaborator implementations."""
