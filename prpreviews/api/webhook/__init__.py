"""GitHub webhook endpoint for pull request comment commands."""
