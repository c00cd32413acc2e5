"""GitHub App webhook bridge that dispatches AI pull request reviews."""
