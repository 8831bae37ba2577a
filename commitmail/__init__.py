"""GitHub push and commit-comment notifications as threaded HTML mail."""
