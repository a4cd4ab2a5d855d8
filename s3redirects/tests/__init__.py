"""s3redirects test suite."""
