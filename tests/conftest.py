import os

# Keep test runs quiet and free of log files
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("FETCH_RETRY_BACKOFF", "0")
