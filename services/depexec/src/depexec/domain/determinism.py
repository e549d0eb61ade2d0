import os

EPOCH_TIMESTAMP = "1970-01-01T00:00:00+00:00"


def is_deterministic() -> bool:
    return os.getenv("DEPEXEC_DETERMINISTIC") == "1"
