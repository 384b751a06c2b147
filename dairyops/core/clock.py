from datetime import datetime


def now() -> datetime:
    """Current local wall-clock time, naive like every stored timestamp."""
    return datetime.now()


def get_clock():
    """FastAPI dependency returning the time source used for window math."""
    return now
