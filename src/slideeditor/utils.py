import math
import uuid


def new_id() -> str:
    """Return a fresh globally unique identifier."""
    return str(uuid.uuid4())

def clamp(value: float, lower: int, upper: int) -> int:
    """Clamp value into [lower, upper] and return it as an int index (NaN maps to upper)."""
    if math.isnan(value) or value > upper:
        return upper
    if value < lower:
        return lower
    return int(value)
