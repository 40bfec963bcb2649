import uuid


def new_id() -> str:
    """Generate a random 128-bit identifier in canonical UUID text form"""
    return str(uuid.uuid4())
