import uuid


def new_post_id() -> str:
    """Return a new random UUID4 string for a post."""
    return str(uuid.uuid4())
