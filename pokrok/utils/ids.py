"""Document ID helpers."""
from bson import ObjectId
from bson.errors import InvalidId


def to_object_id(value: str, entity: str) -> ObjectId:
    """
    Parse a string ID into an ObjectId.

    Args:
        value: ID as received from the client
        entity: Entity name used in the error message (e.g. "step")

    Raises:
        ValueError: If the value is not a valid ObjectId
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValueError(f"Invalid {entity} ID format")
