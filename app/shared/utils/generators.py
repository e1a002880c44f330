"""ID and value generators (e.g. CUID)."""

from cuid2 import cuid_wrapper

# Record ids are 15 characters, the length the record store assigns.
RECORD_ID_LENGTH = 15

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_record_id() -> str:
    """Generate an id for an in-memory store record (CUID2 cut to record length)."""
    return generate_cuid()[:RECORD_ID_LENGTH]
