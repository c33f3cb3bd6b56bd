import secrets
import string

ID_ALPHABET = string.ascii_letters + string.digits + "_-"


def new_clip_id(length: int = 24) -> str:
    """Random URL-safe clip id drawn from the OS CSPRNG.

    The id is the only thing standing between a clip and a reader, so it
    must come from ``secrets`` and never from ``random``.
    """
    if length < 12:
        raise ValueError(f"clip ids must be at least 12 characters, got {length}")
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))
