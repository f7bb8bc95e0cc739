import os
import random
import string

from ace7crypt.utils.constants import RANDOMSTRING_LENGTH

def generate_random_string(length: int) -> str:
    characters = string.ascii_letters + string.digits
    random_string = "".join(random.choice(characters) for _ in range(length))
    return random_string

def temp_path_for(path: str) -> str:
    """Sibling path used to stage a write before it replaces `path`."""
    rand_str = generate_random_string(RANDOMSTRING_LENGTH)
    return os.path.join(os.path.dirname(path), f".{os.path.basename(path)}.{rand_str}.tmp")

def base_name_of(path: str) -> str:
    return os.path.splitext(os.path.basename(path))[0]
