from enum import Enum

from ace7crypt.data.crypto.common import AssetCrypto as AC
from ace7crypt.data.crypto.keystream import Keystream, AESKeystream, KeyTableKeystream
from ace7crypt.utils.constants import KEY_TABLE_PATH

class TransformDirection(Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"

    @property
    def opposite(self) -> "TransformDirection":
        if self is TransformDirection.ENCRYPT:
            return TransformDirection.DECRYPT
        return TransformDirection.ENCRYPT

class Crypt_ACE7:
    """
    Name-keyed transform for Ace Combat 7 assets.

    An encrypted primary file is the magic tag followed by the XORed plain bytes, so the
    original header survives a round trip whatever it was. Companion files carry no tag.
    Decrypting a primary without the tag raises `CryptoError`. Decrypting under a different
    base name than the one used to encrypt is not detectable and produces garbage.
    """
    def __init__(self, keystream: Keystream | None = None) -> None:
        self.keystream = keystream if keystream is not None else AESKeystream()

    @classmethod
    async def from_config(cls) -> "Crypt_ACE7":
        if KEY_TABLE_PATH:
            return cls(await KeyTableKeystream.from_file(KEY_TABLE_PATH))
        return cls()

    def encrypt(self, data: bytes | bytearray, base_name: str, companion: bool = False) -> bytes:
        body = self.keystream.xor(data, base_name)
        if companion:
            return body
        return AC.MAGIC.as_bytes + body

    def decrypt(self, data: bytes | bytearray, base_name: str, companion: bool = False) -> bytes:
        if not companion:
            data = AC.strip_magic(data)
        return self.keystream.xor(data, base_name)

    def apply(self, direction: TransformDirection, data: bytes | bytearray, base_name: str, companion: bool = False) -> bytes:
        match direction:
            case TransformDirection.ENCRYPT:
                return self.encrypt(data, base_name, companion)
            case TransformDirection.DECRYPT:
                return self.decrypt(data, base_name, companion)
        raise ValueError(f"Unknown direction: {direction}")
