from __future__ import annotations

from ace7crypt.data.crypto.common import AssetCrypto as AC
from ace7crypt.data.crypto.exceptions import CryptoError
from ace7crypt.utils.constants import logger
from ace7crypt.utils.conversions import kb_to_bytes
from ace7crypt.utils.type_helpers import uint8, uint32

class Keystream:
    """
    Name-keyed XOR stream. XOR is its own inverse, so `xor` serves both directions.
    Subclasses only decide where the key bytes come from.
    """
    @staticmethod
    def name_bytes(base_name: str) -> bytes:
        # undecodable file names come back from listdir as surrogate escapes
        return base_name.encode("utf-8", "surrogateescape")

    def xor(self, data: bytes | bytearray, base_name: str) -> bytes:
        raise NotImplementedError

class AESKeystream(Keystream):
    # secret mixed into every per-name key
    FORMAT_SECRET = b"ACE7-asset-keystream/v1"

    def __init__(self, secret: bytes = FORMAT_SECRET) -> None:
        self.secret = secret

    def derive_key(self, base_name: str) -> bytes:
        return AC.hmac.new(self.secret, self.name_bytes(base_name), AC.hashlib.sha256).digest()

    def xor(self, data: bytes | bytearray, base_name: str) -> bytes:
        aes = AC.AES.new(self.derive_key(base_name), AC.AES.MODE_CTR, nonce=b"", initial_value=0)
        return aes.encrypt(bytes(data))

class KeyTableKeystream(Keystream):
    ROW_SIZE = kb_to_bytes(1)
    BYTE_XOR = uint8(0x77, const=True)

    def __init__(self, table: bytes) -> None:
        if not table or len(table) % self.ROW_SIZE != 0:
            raise CryptoError(f"Key table size must be a non-zero multiple of {self.ROW_SIZE}!")
        self.table = table
        self.rows = len(table) // self.ROW_SIZE

    @classmethod
    async def from_file(cls, filepath: str) -> KeyTableKeystream:
        try:
            table = await AC.read_file(filepath)
        except OSError as e:
            raise CryptoError(f"Failed to read key table {filepath}!") from e
        logger.info(f"Loaded key table {filepath} ({len(table)} bytes).")
        return cls(table)

    def start_position(self, base_name: str) -> tuple[int, int]:
        digest = AC.hashlib.sha1(self.name_bytes(base_name)).digest()
        name_key = uint32(digest[:4], "little")
        row = name_key.value % self.rows
        col = (name_key.value >> 16) % self.ROW_SIZE
        return row, col

    def xor(self, data: bytes | bytearray, base_name: str) -> bytes:
        row, col = self.start_position(base_name)
        out = bytearray(data)
        for i in range(len(out)):
            out[i] ^= self.table[row * self.ROW_SIZE + col] ^ self.BYTE_XOR.value
            row += 1
            col += 1
            if row >= self.rows:
                row = 0
            if col >= self.ROW_SIZE:
                col = 0
        return bytes(out)
