import os
import shutil
import hashlib
import hmac
import aiofiles
import aiofiles.os

from Crypto.Cipher import AES

from ace7crypt.data.crypto.exceptions import CryptoError
from ace7crypt.utils.constants import CHUNKSIZE, SIGNATURE_SIZE
from ace7crypt.utils.exceptions import FileError
from ace7crypt.utils.extras import temp_path_for
from ace7crypt.utils.type_helpers import uint32

class StagedFile:
    """
    Write that lands in a sibling temp file first and only replaces the destination on `commit`.
    Staging never touches the destination, so a failed stage can be discarded without side effects.
    """
    def __init__(self, filepath: str) -> None:
        self.filepath = filepath
        self.temp_filepath: str | None = None

    async def stage(self, data: bytes | bytearray) -> None:
        dirname = os.path.dirname(self.filepath)
        if dirname:
            await aiofiles.os.makedirs(dirname, exist_ok=True)

        self.temp_filepath = temp_path_for(self.filepath)
        async with aiofiles.open(self.temp_filepath, "wb") as w_stream:
            await w_stream.write(data)
            await w_stream.flush()
        if await aiofiles.os.path.exists(self.filepath):
            shutil.copymode(self.filepath, self.temp_filepath)

    async def commit(self) -> None:
        if self.temp_filepath is None:
            raise FileError(f"Nothing staged for {self.filepath}!", self.filepath)
        await aiofiles.os.replace(self.temp_filepath, self.filepath)
        self.temp_filepath = None

    async def discard(self) -> None:
        if self.temp_filepath is None:
            return
        if await aiofiles.os.path.exists(self.temp_filepath):
            await aiofiles.os.remove(self.temp_filepath)
        self.temp_filepath = None

class AssetCrypto:
    CHUNKSIZE = CHUNKSIZE
    AES = AES
    hashlib = hashlib
    hmac = hmac

    # header tag of an encrypted asset, reads "ACE7"
    MAGIC = uint32(0x37454341, "little", const=True)
    # regular unreal package tag
    PACKAGE_TAG = uint32(0x9E2A83C1, "little", const=True)

    @staticmethod
    async def get_file_signature(filepath: str) -> bytes:
        """Header bytes at offset 0, shorter than 4 bytes when the file is."""
        async with aiofiles.open(filepath, "rb") as r_stream:
            return await r_stream.read(SIGNATURE_SIZE)

    @staticmethod
    async def is_encrypted(filepath: str) -> bool:
        signature = await AssetCrypto.get_file_signature(filepath)
        return AssetCrypto.has_magic(signature)

    @staticmethod
    def has_magic(data: bytes | bytearray) -> bool:
        return data[:SIGNATURE_SIZE] == AssetCrypto.MAGIC.as_bytes

    @staticmethod
    async def read_file(filepath: str) -> bytes:
        async with aiofiles.open(filepath, "rb") as r_stream:
            return await r_stream.read()

    @staticmethod
    async def copy_file(src: str, dst: str) -> None:
        shutil.copyfile(src, dst)

    @staticmethod
    async def files_equal(filepath1: str, filepath2: str) -> bool:
        if os.path.abspath(filepath1) == os.path.abspath(filepath2):
            return True
        if await aiofiles.os.path.getsize(filepath1) != await aiofiles.os.path.getsize(filepath2):
            return False

        async with aiofiles.open(filepath1, "rb") as f1, aiofiles.open(filepath2, "rb") as f2:
            while True:
                chunk1 = await f1.read(AssetCrypto.CHUNKSIZE)
                chunk2 = await f2.read(AssetCrypto.CHUNKSIZE)
                if chunk1 != chunk2:
                    return False
                if not chunk1:
                    return True

    @staticmethod
    def strip_magic(data: bytes | bytearray) -> bytes:
        if not AssetCrypto.has_magic(data):
            raise CryptoError("Missing encrypted asset header!")
        return bytes(data[SIGNATURE_SIZE:])
