import os
import aiofiles.os
from dataclasses import dataclass, field

from ace7crypt.data.crypto import AssetCrypto as AC, TransformDirection
from ace7crypt.utils.assets import AssetPair, AssetPairProcessor
from ace7crypt.utils.constants import BACKUP_SUFFIX, logger
from ace7crypt.utils.exceptions import FileError, MissingCompanionError

@dataclass
class VerificationOutcome:
    matched: bool
    mismatched_paths: list[str] = field(default_factory=list)

class RoundTripVerifier:
    """
    Runs a pair through `direction` and back, in place, and checks the bytes came out unchanged.
    Backups are deleted only when both files match. On a mismatch the backups and the
    working files are left for manual recovery.
    """
    def __init__(self, processor: AssetPairProcessor | None = None) -> None:
        self.processor = processor if processor is not None else AssetPairProcessor()

    @staticmethod
    def backup_path(path: str) -> str:
        return path + BACKUP_SUFFIX

    async def backup(self, pair: AssetPair) -> None:
        if not await aiofiles.os.path.isfile(pair.companion_path):
            raise MissingCompanionError(f"Companion file {pair.companion_path} is missing!", pair.companion_path)

        for path in pair.paths:
            bak = self.backup_path(path)
            if await aiofiles.os.path.exists(bak):
                logger.warning(f"Overwriting stale backup {bak}.")
            try:
                await AC.copy_file(path, bak)
            except OSError as e:
                raise FileError(f"Failed to back up {path}!", path) from e
        logger.info(f"Created backup of {pair}.")

    async def verify(self, pair: AssetPair, direction: TransformDirection) -> VerificationOutcome:
        await self.backup(pair)

        await self.processor.process(pair, direction, allow_unexpected_state=True)
        await self.processor.process(pair, direction.opposite, allow_unexpected_state=True)

        mismatched = []
        for path in pair.paths:
            try:
                equal = await AC.files_equal(path, self.backup_path(path))
            except OSError as e:
                raise FileError(f"Failed to compare {path} with its backup!", path) from e
            if not equal:
                mismatched.append(path)

        if mismatched:
            names = ", ".join(os.path.basename(p) for p in mismatched)
            logger.error(f"FAILED TO VERIFY BINARY EQUALITY for {pair} ({names}), backups kept.")
            return VerificationOutcome(False, mismatched)

        for path in pair.paths:
            bak = self.backup_path(path)
            try:
                await aiofiles.os.remove(bak)
            except OSError as e:
                raise FileError(f"Verified {pair} but failed to delete backup {bak}!", bak) from e
        logger.info(f"Verified binary equality of {pair}, deleted backups.")
        return VerificationOutcome(True)
