from __future__ import annotations

import os
import aiofiles.os
from dataclasses import dataclass, field
from enum import Enum, auto

from ace7crypt.data.crypto import AssetCrypto as AC, StagedFile, Crypt_ACE7, TransformDirection
from ace7crypt.utils.constants import COMPANION_EXT, logger
from ace7crypt.utils.exceptions import FileError, MissingCompanionError, PairInconsistentError
from ace7crypt.utils.extras import base_name_of

class Outcome(Enum):
    PROCESSED = auto()
    SKIPPED = auto()
    VERIFICATION_PASSED = auto()
    VERIFICATION_FAILED = auto()
    FATAL_ERROR = auto()

@dataclass(frozen=True)
class AssetPair:
    primary_path: str
    companion_path: str
    base_name: str = field(default="")

    def __post_init__(self) -> None:
        if not self.base_name:
            object.__setattr__(self, "base_name", base_name_of(self.primary_path))

    @classmethod
    def from_primary(cls, primary_path: str, companion_ext: str = COMPANION_EXT) -> AssetPair:
        companion_path = os.path.splitext(primary_path)[0] + companion_ext
        return cls(primary_path, companion_path)

    @property
    def paths(self) -> tuple[str, str]:
        return self.primary_path, self.companion_path

    def __str__(self) -> str:
        return os.path.basename(self.primary_path)

@dataclass
class PairResult:
    pair: AssetPair
    outcome: Outcome
    reason: str = ""

class AssetPairProcessor:
    """Transforms a primary asset and its companion as one unit."""
    def __init__(self, crypt: Crypt_ACE7 | None = None) -> None:
        self.crypt = crypt if crypt is not None else Crypt_ACE7()

    @staticmethod
    async def already_done(pair: AssetPair, direction: TransformDirection) -> bool:
        encrypted = await AC.is_encrypted(pair.primary_path)
        match direction:
            case TransformDirection.ENCRYPT:
                return encrypted
            case TransformDirection.DECRYPT:
                return not encrypted

    async def process(
        self,
        pair: AssetPair,
        direction: TransformDirection,
        allow_unexpected_state: bool = False,
        destination: AssetPair | None = None
    ) -> Outcome:
        if destination is None:
            destination = pair

        try:
            if not allow_unexpected_state and await self.already_done(pair, direction):
                logger.info(f"Skipped {direction.value}ion of {pair}, already in target state.")
                return Outcome.SKIPPED
        except OSError as e:
            raise FileError(f"Failed to read {pair.primary_path}!", pair.primary_path) from e

        if not await aiofiles.os.path.isfile(pair.companion_path):
            raise MissingCompanionError(f"Companion file {pair.companion_path} is missing!", pair.companion_path)

        try:
            primary = await AC.read_file(pair.primary_path)
        except OSError as e:
            raise FileError(f"Failed to read {pair.primary_path}!", pair.primary_path) from e
        try:
            companion = await AC.read_file(pair.companion_path)
        except OSError as e:
            raise MissingCompanionError(f"Failed to read companion file {pair.companion_path}!", pair.companion_path) from e

        # both outputs are computed before anything touches the disk
        out_primary = self.crypt.apply(direction, primary, pair.base_name)
        out_companion = self.crypt.apply(direction, companion, pair.base_name, companion=True)

        if direction is TransformDirection.DECRYPT and not out_primary.startswith(AC.PACKAGE_TAG.as_bytes):
            logger.warning(f"Decrypted {pair} does not start with a package tag, was the file renamed?")

        await self._write_pair(destination, out_primary, out_companion)
        logger.info(f"{direction.value.capitalize()}ed {pair} -> {destination}.")
        return Outcome.PROCESSED

    @staticmethod
    async def _write_pair(destination: AssetPair, primary: bytes, companion: bytes) -> None:
        staged = [StagedFile(destination.primary_path), StagedFile(destination.companion_path)]
        for staged_file, data in zip(staged, (primary, companion)):
            try:
                await staged_file.stage(data)
            except OSError as e:
                for s in staged:
                    await s.discard()
                raise FileError(f"Failed to write {staged_file.filepath}!", staged_file.filepath) from e

        primary_file, companion_file = staged
        try:
            await primary_file.commit()
        except OSError as e:
            for staged_file in staged:
                await staged_file.discard()
            raise FileError(f"Failed to replace {primary_file.filepath}!", primary_file.filepath) from e
        try:
            await companion_file.commit()
        except OSError as e:
            await companion_file.discard()
            raise PairInconsistentError(
                f"Replaced {primary_file.filepath} but failed to replace {companion_file.filepath}! The pair is now inconsistent.",
                primary_file.filepath, companion_file.filepath
            ) from e
