import os
import stat
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

from ace7crypt.data.crypto import AssetCrypto, CryptoError, StagedFile, TransformDirection
from ace7crypt.utils.assets import AssetPair, AssetPairProcessor, Outcome
from ace7crypt.utils.exceptions import FileError, MissingCompanionError, PairInconsistentError

PLAIN_ASSET = b"\xc1\x83\x2a\x9e\x07\x00\x00\x00"
PLAIN_DATA = b"\x10\x20\x30\x40"

class AssetTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.tmpdir = TemporaryDirectory()
        self.tmp_path = Path(self.tmpdir.name)
        self.primary = self.tmp_path / "foo.uasset"
        self.companion = self.tmp_path / "foo.uexp"
        self.primary.write_bytes(PLAIN_ASSET)
        self.companion.write_bytes(PLAIN_DATA)
        self.pair = AssetPair.from_primary(str(self.primary))
        self.processor = AssetPairProcessor()

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def leftover_temps(self) -> list[str]:
        return [p.name for p in self.tmp_path.rglob("*.tmp")]

class AssetPairTests(unittest.TestCase):
    def test_from_primary(self) -> None:
        pair = AssetPair.from_primary(os.path.join("content", "plwp_6aam_a0.uasset"))
        self.assertEqual(pair.companion_path, os.path.join("content", "plwp_6aam_a0.uexp"))
        self.assertEqual(pair.base_name, "plwp_6aam_a0")

    def test_umap_primary(self) -> None:
        pair = AssetPair.from_primary("level.umap")
        self.assertEqual(pair.companion_path, "level.uexp")
        self.assertEqual(pair.base_name, "level")

    def test_explicit_base_name_kept(self) -> None:
        pair = AssetPair("out/new.uasset", "out/new.uexp", "old")
        self.assertEqual(pair.base_name, "old")

    def test_immutable(self) -> None:
        pair = AssetPair.from_primary("foo.uasset")
        with self.assertRaises(AttributeError):
            pair.base_name = "bar"

class SignatureTests(AssetTestCase):
    async def test_plain_file(self) -> None:
        self.assertFalse(await AssetCrypto.is_encrypted(str(self.primary)))

    async def test_encrypted_file(self) -> None:
        self.primary.write_bytes(b"ACE7" + PLAIN_ASSET)
        self.assertTrue(await AssetCrypto.is_encrypted(str(self.primary)))

    async def test_short_files_are_plain(self) -> None:
        for data in (b"", b"A", b"ACE"):
            with self.subTest(data=data):
                self.primary.write_bytes(data)
                self.assertFalse(await AssetCrypto.is_encrypted(str(self.primary)))
                self.assertEqual(await AssetCrypto.get_file_signature(str(self.primary)), data)

class StagedFileTests(AssetTestCase):
    async def test_commit_without_stage(self) -> None:
        staged = StagedFile(str(self.primary))
        with self.assertRaises(FileError) as ctx:
            await staged.commit()
        self.assertEqual(ctx.exception.path, str(self.primary))
        self.assertEqual(self.primary.read_bytes(), PLAIN_ASSET)

    async def test_stage_then_commit(self) -> None:
        staged = StagedFile(str(self.primary))
        await staged.stage(b"new")
        self.assertEqual(self.primary.read_bytes(), PLAIN_ASSET)
        await staged.commit()
        self.assertEqual(self.primary.read_bytes(), b"new")
        self.assertEqual(self.leftover_temps(), [])

class ProcessorTests(AssetTestCase):
    async def test_encrypt_then_decrypt_restores_pair(self) -> None:
        outcome = await self.processor.process(self.pair, TransformDirection.ENCRYPT)
        self.assertIs(outcome, Outcome.PROCESSED)
        self.assertNotEqual(self.primary.read_bytes(), PLAIN_ASSET)
        self.assertNotEqual(self.companion.read_bytes(), PLAIN_DATA)
        self.assertEqual(self.primary.read_bytes()[:4], b"ACE7")
        self.assertTrue(await AssetCrypto.is_encrypted(str(self.primary)))

        outcome = await self.processor.process(self.pair, TransformDirection.DECRYPT)
        self.assertIs(outcome, Outcome.PROCESSED)
        self.assertEqual(self.primary.read_bytes(), PLAIN_ASSET)
        self.assertEqual(self.companion.read_bytes(), PLAIN_DATA)
        self.assertEqual(self.leftover_temps(), [])

    async def test_encrypting_encrypted_pair_is_skipped(self) -> None:
        await self.processor.process(self.pair, TransformDirection.ENCRYPT)
        primary, companion = self.primary.read_bytes(), self.companion.read_bytes()

        outcome = await self.processor.process(self.pair, TransformDirection.ENCRYPT)
        self.assertIs(outcome, Outcome.SKIPPED)
        self.assertEqual(self.primary.read_bytes(), primary)
        self.assertEqual(self.companion.read_bytes(), companion)

    async def test_decrypting_plain_pair_is_skipped(self) -> None:
        outcome = await self.processor.process(self.pair, TransformDirection.DECRYPT)
        self.assertIs(outcome, Outcome.SKIPPED)
        self.assertEqual(self.primary.read_bytes(), PLAIN_ASSET)
        self.assertEqual(self.companion.read_bytes(), PLAIN_DATA)

    async def test_skip_does_not_need_companion(self) -> None:
        await self.processor.process(self.pair, TransformDirection.ENCRYPT)
        primary = self.primary.read_bytes()
        self.companion.unlink()

        outcome = await self.processor.process(self.pair, TransformDirection.ENCRYPT)
        self.assertIs(outcome, Outcome.SKIPPED)
        self.assertEqual(self.primary.read_bytes(), primary)

    @unittest.skipUnless(os.name == "posix", "permission bits are POSIX only")
    async def test_in_place_write_keeps_permissions(self) -> None:
        self.primary.chmod(0o640)
        self.companion.chmod(0o604)

        await self.processor.process(self.pair, TransformDirection.ENCRYPT)
        self.assertEqual(stat.S_IMODE(self.primary.stat().st_mode), 0o640)
        self.assertEqual(stat.S_IMODE(self.companion.stat().st_mode), 0o604)

    async def test_check_disabled_encrypts_twice(self) -> None:
        await self.processor.process(self.pair, TransformDirection.ENCRYPT)
        outcome = await self.processor.process(self.pair, TransformDirection.ENCRYPT, allow_unexpected_state=True)
        self.assertIs(outcome, Outcome.PROCESSED)
        self.assertEqual(len(self.primary.read_bytes()), len(PLAIN_ASSET) + 8)

        for _ in range(2):
            await self.processor.process(self.pair, TransformDirection.DECRYPT, allow_unexpected_state=True)
        self.assertEqual(self.primary.read_bytes(), PLAIN_ASSET)
        self.assertEqual(self.companion.read_bytes(), PLAIN_DATA)

    async def test_check_disabled_decrypt_of_plain_fails_without_writing(self) -> None:
        with self.assertRaises(CryptoError):
            await self.processor.process(self.pair, TransformDirection.DECRYPT, allow_unexpected_state=True)
        self.assertEqual(self.primary.read_bytes(), PLAIN_ASSET)
        self.assertEqual(self.companion.read_bytes(), PLAIN_DATA)

    async def test_missing_companion_leaves_primary_untouched(self) -> None:
        self.companion.unlink()
        with self.assertRaises(MissingCompanionError) as ctx:
            await self.processor.process(self.pair, TransformDirection.ENCRYPT)
        self.assertEqual(ctx.exception.path, str(self.companion))
        self.assertEqual(self.primary.read_bytes(), PLAIN_ASSET)
        self.assertEqual(self.leftover_temps(), [])

    async def test_missing_companion_is_a_file_error(self) -> None:
        self.companion.unlink()
        with self.assertRaises(FileError):
            await self.processor.process(self.pair, TransformDirection.ENCRYPT, allow_unexpected_state=True)

    async def test_separate_destination_leaves_originals(self) -> None:
        out_dir = self.tmp_path / "out" / "nested"
        destination = AssetPair(str(out_dir / "foo.uasset"), str(out_dir / "foo.uexp"), self.pair.base_name)

        outcome = await self.processor.process(self.pair, TransformDirection.ENCRYPT, destination=destination)
        self.assertIs(outcome, Outcome.PROCESSED)
        self.assertEqual(self.primary.read_bytes(), PLAIN_ASSET)
        self.assertEqual(self.companion.read_bytes(), PLAIN_DATA)
        self.assertTrue((out_dir / "foo.uasset").read_bytes().startswith(b"ACE7"))

        back = AssetPair(str(self.tmp_path / "back.uasset"), str(self.tmp_path / "back.uexp"), self.pair.base_name)
        await self.processor.process(destination, TransformDirection.DECRYPT, destination=back)
        self.assertEqual(Path(back.primary_path).read_bytes(), PLAIN_ASSET)
        self.assertEqual(Path(back.companion_path).read_bytes(), PLAIN_DATA)

    async def test_failed_stage_leaves_destination_untouched(self) -> None:
        real_stage = StagedFile.stage

        async def failing_stage(staged_file: StagedFile, data: bytes) -> None:
            await real_stage(staged_file, data)
            if staged_file.filepath.endswith(".uexp"):
                raise OSError("disk full")

        with patch.object(StagedFile, "stage", failing_stage):
            with self.assertRaises(FileError) as ctx:
                await self.processor.process(self.pair, TransformDirection.ENCRYPT)

        self.assertEqual(ctx.exception.path, str(self.companion))
        self.assertEqual(self.primary.read_bytes(), PLAIN_ASSET)
        self.assertEqual(self.companion.read_bytes(), PLAIN_DATA)
        self.assertEqual(self.leftover_temps(), [])

    async def test_failed_companion_replace_is_reported(self) -> None:
        real_commit = StagedFile.commit

        async def failing_commit(staged_file: StagedFile) -> None:
            if staged_file.filepath.endswith(".uexp"):
                raise OSError("device removed")
            await real_commit(staged_file)

        with patch.object(StagedFile, "commit", failing_commit):
            with self.assertRaises(PairInconsistentError) as ctx:
                await self.processor.process(self.pair, TransformDirection.ENCRYPT)

        self.assertEqual(ctx.exception.primary_path, str(self.primary))
        self.assertEqual(ctx.exception.companion_path, str(self.companion))
        self.assertTrue(self.primary.read_bytes().startswith(b"ACE7"))
        self.assertEqual(self.companion.read_bytes(), PLAIN_DATA)
        self.assertEqual(self.leftover_temps(), [])

if __name__ == "__main__":
    unittest.main()
