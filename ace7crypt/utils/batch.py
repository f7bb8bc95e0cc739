import os
import time
import aiofiles.os

from ace7crypt.data.crypto import CryptoError, TransformDirection
from ace7crypt.utils.assets import AssetPair, AssetPairProcessor, Outcome, PairResult
from ace7crypt.utils.constants import PRIMARY_EXT, logger
from ace7crypt.utils.conversions import ns_to_ms
from ace7crypt.utils.exceptions import FileError, ModeError, PairInconsistentError
from ace7crypt.utils.settings import RunConfig
from ace7crypt.utils.verify import RoundTripVerifier

def parse_direction(mode: str) -> TransformDirection:
    try:
        return TransformDirection(mode.strip().lower())
    except ValueError:
        raise ModeError(f"Invalid mode \"{mode}\" specified. Must be \"encrypt\" or \"decrypt\"")

async def collect_pairs(path: str, primary_ext: str = PRIMARY_EXT, recursive: bool = False, pairs: list[AssetPair] | None = None) -> list[AssetPair]:
    if pairs is None:
        # first run so check if a file is given
        if await aiofiles.os.path.isfile(path):
            return [AssetPair.from_primary(path)]
        pairs = []

    for entry in sorted(await aiofiles.os.listdir(path)):
        entry_path = os.path.join(path, entry)

        if await aiofiles.os.path.isfile(entry_path):
            if os.path.splitext(entry)[1].lower() == primary_ext.lower():
                pairs.append(AssetPair.from_primary(entry_path))
        elif recursive and await aiofiles.os.path.isdir(entry_path):
            await collect_pairs(entry_path, primary_ext, recursive, pairs)

    return pairs

def resolve_destination(pair: AssetPair, output: str | None) -> AssetPair:
    """
    `None` means in place. An existing directory receives the pair under the same names.
    Anything else is taken as the new primary path, with the companion next to it.
    """
    if output is None:
        return pair
    if os.path.isdir(output):
        return AssetPair(
            os.path.join(output, os.path.basename(pair.primary_path)),
            os.path.join(output, os.path.basename(pair.companion_path)),
            pair.base_name
        )
    companion_ext = os.path.splitext(pair.companion_path)[1]
    return AssetPair(output, os.path.splitext(output)[0] + companion_ext, pair.base_name)

async def run_pair(
    pair: AssetPair,
    direction: TransformDirection,
    config: RunConfig,
    processor: AssetPairProcessor,
    output: str | None = None
) -> PairResult:
    try:
        if config.test_mode:
            verification = await RoundTripVerifier(processor).verify(pair, direction)
            outcome = Outcome.VERIFICATION_PASSED if verification.matched else Outcome.VERIFICATION_FAILED
            reason = ", ".join(verification.mismatched_paths)
            return PairResult(pair, outcome, reason)

        destination = resolve_destination(pair, output)
        outcome = await processor.process(pair, direction, config.skip_signature_check, destination)
        return PairResult(pair, outcome)

    except FileError as e:
        logger.error(f"{pair}: {e.message}")
        return PairResult(pair, Outcome.FATAL_ERROR, e.message)
    except PairInconsistentError as e:
        logger.exception(f"{pair}: {e.message}")
        return PairResult(pair, Outcome.FATAL_ERROR, e.message)
    except CryptoError as e:
        logger.error(f"{pair}: {e.message}")
        return PairResult(pair, Outcome.FATAL_ERROR, f"{pair.primary_path}: {e.message}")
    except OSError as e:
        logger.exception(f"{pair}: unexpected I/O error")
        return PairResult(pair, Outcome.FATAL_ERROR, f"{pair.primary_path}: {e}")

async def run_batch(
    pairs: list[AssetPair],
    direction: TransformDirection,
    config: RunConfig,
    processor: AssetPairProcessor | None = None,
    output: str | None = None
) -> list[PairResult]:
    if processor is None:
        processor = AssetPairProcessor()

    start = time.perf_counter_ns()
    results = []
    for pair in pairs:
        results.append(await run_pair(pair, direction, config, processor, output))

    done = sum(1 for r in results if r.outcome is not Outcome.SKIPPED and r.outcome is not Outcome.FATAL_ERROR)
    elapsed = ns_to_ms(time.perf_counter_ns() - start)
    logger.info(f"Done! Parsed {done} of {len(pairs)} pairs in {elapsed} ms.")
    return results
