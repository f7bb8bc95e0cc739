"""
Tool to encrypt or decrypt Ace Combat 7 asset pairs from the command line.
Behaviour flags are read from the environment (see `RunConfig.from_env`).
"""

import sys
import os
import asyncio
from sys import argv

from ace7crypt.data.crypto import Crypt_ACE7, CryptoError
from ace7crypt.utils.assets import AssetPairProcessor, Outcome
from ace7crypt.utils.batch import collect_pairs, parse_direction, run_batch
from ace7crypt.utils.constants import PRIMARY_EXT, VERSION
from ace7crypt.utils.exceptions import ModeError
from ace7crypt.utils.settings import RunConfig

MESSAGES = {
    Outcome.PROCESSED: "{direction}ed file: {name}",
    Outcome.SKIPPED: "Skipped file already in target state: {name}",
    Outcome.VERIFICATION_PASSED: "Verified binary equality: {name}",
    Outcome.VERIFICATION_FAILED: "FAILED TO VERIFY BINARY EQUALITY: {name} ({reason})",
    Outcome.FATAL_ERROR: "Error: {name}: {reason}"
}

async def main() -> int:
    config = RunConfig.from_env()
    try:
        direction = parse_direction(argv[1])
    except ModeError as e:
        print(f"Error: {e.message}")
        return 1

    inputpath = argv[2]
    outputpath = argv[3] if len(argv) > 3 else None

    if not os.path.exists(inputpath):
        print(f"{inputpath} does not exist.")
        return 1

    try:
        processor = AssetPairProcessor(await Crypt_ACE7.from_config())
    except CryptoError as e:
        print(f"Error: {e.message}")
        return 1

    pairs = await collect_pairs(inputpath, PRIMARY_EXT, config.recursive)
    if outputpath is not None and len(pairs) > 1 and not os.path.isdir(outputpath):
        print(f"{outputpath} must be an existing folder when more than one asset is given.")
        return 1

    results = await run_batch(pairs, direction, config, processor, outputpath)
    if not config.quiet:
        for result in results:
            msg = MESSAGES[result.outcome].format(
                direction=direction.value.capitalize(), name=result.pair, reason=result.reason
            )
            print(msg)
        print(f"\nDone! {len(results)} asset pair(s) handled.")

    failed = (Outcome.FATAL_ERROR, Outcome.VERIFICATION_FAILED)
    return 1 if any(r.outcome in failed for r in results) else 0

def print_usage() -> None:
    print(f"ace7crypt {VERSION} - Encrypts and decrypts Ace Combat 7 PC assets.")
    print(f"USAGE: {os.path.basename(argv[0])} <encrypt/decrypt> <input asset or folder> [output asset or folder]")
    print("Ensure that the matching uexp file is present in the same directory on use.")
    print("NOTE: After encrypting a file, it cannot be renamed. The name of the file is used in the decryption algorithm.")

def run() -> None:
    argc = len(argv)
    if (argc - 1) < 2:
        print_usage()
        sys.exit(1)
    sys.exit(asyncio.run(main()))

if __name__ == "__main__":
    run()
