from ace7crypt.utils.assets import AssetPair, AssetPairProcessor, Outcome, PairResult
from ace7crypt.utils.verify import RoundTripVerifier, VerificationOutcome
from ace7crypt.utils.batch import collect_pairs, parse_direction, resolve_destination, run_batch
from ace7crypt.utils.settings import RunConfig
