from __future__ import annotations

from dataclasses import dataclass

from ace7crypt.utils.constants import env_flag

@dataclass(frozen=True)
class RunConfig:
    """Behaviour flags for one run. Passed down explicitly, never stored globally."""
    skip_signature_check: bool = False
    recursive: bool = False
    test_mode: bool = False
    quiet: bool = False

    @classmethod
    def from_env(cls) -> RunConfig:
        return cls(
            skip_signature_check=env_flag("ACE7_SKIP_SIGNATURE_CHECK"),
            recursive=env_flag("ACE7_RECURSIVE"),
            test_mode=env_flag("ACE7_TEST_MODE"),
            quiet=env_flag("ACE7_QUIET")
        )
