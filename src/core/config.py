"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Tuple


@dataclass(frozen=True)
class Policy:
    """Content policy for the watched channel.

    Extensions are compared by exact equality, domain names by substring
    search against the whole URL token.
    """

    valid_file_extensions: FrozenSet[str]
    valid_domain_names: Tuple[str, ...]
