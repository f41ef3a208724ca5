from typing import Iterable, Optional

from lava.services.configuration import Exclusion


def matches(exclusion: Exclusion, target: str, resource: str, fingerprint: str) -> bool:
    """Reports whether a single exclusion rule applies to a finding.

    Every non-empty field of the rule must be exactly equal to the
    corresponding field of the finding. Empty fields match anything, so a
    rule with no target, resource or fingerprint matches every finding.
    """
    if exclusion.target and exclusion.target != target:
        return False
    if exclusion.resource and exclusion.resource != resource:
        return False
    if exclusion.fingerprint and exclusion.fingerprint != fingerprint:
        return False
    return True


def find_exclusion(
    exclusions: Iterable[Exclusion],
    target: str,
    resource: str,
    fingerprint: str
) -> Optional[Exclusion]:
    """Returns the first exclusion, in document order, that matches the
    finding, or None if the finding must not be suppressed."""
    for exclusion in exclusions:
        if matches(exclusion, target, resource, fingerprint):
            return exclusion
    return None


def is_excluded(exclusions: Iterable[Exclusion], target: str, resource: str, fingerprint: str) -> bool:
    return find_exclusion(exclusions, target, resource, fingerprint) is not None
