import hashlib
import json
from typing import Any, Dict, Optional

from lava.core.types import AssetType

def calculate_fingerprint(
    checktype_image: str,
    target: str,
    asset_type: Optional[AssetType] = None,
    options: Optional[Dict[str, Any]] = None
) -> str:
    """
    Returns the fingerprint of a finding context: the checktype image, the
    target, its asset type and the checktype options.
    Options are serialized with sorted keys so their order does not matter.
    """
    sha256_hash = hashlib.sha256()
    for part in (
        checktype_image,
        target,
        asset_type.value if asset_type is not None else "",
        json.dumps(options or {}, sort_keys=True, separators=(",", ":"), default=str),
    ):
        sha256_hash.update(part.encode("utf-8"))
        sha256_hash.update(b"\x00")
    return sha256_hash.hexdigest()
