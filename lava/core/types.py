import logging
from enum import Enum, IntEnum
from typing import Any, Dict

from lava.core.errors import (
    InvalidAssetType, InvalidLogLevel, InvalidOutputFormat,
    InvalidPullPolicy, InvalidSeverity
)


class Severity(IntEnum):
    """Severity of a finding. Ordered by rank, Critical highest."""
    CRITICAL = 1
    HIGH = 0
    MEDIUM = -1
    LOW = -2
    INFO = -3

    def __str__(self) -> str:
        return _SEVERITY_LABELS[self]


class OutputFormat(str, Enum):
    JSON = "json"


class AssetType(str, Enum):
    IP = "IP"
    HOSTNAME = "Hostname"
    DOMAIN_NAME = "DomainName"
    AWS_ACCOUNT = "AWSAccount"
    IP_RANGE = "IPRange"
    DOCKER_IMAGE = "DockerImage"
    WEB_ADDRESS = "WebAddress"
    GIT_REPOSITORY = "GitRepository"
    GCP_PROJECT = "GCPProject"


class PullPolicy(str, Enum):
    ALWAYS = "always"
    IF_NOT_PRESENT = "ifnotpresent"
    NEVER = "never"


SEVERITY_NAMES: Dict[str, Severity] = {
    "critical": Severity.CRITICAL,
    "high": Severity.HIGH,
    "medium": Severity.MEDIUM,
    "low": Severity.LOW,
    "info": Severity.INFO,
}

_SEVERITY_LABELS: Dict[Severity, str] = {v: k for k, v in SEVERITY_NAMES.items()}

OUTPUT_FORMAT_NAMES: Dict[str, OutputFormat] = {f.value: f for f in OutputFormat}

ASSET_TYPE_NAMES: Dict[str, AssetType] = {t.value: t for t in AssetType}

PULL_POLICY_NAMES: Dict[str, PullPolicy] = {p.value: p for p in PullPolicy}

LOG_LEVEL_NAMES: Dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

LOG_LEVEL_LABELS: Dict[int, str] = {v: k for k, v in LOG_LEVEL_NAMES.items()}


def _token(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def parse_severity(value: Any) -> Severity:
    """Decodes a lowercase severity name. Matching is case-sensitive."""
    token = _token(value)
    try:
        return SEVERITY_NAMES[token]
    except KeyError:
        raise InvalidSeverity(token) from None


def parse_output_format(value: Any) -> OutputFormat:
    token = _token(value)
    try:
        return OUTPUT_FORMAT_NAMES[token.lower()]
    except KeyError:
        raise InvalidOutputFormat(token) from None


def parse_asset_type(value: Any) -> AssetType:
    """Decodes an asset type using its canonical spelling, e.g. "DomainName"."""
    token = _token(value)
    try:
        return ASSET_TYPE_NAMES[token]
    except KeyError:
        raise InvalidAssetType(token) from None


def parse_pull_policy(value: Any) -> PullPolicy:
    token = _token(value)
    try:
        return PULL_POLICY_NAMES[token.lower()]
    except KeyError:
        raise InvalidPullPolicy(token) from None


def parse_log_level(value: Any) -> int:
    """Returns the logging level for a name such as "debug" or "WARN"."""
    token = _token(value)
    try:
        return LOG_LEVEL_NAMES[token.lower()]
    except KeyError:
        raise InvalidLogLevel(token) from None


def severity_from_score(score: float) -> Severity:
    """Maps a CVSS-like score onto a severity."""
    if score >= 9.0:
        return Severity.CRITICAL
    if score >= 7.0:
        return Severity.HIGH
    if score >= 4.0:
        return Severity.MEDIUM
    if score >= 0.1:
        return Severity.LOW
    return Severity.INFO
