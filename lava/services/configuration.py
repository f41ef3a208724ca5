import logging
from pathlib import Path
from typing import IO, Any, Dict, Optional, Tuple, Union

import semver
import yaml
from pydantic import (
    BaseModel, ConfigDict, Field, ValidationError,
    field_serializer, field_validator, model_validator
)

from lava.core.errors import DecodeError, InvalidVersion, NoTargetIdentifier, NoTargets
from lava.core.types import (
    LOG_LEVEL_LABELS, AssetType, OutputFormat, PullPolicy, Severity,
    parse_asset_type, parse_log_level, parse_output_format,
    parse_pull_policy, parse_severity
)


class _ScalarText(str):
    """Source text of a plain scalar that YAML 1.1 resolves to a number,
    a boolean or a timestamp. ``value`` holds the resolved value."""

    def __new__(cls, text: str, value: Any):
        obj = super().__new__(cls, text)
        obj.value = value
        return obj


class _TextLoader(yaml.SafeLoader):
    """A SafeLoader that keeps plain scalars as written, so "1.10", "0123"
    or "on" reach string fields unchanged."""


def _keep_text(construct):
    def constructor(loader, node):
        return _ScalarText(node.value, construct(loader, node))
    return constructor


for _tag, _construct in (
    ("tag:yaml.org,2002:bool", yaml.SafeLoader.construct_yaml_bool),
    ("tag:yaml.org,2002:int", yaml.SafeLoader.construct_yaml_int),
    ("tag:yaml.org,2002:float", yaml.SafeLoader.construct_yaml_float),
    ("tag:yaml.org,2002:timestamp", yaml.SafeLoader.construct_yaml_timestamp),
):
    _TextLoader.add_constructor(_tag, _keep_text(_construct))


def _resolved(value: Any) -> Any:
    """Replaces preserved scalar text with the value YAML resolved it to."""
    if isinstance(value, _ScalarText):
        return value.value
    if isinstance(value, dict):
        return {_resolved(k): _resolved(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolved(v) for v in value]
    return value


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # An explicit null behaves like an absent key.
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class RegistryAuth(_ConfigModel):
    server: str = ""
    username: str = ""
    password: str = Field("", repr=False, exclude=True)


class AgentConfig(_ConfigModel):
    pull_policy: PullPolicy = Field(PullPolicy.ALWAYS, alias="pullPolicy")
    # 0 means no limit.
    parallel: int = Field(0, ge=0)
    vars: Dict[str, str] = Field(default_factory=dict)
    registries_auth: Tuple[RegistryAuth, ...] = Field((), alias="registriesAuth")

    @field_validator("pull_policy", mode="before")
    @classmethod
    def _decode_pull_policy(cls, v: Any) -> PullPolicy:
        return v if isinstance(v, PullPolicy) else parse_pull_policy(v)


class Exclusion(_ConfigModel):
    """Criteria to exclude a finding, e.g. an accepted risk or a false positive.

    Empty target, resource or fingerprint act as wildcards. The fingerprint
    encodes the context where the finding was produced: checktype image,
    target, asset type and checktype options.
    """
    target: str = ""
    resource: str = ""
    fingerprint: str = ""
    summary: str = ""
    description: str = ""


class ReportConfig(_ConfigModel):
    severity: Severity = Severity.HIGH
    format: OutputFormat = OutputFormat.JSON
    output_file: Optional[str] = Field(None, alias="outputFile")
    exclusions: Tuple[Exclusion, ...] = ()

    @field_validator("severity", mode="before")
    @classmethod
    def _decode_severity(cls, v: Any) -> Severity:
        return v if isinstance(v, Severity) else parse_severity(v)

    @field_validator("format", mode="before")
    @classmethod
    def _decode_format(cls, v: Any) -> OutputFormat:
        return v if isinstance(v, OutputFormat) else parse_output_format(v)

    @field_serializer("severity")
    def _encode_severity(self, severity: Severity) -> str:
        return str(severity)


class Target(_ConfigModel):
    identifier: str = ""
    asset_type: Optional[AssetType] = Field(None, alias="assetType")
    options: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("options", mode="before")
    @classmethod
    def _resolve_options(cls, v: Any) -> Any:
        # Options are opaque and keep their YAML types.
        return _resolved(v)

    @field_validator("asset_type", mode="before")
    @classmethod
    def _decode_asset_type(cls, v: Any) -> AssetType:
        return v if isinstance(v, AssetType) else parse_asset_type(v)


class Configuration(_ConfigModel):
    """A Lava configuration.

    Built once per run by :func:`parse` and read-only afterwards.
    """
    lava_version: str = Field("", alias="lava")
    agent: AgentConfig = Field(default_factory=AgentConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    checktypes_urls: Tuple[str, ...] = Field((), alias="checktypesURLs")
    targets: Tuple[Target, ...] = ()
    log_level: int = Field(logging.INFO, alias="logLevel")

    @field_validator("log_level", mode="before")
    @classmethod
    def _decode_log_level(cls, v: Any) -> int:
        if isinstance(v, int) and not isinstance(v, bool) and v in LOG_LEVEL_LABELS:
            return v
        return parse_log_level(v)

    @field_serializer("log_level")
    def _encode_log_level(self, level: int) -> str:
        return LOG_LEVEL_LABELS[level]

    def is_compatible(self, version: str) -> bool:
        """Reports whether a Lava binary at ``version`` can run this
        configuration, that is, ``version`` is at least the required one."""
        required = parse_version(self.lava_version)
        return parse_version(version).compare(required) >= 0


def parse_version(version: str) -> semver.Version:
    """Parses a semantic version with a mandatory leading "v", e.g. "v1.2.3".

    The "vMAJOR" and "vMAJOR.MINOR" shorthands are accepted, but a
    prerelease or build suffix requires all three numbers.
    Raises InvalidVersion when the string is not a semantic version.
    """
    if not version.startswith("v"):
        raise InvalidVersion(version)
    text = version[1:]
    shorthand = "-" not in text and "+" not in text
    try:
        return semver.Version.parse(text, optional_minor_and_patch=shorthand)
    except (ValueError, TypeError):
        raise InvalidVersion(version) from None


def validate(config: Configuration) -> Configuration:
    """Checks the structural invariants of a decoded configuration.

    Checks run in a fixed order and the first failure is raised: the Lava
    version, then the presence of targets, then each target identifier.
    The configuration is returned unchanged.
    """
    parse_version(config.lava_version)

    if not config.targets:
        raise NoTargets()
    for index, target in enumerate(config.targets):
        if not target.identifier:
            raise NoTargetIdentifier(index)
    return config


def decode(document: Union[str, bytes, IO]) -> Configuration:
    """Decodes a YAML document into a Configuration without validating it."""
    try:
        data = yaml.load(document, Loader=_TextLoader)
    except yaml.YAMLError as e:
        raise DecodeError(str(e)) from e

    if data is None:
        raise DecodeError("empty document")
    if not isinstance(data, dict):
        raise DecodeError(f"expected a mapping, got {type(data).__name__}")

    try:
        return Configuration.model_validate(data)
    except ValidationError as e:
        raise DecodeError(str(e)) from e


def parse(document: Union[str, bytes, IO]) -> Configuration:
    """Returns a parsed and validated Lava configuration.

    Raises a ConfigError subclass describing the first problem found.
    """
    return validate(decode(document))


def parse_file(path: Union[str, Path]) -> Configuration:
    with open(path, "r", encoding="utf-8") as f:
        return parse(f)
