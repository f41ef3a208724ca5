from typing import Optional


class ConfigError(Exception):
    """Base class for every error raised while loading a Lava configuration.

    Not a ValueError: pydantic validators must let these propagate unchanged
    instead of wrapping them in a ValidationError.
    """

    kind = "ConfigError"
    message = "invalid configuration"

    def __init__(self, value: Optional[str] = None, message: Optional[str] = None):
        self.value = value
        if message is not None:
            self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.value is None:
            return self.message
        return f"{self.message}: {self.value}"


class DecodeError(ConfigError):
    kind = "DecodeError"
    message = "decode config"


class InvalidVersion(ConfigError):
    kind = "InvalidVersion"
    message = "invalid Lava version"


class NoTargets(ConfigError):
    kind = "NoTargets"
    message = "no targets"


class NoTargetIdentifier(ConfigError):
    kind = "NoTargetIdentifier"
    message = "no target identifier"

    def __init__(self, index: int):
        # value is the position of the target in the list.
        self.index = index
        super().__init__(value=str(index))


class InvalidSeverity(ConfigError):
    kind = "InvalidSeverity"
    message = "invalid severity"


class InvalidOutputFormat(ConfigError):
    kind = "InvalidOutputFormat"
    message = "invalid output format"


class InvalidAssetType(ConfigError):
    kind = "InvalidAssetType"
    message = "invalid asset type"


class InvalidPullPolicy(ConfigError):
    kind = "InvalidPullPolicy"

    def __str__(self) -> str:
        return f"value {self.value!r} is not a valid PullPolicy value"


class InvalidLogLevel(ConfigError):
    kind = "InvalidLogLevel"

    def __str__(self) -> str:
        return f"level string {self.value!r}: unknown name"
