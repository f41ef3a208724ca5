from typing import Iterable, Protocol

from lava.api.models import Finding
from lava.services.configuration import Configuration


class CheckRunner(Protocol):
    """Executes the checks of a validated configuration.

    Implementations pull checktype images, run them against every target
    and yield the findings they report. Scheduling, timeouts and retries
    are up to the implementation.
    """

    def run(self, config: Configuration) -> Iterable[Finding]:
        ...


class StaticRunner:
    """A CheckRunner that replays a fixed list of findings.

    Useful to classify findings produced by a previous run.
    """

    def __init__(self, findings: Iterable[Finding]):
        self.findings = list(findings)

    def run(self, config: Configuration) -> Iterable[Finding]:
        return list(self.findings)
