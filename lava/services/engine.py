import asyncio
from typing import Iterable, Optional

from lava.api.models import (
    Classification, Finding, FindingStatus, Report, ReportSummary
)
from lava.core.types import Severity
from lava.services.configuration import Configuration
from lava.services.exclusions import find_exclusion
from lava.services.hasher import calculate_fingerprint
from lava.services.runner import CheckRunner


def is_reportable(severity: Severity, minimum: Severity = Severity.HIGH) -> bool:
    """Reports whether a finding of the given severity clears the minimum."""
    return severity >= minimum


class FindingEngine:
    def _with_fingerprint(self, finding: Finding, config: Configuration) -> Finding:
        """
        Fills in the fingerprint of a finding that names its checktype but
        carries no fingerprint, using the asset type and options of the
        matching configuration target.
        """
        if finding.fingerprint or not finding.checktype:
            return finding

        target = next((t for t in config.targets if t.identifier == finding.target), None)
        fingerprint = calculate_fingerprint(
            finding.checktype,
            finding.target,
            target.asset_type if target is not None else None,
            target.options if target is not None else None
        )
        return finding.model_copy(update={"fingerprint": fingerprint})

    def classify(self, finding: Finding, config: Configuration) -> Classification:
        """
        Runs a finding through the severity filter and then the exclusion
        list. Findings below the configured severity are not matched against
        exclusions. A suppressed finding carries the first matching rule.
        """
        report = config.report
        finding = self._with_fingerprint(finding, config)

        if not is_reportable(finding.severity, report.severity):
            return Classification(
                finding=finding,
                status=FindingStatus.BELOW_THRESHOLD,
                reportable=False,
                suppressed=False
            )

        exclusion = find_exclusion(
            report.exclusions, finding.target, finding.resource, finding.fingerprint
        )
        if exclusion is not None:
            return Classification(
                finding=finding,
                status=FindingStatus.SUPPRESSED,
                reportable=False,
                suppressed=True,
                exclusion=exclusion
            )

        return Classification(
            finding=finding,
            status=FindingStatus.REPORTABLE,
            reportable=True,
            suppressed=False
        )

    def _summarize(self, classifications: Iterable[Classification]) -> ReportSummary:
        summary = ReportSummary()
        highest: Optional[Severity] = None

        for c in classifications:
            if c.status == FindingStatus.REPORTABLE:
                name = c.finding.severity.name
                setattr(summary.reportable, name, getattr(summary.reportable, name) + 1)
                if highest is None or c.finding.severity > highest:
                    highest = c.finding.severity
            elif c.status == FindingStatus.SUPPRESSED:
                summary.suppressed += 1
            else:
                summary.below_threshold += 1

        if highest is not None:
            summary.highest_severity = str(highest)
        return summary

    def process_findings(self, config: Configuration, findings: Iterable[Finding]) -> Report:
        """
        Classifies every finding against the configuration.
        Findings keep the order in which they were received.
        """
        classifications = [self.classify(f, config) for f in findings]
        return Report(
            summary=self._summarize(classifications),
            findings=[c for c in classifications if c.status == FindingStatus.REPORTABLE],
            excluded=[c for c in classifications if c.status == FindingStatus.SUPPRESSED]
        )

    async def run_scan(self, config: Configuration, runner: CheckRunner) -> Report:
        # The runner is blocking, keep it off the event loop.
        findings = await asyncio.to_thread(lambda: list(runner.run(config)))
        return self.process_findings(config, findings)

finding_engine = FindingEngine()
