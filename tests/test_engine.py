import asyncio
import pytest
from lava.api.models import Finding, FindingStatus
from lava.core.types import AssetType, Severity
from lava.services import configuration
from lava.services.engine import FindingEngine, is_reportable
from lava.services.hasher import calculate_fingerprint
from lava.services.runner import StaticRunner

CONFIG = """
lava: v1.0.0
report:
  severity: medium
  exclusions:
    - target: example.com
      resource: CVE-2023-0001
      summary: Accepted risk
    - fingerprint: ffff
      summary: False positive
targets:
  - identifier: example.com
  - identifier: other.com
"""

@pytest.fixture
def config():
    return configuration.parse(CONFIG)

@pytest.mark.parametrize("severity, minimum, expected", [
    (Severity.CRITICAL, Severity.HIGH, True),
    (Severity.HIGH, Severity.HIGH, True),
    (Severity.MEDIUM, Severity.HIGH, False),
    (Severity.INFO, Severity.INFO, True),
    (Severity.INFO, Severity.LOW, False),
    (Severity.LOW, Severity.CRITICAL, False),
])
def test_is_reportable(severity, minimum, expected):
    assert is_reportable(severity, minimum) is expected

def test_is_reportable_defaults_to_high():
    assert is_reportable(Severity.HIGH)
    assert not is_reportable(Severity.MEDIUM)

def test_classify_reportable(config):
    engine = FindingEngine()
    finding = Finding(target="other.com", resource="CVE-2023-0001", severity="high")

    c = engine.classify(finding, config)
    assert c.status == FindingStatus.REPORTABLE
    assert c.reportable is True
    assert c.suppressed is False
    assert c.exclusion is None

def test_classify_suppressed(config):
    engine = FindingEngine()
    finding = Finding(target="example.com", resource="CVE-2023-0001", severity="critical")

    c = engine.classify(finding, config)
    assert c.status == FindingStatus.SUPPRESSED
    assert c.reportable is False
    assert c.suppressed is True
    assert c.exclusion.summary == "Accepted risk"

def test_classify_suppressed_by_fingerprint(config):
    engine = FindingEngine()
    finding = Finding(target="other.com", resource="x", fingerprint="ffff", severity="medium")

    c = engine.classify(finding, config)
    assert c.status == FindingStatus.SUPPRESSED
    assert c.exclusion.summary == "False positive"

def test_classify_below_threshold(config):
    engine = FindingEngine()
    finding = Finding(target="example.com", resource="CVE-2023-0001", severity="low")

    c = engine.classify(finding, config)
    assert c.status == FindingStatus.BELOW_THRESHOLD
    assert c.reportable is False
    assert c.suppressed is False
    assert c.exclusion is None

def test_process_findings_summary(config):
    engine = FindingEngine()
    findings = [
        Finding(target="other.com", resource="a", severity="critical"),
        Finding(target="other.com", resource="b", severity="medium"),
        Finding(target="other.com", resource="c", severity="medium"),
        Finding(target="example.com", resource="CVE-2023-0001", severity="high"),
        Finding(target="example.com", resource="d", severity="info"),
    ]

    report = engine.process_findings(config, findings)

    assert [c.finding.resource for c in report.findings] == ["a", "b", "c"]
    assert [c.finding.resource for c in report.excluded] == ["CVE-2023-0001"]
    assert report.summary.reportable.CRITICAL == 1
    assert report.summary.reportable.MEDIUM == 2
    assert report.summary.reportable.HIGH == 0
    assert report.summary.suppressed == 1
    assert report.summary.below_threshold == 1
    assert report.summary.highest_severity == "critical"

def test_process_no_findings(config):
    report = FindingEngine().process_findings(config, [])
    assert report.findings == []
    assert report.summary.highest_severity is None

def test_run_scan_uses_runner(config):
    engine = FindingEngine()
    runner = StaticRunner([Finding(target="other.com", severity="high")])

    report = asyncio.run(engine.run_scan(config, runner))
    assert len(report.findings) == 1
    assert report.summary.highest_severity == "high"

def test_finding_severity_from_score():
    finding = Finding(target="example.com", score=9.1)
    assert finding.severity == Severity.CRITICAL

def test_finding_invalid_severity():
    with pytest.raises(ValueError, match="invalid severity"):
        Finding(target="example.com", severity="Critical")

def test_classify_computes_fingerprint_from_checktype():
    image = "vulcansec/vulcan-nessus:1"
    fingerprint = calculate_fingerprint(image, "example.com", AssetType.DOMAIN_NAME, {"depth": 2})
    config = configuration.parse(f"""
lava: v1.0.0
report:
  exclusions:
    - fingerprint: {fingerprint}
targets:
  - identifier: example.com
    assetType: DomainName
    options:
      depth: 2
""")
    engine = FindingEngine()

    c = engine.classify(Finding(target="example.com", checktype=image, severity="high"), config)
    assert c.finding.fingerprint == fingerprint
    assert c.status == FindingStatus.SUPPRESSED

    other = engine.classify(Finding(target="example.com", checktype="vulcansec/vulcan-zap:1", severity="high"), config)
    assert other.status == FindingStatus.REPORTABLE

def test_classify_keeps_existing_fingerprint(config):
    finding = Finding(target="other.com", checktype="vulcansec/vulcan-nessus:1", fingerprint="ffff", severity="high")

    c = FindingEngine().classify(finding, config)
    assert c.finding.fingerprint == "ffff"
    assert c.status == FindingStatus.SUPPRESSED
