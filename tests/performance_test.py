import requests
import time
import statistics
from pathlib import Path
from datetime import datetime

# Configuration
API_URL = "http://localhost:8080/v1/findings/classify"
MAX_RETRIES = 5
ITERATIONS = 5

CONFIG = """
lava: v1.0.0
report:
  severity: medium
  exclusions:
    - target: target-0.example.com
    - resource: CVE-2023-0007
    - fingerprint: fp-3
targets:
  - identifier: example.com
"""

SEVERITIES = ["critical", "high", "medium", "low", "info"]

# Batch sizes to test (findings per request -> description)
BATCHES = {
    10: "Small scan",
    1000: "Medium scan",
    10000: "Large scan",
}

def wait_for_service():
    print("Waiting for service to be ready...")
    for i in range(MAX_RETRIES):
        try:
            r = requests.get("http://localhost:8080/healthz")
            if r.status_code == 200:
                print("Service is ready.")
                return True
        except requests.ConnectionError:
            pass
        time.sleep(2)
    print("Service failed to start.")
    return False

def make_findings(count):
    return [
        {
            "target": f"target-{i % 20}.example.com",
            "resource": f"CVE-2023-{i % 50:04d}",
            "fingerprint": f"fp-{i % 7}",
            "severity": SEVERITIES[i % len(SEVERITIES)],
        }
        for i in range(count)
    ]

def run_classification(findings):
    payload = {"config": CONFIG, "findings": findings}
    start_time = time.time()
    try:
        response = requests.post(API_URL, json=payload, headers={"Content-Type": "application/json"})
        response.raise_for_status()
        duration = time.time() - start_time
        return duration, response.json()
    except Exception as e:
        print(f"Error classifying {len(findings)} findings: {e}")
        return None, None

def main():
    if not wait_for_service():
        return

    print(f"{'Findings':<10} | {'Batch':<15} | {'Avg (s)':<10} | {'Min (s)':<10} | {'Max (s)':<10} | {'Reportable':<10}")
    print("-" * 80)

    report_lines = []
    report_lines.append("# Performance Test Report")
    report_lines.append(f"**Date:** {datetime.now().isoformat()}")
    report_lines.append(f"**Iterations:** {ITERATIONS}")
    report_lines.append("")
    report_lines.append("## Detailed Metrics")
    report_lines.append("| Findings | Batch | Avg Duration (s) | Min (s) | Max (s) | Reportable | Suppressed |")
    report_lines.append("|---|---|---|---|---|---|---|")

    for count, description in BATCHES.items():
        findings = make_findings(count)
        durations = []
        reportable = suppressed = 0

        for i in range(ITERATIONS):
            duration, data = run_classification(findings)
            if duration:
                durations.append(duration)
                if data:
                    reportable = len(data.get("findings", []))
                    suppressed = data.get("summary", {}).get("suppressed", 0)
            time.sleep(0.5)

        if durations:
            avg_time = statistics.mean(durations)
            min_time = min(durations)
            max_time = max(durations)

            print(f"{count:<10} | {description:<15} | {avg_time:<10.4f} | {min_time:<10.4f} | {max_time:<10.4f} | {reportable:<10}")
            report_lines.append(f"| {count} | {description} | {avg_time:.4f} | {min_time:.4f} | {max_time:.4f} | {reportable} | {suppressed} |")
        else:
            print(f"{count:<10} | {description:<15} | FAILED")
            report_lines.append(f"| {count} | {description} | FAILED | - | - | - | - |")

    # Save Report
    report_path = Path("performance_report.md")
    report_path.write_text("\n".join(report_lines))
    print(f"\nReport saved to {report_path.absolute()}")

if __name__ == "__main__":
    main()
