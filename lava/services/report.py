import logging
import sys
from pathlib import Path
from typing import IO, Optional, Union

from lava.api.models import Report
from lava.core.types import OutputFormat
from lava.services.configuration import ReportConfig

logger = logging.getLogger(__name__)

class ReportWriter:
    """Renders a Report in the configured format.

    The report goes to ``output_file`` when the configuration sets one and
    to standard output otherwise. With ``base_dir`` set, ``output_file`` is
    resolved against it and must stay inside it.
    """

    def __init__(
        self,
        report_config: ReportConfig,
        base_dir: Optional[Union[str, Path]] = None,
        stdout: Optional[IO[str]] = None
    ):
        self.report_config = report_config
        self.base_dir = Path(base_dir) if base_dir is not None else None
        self.stdout = stdout if stdout is not None else sys.stdout

    def render(self, report: Report) -> str:
        if self.report_config.format == OutputFormat.JSON:
            return report.model_dump_json(indent=2)
        raise ValueError(f"Unsupported output format: {self.report_config.format}")

    def output_path(self) -> Optional[Path]:
        output_file = self.report_config.output_file
        if not output_file:
            return None
        if self.base_dir is None:
            return Path(output_file)

        root = self.base_dir.resolve()
        out_path = (root / output_file).resolve()
        try:
            out_path.relative_to(root)
        except ValueError:
            raise ValueError(f"Report output file is not within {root}: {output_file}")
        return out_path

    def write(self, report: Report) -> Optional[Path]:
        """Writes the report and returns the file it went to, or None for
        standard output."""
        out_path = self.output_path()
        content = self.render(report)

        if out_path is None:
            self.stdout.write(content + "\n")
            return None

        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(content + "\n", encoding="utf-8")
        logger.info(f"Report written to {out_path}")
        return out_path
