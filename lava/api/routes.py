import asyncio
from fastapi import APIRouter, HTTPException
from lava.api.models import ClassifyRequest, ConfigRequest, ConfigResponse, ErrorDetail, Report
from lava.core.config import settings
from lava.core.errors import ConfigError, InvalidVersion
from lava.services import configuration
from lava.services.engine import finding_engine
from lava.services.report import ReportWriter
from lava.services.runner import StaticRunner
import logging

router = APIRouter()
logger = logging.getLogger(__name__)

def _config_error(e: ConfigError) -> HTTPException:
    detail = ErrorDetail(kind=e.kind, message=str(e), value=e.value)
    return HTTPException(status_code=400, detail=detail.model_dump())

@router.get("/healthz", summary="Health Check", description="Returns 200 OK if service is running.")
async def healthz():
    return {"status": "ok"}

@router.get("/readyz", summary="Readiness Check", description="Checks that the configuration at `LAVA_CONFIG_PATH`, if any, is valid.")
async def readyz():
    if settings.LAVA_CONFIG_PATH:
        try:
            configuration.parse_file(settings.LAVA_CONFIG_PATH)
        except (ConfigError, OSError) as e:
            logger.warning(f"Configuration {settings.LAVA_CONFIG_PATH} is not usable: {e}")
            raise HTTPException(status_code=503, detail="Lava configuration is missing or invalid")
    return {"status": "ready", "lava_version": settings.LAVA_VERSION}

@router.post(
    "/v1/config/validate",
    response_model=ConfigResponse,
    summary="Validate Configuration",
    description="""
Decodes and validates a Lava configuration.

### Request Body
- **content** (str): The YAML document.

### Errors
A 400 response carries the error **kind** (e.g. `NoTargets`, `InvalidSeverity`),
a **message** and, for unrecognized values, the offending **value**.
"""
)
async def validate_config(request: ConfigRequest):
    try:
        cfg = configuration.parse(request.content)
    except ConfigError as e:
        logger.info(f"Rejected configuration: {e}")
        raise _config_error(e)
    try:
        compatible = cfg.is_compatible(settings.LAVA_VERSION)
    except InvalidVersion:
        logger.exception(f"Invalid LAVA_VERSION setting: {settings.LAVA_VERSION!r}")
        raise HTTPException(status_code=500, detail="Server Lava version is not a valid semantic version")
    return ConfigResponse(config=cfg, compatible=compatible)

@router.post(
    "/v1/findings/classify",
    response_model=Report,
    summary="Classify Findings",
    description="""
Filters the findings of a scan using the report settings of a configuration.

### Request Body
- **config** (str): The YAML configuration.
- **findings** (list): Findings returned by the check runner.
  - target, resource, fingerprint: used for exclusion matching
  - severity: critical, high, medium, low or info (or a **score**)

Findings below `report.severity` are dropped; findings matching an
exclusion are returned under `excluded` with the matching rule.
Findings with a **checktype** and no fingerprint get one computed from the
checktype image, the target, its asset type and its options.

When `report.outputFile` is set the report is also written there, relative
to `REPORT_OUTPUT_DIR`.
"""
)
async def classify_findings(request: ClassifyRequest):
    try:
        cfg = configuration.parse(request.config)
    except ConfigError as e:
        logger.info(f"Rejected configuration: {e}")
        raise _config_error(e)

    try:
        report = await finding_engine.run_scan(cfg, StaticRunner(request.findings))
        if cfg.report.output_file:
            writer = ReportWriter(cfg.report, base_dir=settings.REPORT_OUTPUT_DIR)
            await asyncio.to_thread(writer.write, report)
        return report
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Finding classification failed")
        raise HTTPException(status_code=500, detail="Internal server error during classification")
