import logging
from fastapi import FastAPI
from lava.api.routes import router
from lava.core.config import settings
from lava.core.types import parse_log_level

# Setup logging
logging.basicConfig(
    level=parse_log_level(settings.LOG_LEVEL),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

description = """
Lava API validates Lava scan configurations and filters the findings of a scan.

## Features
* **Configuration Validation**: Decodes YAML configurations and checks version, targets and enum values.
* **Severity Filter**: Drops findings below the configured minimum severity.
* **Exclusions**: Suppresses accepted risks and false positives, reporting the rule that matched.
"""

app = FastAPI(
    title="Lava API",
    description=description,
    version=settings.LAVA_VERSION.lstrip("v"),
    docs_url="/docs",
    redoc_url="/redoc"
)

app.include_router(router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
