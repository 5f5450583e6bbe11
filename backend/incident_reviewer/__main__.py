"""Run the Incident Reviewer with uvicorn.

Usage:
    python -m incident_reviewer
"""

import uvicorn

from incident_reviewer.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "incident_reviewer.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
