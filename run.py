import os

import uvicorn

from framerr.core.logging import LOGGING_CONFIG

DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# NOTE: keep WORKERS at 1. The SSE hub and the scheduler live in-process, so
# a second worker would neither see the first one's SSE clients nor skip its
# prune job.

if __name__ == "__main__":
    uvicorn.run(
        "framerr:create_app",
        factory=True,
        host="0.0.0.0",
        port=3001,
        reload=DEBUG,
        workers=1,
        timeout_keep_alive=120,
        access_log=True,
        log_config=LOGGING_CONFIG,
    )
