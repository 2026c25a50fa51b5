"""Server run script."""

import uvicorn
from tornsim.api.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "tornsim.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL,
    )
