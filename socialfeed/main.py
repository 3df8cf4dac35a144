"""FastAPI ASGI application entrypoint."""

import uvicorn

from .core.app_factory import create_application
from .core.config import Settings

settings = Settings()
app = create_application(settings)

__all__ = ("app",)


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port)
