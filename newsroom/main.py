from __future__ import annotations

from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from newsroom.api.delivery.router import router as delivery_router
from newsroom.core.config import create_app
from newsroom.core.logging import configure_logging
from newsroom.core.settings import settings


app = create_app()
configure_logging()

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")


@app.get("/health", include_in_schema=False)
def health():
    return {"status": "ok", "env": settings.ENV}


# Delivery pública (solo lectura)
app.include_router(delivery_router)
