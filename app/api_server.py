from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from app.core.container import Container
from common.errors import classify_exception
from observability import build_log_context, log_event, render_prometheus

API_CTX = build_log_context(tool="api_server")

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"


def create_app(container: Container) -> FastAPI:
    settings = container.settings
    app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/metrics")
    def metrics():
        log_event("request_received", ctx=API_CTX, data={"path": "/metrics"})
        try:
            snapshot = container.scrape()
        except Exception as e:
            ae = classify_exception(e)
            log_event("handler_error", ctx=API_CTX, data={"error": ae.message, "code": ae.code}, level="error")
            return JSONResponse(status_code=500, content={"error": ae.message})
        return PlainTextResponse(render_prometheus(snapshot), media_type=CONTENT_TYPE_LATEST)

    @app.get("/health")
    def health():
        log_event("request_received", ctx=API_CTX, data={"path": "/health"}, level="debug")
        return {"msg": "healthy"}

    @app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"])
    def unknown_path(request: Request):
        # Unknown paths answer 200 unless strict_paths is set.
        path = request.url.path
        status = 404 if settings.strict_paths else 200
        return JSONResponse(status_code=status, content={"msg": f"{path} is not a known path"})

    return app
