import argparse
import sys

import uvicorn

from app.api_server import create_app
from app.core.config import Settings, load_settings
from app.core.container import build_container
from common.errors import ConfigError
from observability import build_log_context, log_event

MAIN_CTX = build_log_context(tool="main")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=Settings.PROJECT_NAME,
        description="Export Kafka Connect connector and task states as Prometheus metrics.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {Settings.VERSION}")
    parser.add_argument("-u", "--uri", dest="connect_uri", help="Kafka Connect REST URI (env: CONNECT_URI)")
    parser.add_argument("-p", "--port", dest="listen_port", help="Port to listen on (env: LISTEN_PORT, default 8080)")
    parser.add_argument(
        "-t",
        "--timeout",
        dest="timeout_sec",
        help="Timeout in seconds for REST calls to the Connect cluster (env: HTTP_TIMEOUT, default 3)",
    )
    parser.add_argument("--host", dest="listen_host", help="Address to bind (env: LISTEN_HOST, default 0.0.0.0)")
    parser.add_argument(
        "--no-verify-tls",
        dest="verify_tls",
        action="store_false",
        default=None,
        help="Skip TLS certificate verification (env: CONNECT_TLS_VERIFY=false)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        settings = load_settings(vars(args))
    except ConfigError as e:
        log_event("config_error", ctx=MAIN_CTX, data={"error": e.message}, level="error")
        return 2

    app = create_app(build_container(settings))
    log_event(
        "exporter_started",
        ctx=MAIN_CTX,
        data={
            "version": settings.VERSION,
            "host": settings.listen_host,
            "port": settings.listen_port,
            "connect_uri": settings.connect_uri,
        },
    )
    uvicorn.run(app, host=settings.listen_host, port=settings.listen_port, log_level="warning")
    return 0


if __name__ == "__main__":
    sys.exit(main())
