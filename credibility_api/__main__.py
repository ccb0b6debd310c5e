"""
Command line entry point: ``python -m credibility_api [--config FILE]``.

The config file path is exported before the app is imported so that the
cached settings and the database engine both see it.
"""

import argparse
import os


def main(argv=None):
    parser = argparse.ArgumentParser(description="Credibility API Service")
    parser.add_argument(
        "--config",
        default=None,
        help="JSON configuration file (overrides CRED_* environment variables)"
    )
    parser.add_argument("--host", default=None, help="Bind address (default from settings)")
    parser.add_argument("--port", type=int, default=None, help="Port (default from settings)")
    args = parser.parse_args(argv)

    if args.config:
        os.environ["CRED_CONFIG_FILE"] = args.config

    import uvicorn

    from credibility_api.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "credibility_api.app:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=settings.debug,
        timeout_keep_alive=settings.keep_alive_seconds,
        timeout_graceful_shutdown=settings.shutdown_timeout_seconds,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
