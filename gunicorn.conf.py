"""Gunicorn configuration for the FRAM plugin server.

Run with:
    gunicorn -c gunicorn.conf.py "fram_provider.plugin_app:create_app()"

The provider holds its configured client in process memory, so the server
runs a single worker; host tools call ``/v1/configure`` once per worker.
"""
import os

bind = f"{os.environ.get('FRAM_PLUGIN_HOST', '127.0.0.1')}:{os.environ.get('FRAM_PLUGIN_PORT', '8765')}"
workers = 1
threads = int(os.environ.get("FRAM_PLUGIN_THREADS", "4"))
timeout = 60
loglevel = os.environ.get("FRAM_LOG_LEVEL", "warning").lower()


def post_fork(server, worker):
    """
    Called just after a worker has been forked.

    Reports whether provider credentials will come from /run/secrets or
    the environment; the values themselves are never logged.
    """
    from pathlib import Path
    secrets_dir = Path("/run/secrets")
    if (secrets_dir / "fram_password").is_file():
        worker.log.info("FRAM password found in /run/secrets")
    elif os.environ.get("FRAM_PASSWORD"):
        worker.log.info("FRAM password taken from environment")
    else:
        worker.log.warning("No FRAM password configured; built-in defaults will be used")
