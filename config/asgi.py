"""
ASGI config for the UserTasks project.

Serves traditional ASGI servers (Uvicorn, Daphne) and AWS Lambda through
Mangum.
"""
import os

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

from django.core.asgi import get_asgi_application

# Initialize Django at import time so a Lambda container pays the cost once.
application = get_asgi_application()


def get_lambda_handler():
    """
    Returns a Mangum-wrapped handler for AWS Lambda.

    Mangum ships in the optional ``lambda`` extra, so it is imported lazily.
    """
    try:
        from mangum import Mangum
    except ImportError as exc:
        raise ImportError(
            "Mangum is required for Lambda deployment. "
            "Install with: pip install 'usertasks[lambda]'"
        ) from exc
    return Mangum(application, lifespan="off")


_lambda_handler = None


def lambda_handler(event, context):
    """AWS Lambda entry point for HTTP requests."""
    global _lambda_handler
    if _lambda_handler is None:
        _lambda_handler = get_lambda_handler()
    return _lambda_handler(event, context)
