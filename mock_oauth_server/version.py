"""
Version information (GET /version). Commit and build date are injected by the build via env.
"""
import os
import platform

from fastapi import APIRouter

__version__ = "0.4.0"

router = APIRouter()


def get_version() -> dict:
    return {
        "version": __version__,
        "commit": os.environ.get("MOCK_OAUTH_COMMIT", "none"),
        "build_date": os.environ.get("MOCK_OAUTH_BUILD_DATE", ""),
        "python_version": platform.python_version(),
    }


@router.get("/version")
def version():
    return get_version()
