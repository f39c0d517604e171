"""
Mock OAuth2 / OpenID Connect server for integration tests.
Authorization code flow, userinfo, discovery, JWKS, and POST /config for error injection.
"""
import argparse
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response

from mock_oauth_server import config
from mock_oauth_server.authorize import router as authorize_router
from mock_oauth_server.config_endpoint import router as config_router
from mock_oauth_server.error_scenarios import ErrorScenarioEngine
from mock_oauth_server.keys import KeySigner
from mock_oauth_server.models import new_default_user
from mock_oauth_server.provider import MockProvider
from mock_oauth_server.store import MemoryStore
from mock_oauth_server.token_endpoint import router as token_router
from mock_oauth_server.token_issuer import TokenIssuer
from mock_oauth_server.userinfo import router as userinfo_router
from mock_oauth_server.version import __version__, get_version
from mock_oauth_server.version import router as version_router
from mock_oauth_server.well_known import router as well_known_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Generate the signing key before serving so the first request does not pay for it."""
    app.state.signer.ensure_keys()
    info = get_version()
    logger.info("Mock OAuth2 server %s (commit: %s) issuer=%s", info["version"], info["commit"], app.state.issuer_url)
    yield


def create_app(
    issuer_url: str = config.ISSUER,
    signer: KeySigner | None = None,
    store: MemoryStore | None = None,
) -> FastAPI:
    """Build the app with its own store; the signer may be shared (e.g. across tests)."""
    app = FastAPI(title="Mock OAuth2 Server", version=__version__, lifespan=lifespan)
    issuer_url = issuer_url.rstrip("/")
    signer = signer or KeySigner()
    store = store or MemoryStore()

    app.state.issuer_url = issuer_url
    app.state.signer = signer
    app.state.store = store
    app.state.error_engine = ErrorScenarioEngine(store)
    app.state.issuer = TokenIssuer(signer, store, issuer_url)
    app.state.provider = MockProvider(store, app.state.issuer)
    app.state.default_user = new_default_user()

    app.include_router(authorize_router, tags=["authorize"])
    app.include_router(token_router, tags=["token"])
    app.include_router(userinfo_router, tags=["userinfo"])
    app.include_router(well_known_router, tags=["well-known"])
    app.include_router(config_router, tags=["config"])
    app.include_router(version_router, tags=["version"])

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"status": "ok", "service": "mock_oauth_server"}

    @app.get("/callback")
    def callback():
        """Default redirect target for tests that do not run their own client."""
        return Response(status_code=200)

    return app


app = create_app()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mock OAuth2 / OIDC server")
    parser.add_argument("--port", type=int, default=0, help="Port (default: MOCK_OAUTH_PORT or 8080)")
    parser.add_argument(
        "--host",
        default="",
        help="Public base URL used as issuer (default: MOCK_ISSUER_URL or http://localhost:<port>)",
    )
    parser.add_argument("--bind", default=config.BIND_HOST, help="Interface to listen on")
    return parser.parse_args(argv)


def resolve_issuer(host: str, port: int) -> str:
    """--host flag, then MOCK_ISSUER_URL, then localhost on the serving port."""
    if host:
        return host.rstrip("/")
    if config.ISSUER_URL:
        return config.ISSUER_URL
    return f"http://localhost:{port}"


def main(argv: list[str] | None = None) -> None:
    import uvicorn

    args = parse_args(argv)
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    port = args.port if args.port > 0 else config.PORT
    issuer_url = resolve_issuer(args.host, port)
    logger.info("Using issuer URL: %s", issuer_url)
    uvicorn.run(
        create_app(issuer_url=issuer_url),
        host=args.bind,
        port=port,
        timeout_keep_alive=60,
    )


if __name__ == "__main__":
    main()
