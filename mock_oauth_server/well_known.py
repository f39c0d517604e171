"""
Well-known endpoints: JWKS and OpenID Connect discovery.
"""
from fastapi import APIRouter, Depends

from mock_oauth_server.deps import get_issuer_url, get_signer
from mock_oauth_server.keys import KeySigner

router = APIRouter()


@router.get("/jwks")
@router.get("/.well-known/jwks.json")
def jwks(signer: KeySigner = Depends(get_signer)):
    """JSON Web Key Set for token signature verification."""
    return signer.get_jwks()


def discovery_document(base_url: str) -> dict:
    base_url = base_url.rstrip("/")
    return {
        "issuer": base_url,
        "authorization_endpoint": f"{base_url}/authorize",
        "token_endpoint": f"{base_url}/token",
        "userinfo_endpoint": f"{base_url}/userinfo",
        "jwks_uri": f"{base_url}/jwks",
        "response_types_supported": ["code"],
        "subject_types_supported": ["public"],
        "id_token_signing_alg_values_supported": ["RS256"],
        "scopes_supported": ["openid", "email", "profile"],
        "token_endpoint_auth_methods_supported": ["client_secret_post", "client_secret_basic"],
        "claims_supported": [
            "sub",
            "iss",
            "name",
            "given_name",
            "family_name",
            "email",
            "email_verified",
            "picture",
        ],
    }


@router.get("/.well-known/openid-configuration")
def openid_configuration(issuer_url: str = Depends(get_issuer_url)):
    """OpenID Connect discovery document."""
    return discovery_document(issuer_url)
