"""Google OAuth2 authorization-code flow (consent redirect, code exchange, userinfo)."""
from urllib.parse import urlencode

import requests

from hiredready.config import GOOGLE_CALLBACK_URL, GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET

AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPE = "openid profile email"
REQUEST_TIMEOUT = 10


class OAuthError(Exception):
    pass


def authorization_url() -> str:
    params = {
        "client_id": GOOGLE_CLIENT_ID,
        "redirect_uri": GOOGLE_CALLBACK_URL,
        "response_type": "code",
        "scope": SCOPE,
    }
    return f"{AUTH_URL}?{urlencode(params)}"


def fetch_profile(code: str) -> dict:
    """Exchange an authorization code for the user's profile claims."""
    try:
        token_resp = requests.post(TOKEN_URL, data={
            "code": code,
            "client_id": GOOGLE_CLIENT_ID,
            "client_secret": GOOGLE_CLIENT_SECRET,
            "redirect_uri": GOOGLE_CALLBACK_URL,
            "grant_type": "authorization_code",
        }, timeout=REQUEST_TIMEOUT)
        token_resp.raise_for_status()
        access_token = token_resp.json().get("access_token")
        if not access_token:
            raise OAuthError("No access token in provider response")

        info_resp = requests.get(
            USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=REQUEST_TIMEOUT,
        )
        info_resp.raise_for_status()
        profile = info_resp.json()
    except (requests.RequestException, ValueError) as exc:
        raise OAuthError(str(exc)) from exc

    if not profile.get("email") or not profile.get("sub"):
        raise OAuthError("Provider profile is missing email or subject")
    return profile
