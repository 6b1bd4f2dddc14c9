"""Authentication utilities for Google Photos API."""

import logging
import os
from typing import Any, cast

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from photo_mirror.models import AuthenticationError

logger = logging.getLogger(__name__)

# If modifying these scopes, delete the file token.json.
SCOPES = ['https://www.googleapis.com/auth/photoslibrary.readonly']


def _save(creds: Credentials, token_path: str) -> None:
    with open(token_path, 'w', encoding='utf-8') as token:
        token.write(creds.to_json())


def login(token_path: str, credentials_path: str) -> Credentials:
    """Run the installed-app OAuth flow and store the resulting token.

    Args:
        token_path: Path to token.json file
        credentials_path: Path to the OAuth client secrets file

    Returns:
        Fresh credentials

    Raises:
        FileNotFoundError: If the client secrets file is not found
    """
    if not os.path.exists(credentials_path):
        raise FileNotFoundError(
            f"Missing credentials file at {credentials_path}"
        )

    flow = InstalledAppFlow.from_client_secrets_file(credentials_path, SCOPES)
    creds = flow.run_local_server(port=0)
    _save(creds, token_path)
    return cast(Credentials, creds)


def refresh_credentials(token_path: str) -> Credentials:
    """Force a refresh of the stored token.

    Raises:
        AuthenticationError: If there is no refreshable token
    """
    if not os.path.exists(token_path):
        raise AuthenticationError(f"No token at {token_path}; run 'auth' first")

    creds = Credentials.from_authorized_user_file(token_path, SCOPES)
    if not creds.refresh_token:
        raise AuthenticationError("Stored token has no refresh token; run 'auth' again")
    try:
        creds.refresh(Request())
    except GoogleAuthError as e:
        raise AuthenticationError(f"Failed to refresh token: {e}") from e
    _save(creds, token_path)
    logger.info("Refreshed token in %s", token_path)
    return creds


def get_credentials(token_path: str, credentials_path: str) -> Credentials:
    """Get valid user credentials from storage.

    If there are no (valid) credentials available, let the user log in.

    Args:
        token_path: Path to token.json file
        credentials_path: Path to the OAuth client secrets file

    Returns:
        Valid credentials object

    Raises:
        FileNotFoundError: If the client secrets file is needed but missing
    """
    creds = None
    if os.path.exists(token_path):
        creds = Credentials.from_authorized_user_file(token_path, SCOPES)

    if creds and creds.valid:
        return cast(Credentials, creds)

    if creds and creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
        except GoogleAuthError as e:
            raise AuthenticationError(f"Failed to refresh token: {e}") from e
        _save(creds, token_path)
        return cast(Credentials, creds)

    return login(token_path, credentials_path)


def build_service(creds: Credentials) -> Any:
    """Build the Google Photos Library API service.

    Raises:
        AuthenticationError: If the service cannot be built
    """
    try:
        return build('photoslibrary', 'v1', credentials=creds, static_discovery=False)
    except Exception as e:
        raise AuthenticationError(f"Error authenticating with Google Photos: {e}") from e
