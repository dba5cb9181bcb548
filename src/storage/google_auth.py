import json
import logging
import os
from pathlib import Path
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/calendar.events",
    "https://www.googleapis.com/auth/calendar.readonly",
]


class CredentialsError(RuntimeError):
    pass


class GoogleAuthStore:
    """
    Loads the OAuth authorized-user token from GOOGLE_TOKEN_FILE, refreshing it
    when expired. When GOOGLE_TOKEN_ENCRYPTION_KEY is set the file is stored
    Fernet-encrypted.
    """

    def __init__(self, path: Optional[str] = None, encryption_key: Optional[str] = None):
        self.path = Path(path or os.getenv("GOOGLE_TOKEN_FILE", "data/token.json"))
        key = encryption_key or os.getenv("GOOGLE_TOKEN_ENCRYPTION_KEY")
        self.fernet = Fernet(key.encode() if isinstance(key, str) else key) if key else None

    def _encrypt(self, data: str) -> str:
        if self.fernet is None:
            return data
        return self.fernet.encrypt(data.encode()).decode()

    def _decrypt(self, token: str) -> str:
        if self.fernet is None:
            return token
        try:
            return self.fernet.decrypt(token.encode()).decode()
        except InvalidToken as e:
            raise CredentialsError(f"Failed to decrypt token file {self.path}") from e

    def _read_info(self) -> dict:
        if not self.path.exists():
            raise CredentialsError(
                f"Google token file {self.path} not found. Set GOOGLE_TOKEN_FILE to an authorized-user token."
            )
        raw = self._decrypt(self.path.read_text(encoding="utf-8"))
        try:
            info = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CredentialsError(f"Google token file {self.path} is not valid JSON") from e

        # client id/secret may be kept out of the token file
        info.setdefault("client_id", os.getenv("GOOGLE_CLIENT_ID"))
        info.setdefault("client_secret", os.getenv("GOOGLE_CLIENT_SECRET"))
        info.setdefault("token_uri", "https://oauth2.googleapis.com/token")
        return info

    def save_credentials(self, credentials: Credentials) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self._encrypt(credentials.to_json()), encoding="utf-8")
        logger.info(f"Saved Google credentials to {self.path}")

    def get_credentials(self) -> Credentials:
        """Return valid credentials, refreshing and persisting them if needed."""
        info = self._read_info()
        try:
            creds = Credentials.from_authorized_user_info(info, SCOPES)
        except ValueError as e:
            raise CredentialsError(f"Google token file {self.path} is incomplete: {e}") from e

        if creds.valid:
            return creds

        if not creds.refresh_token:
            raise CredentialsError("Google token expired and has no refresh token")

        try:
            creds.refresh(Request())
        except RefreshError as e:
            raise CredentialsError(f"Failed to refresh Google token: {e}") from e

        self.save_credentials(creds)
        return creds
