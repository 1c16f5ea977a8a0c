"""Authentication helpers for the Google Sheets and Gmail APIs."""

from pathlib import Path

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build, Resource

from contact_spam_guard.constants import CREDENTIALS_PATH, SCOPES, TOKEN_PATH
from contact_spam_guard.models import AuthenticationRequired


def _load_token(token_path: Path) -> Credentials | None:
    if not token_path.exists():
        return None
    return Credentials.from_authorized_user_file(str(token_path), SCOPES)


def _run_consent_flow(credentials_path: Path) -> Credentials:
    if not credentials_path.exists():
        raise FileNotFoundError(
            f"Credentials file not found at {credentials_path}.\n"
            "Download your OAuth client credentials from the Google Cloud Console "
            "and save them as:\n"
            f"  {credentials_path}"
        )
    flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), SCOPES)
    return flow.run_local_server(port=0)


def get_credentials(
    interactive: bool = True,
    credentials_path: Path | None = None,
    token_path: Path | None = None,
) -> Credentials:
    """Return OAuth credentials covering Gmail send and Sheets.

    A cached token is refreshed when it has expired.  Without a usable
    token the browser consent flow runs, unless ``interactive`` is False:
    the server passes False and raises :class:`AuthenticationRequired`
    instead, so run ``contact-spam-guard auth`` once on a machine with a
    browser before deploying.
    """
    credentials_path = credentials_path or CREDENTIALS_PATH
    token_path = token_path or TOKEN_PATH
    creds = _load_token(token_path)

    if creds and creds.expired and creds.refresh_token:
        creds.refresh(Request())
    elif not creds or not creds.valid:
        if not interactive:
            raise AuthenticationRequired(
                f"No valid Google token at {token_path}; run 'contact-spam-guard auth' first"
            )
        creds = _run_consent_flow(credentials_path)

    token_path.parent.mkdir(parents=True, exist_ok=True)
    token_path.write_text(creds.to_json())
    return creds


def get_sheets_service(creds: Credentials | None = None) -> Resource:
    return build("sheets", "v4", credentials=creds or get_credentials(interactive=False))


def get_gmail_service(creds: Credentials | None = None) -> Resource:
    return build("gmail", "v1", credentials=creds or get_credentials(interactive=False))


def check_auth() -> bool:
    """Obtain (or refresh) the token the server will use.

    Prints a status line and returns False on any failure.
    """
    try:
        creds = get_credentials()
    except Exception as exc:  # noqa: BLE001
        print(f"Authentication failed: {exc}")
        return False

    if not creds.valid:
        print("Authentication failed: token is not valid")
        return False
    print("Authenticated")
    return True
