#!/usr/bin/env python3
"""
Run the Google OAuth installed-app flow and store the resulting token.

Writes the authorized-user token to GOOGLE_TOKEN_PATH and prints the refresh
token so it can be set as GOOGLE_REFRESH_TOKEN for server deployments.

Usage:
    uv run python src/scripts/get_refresh_token.py
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from google_auth_oauthlib.flow import InstalledAppFlow

from core.config import GOOGLE_CLIENT_SECRETS_FILE, GOOGLE_SCOPES, TOKEN_PATH


def main():
    """Authorize in the browser and save the token."""
    secrets_path = Path(GOOGLE_CLIENT_SECRETS_FILE)
    if not secrets_path.exists():
        print(f"OAuth client secrets not found at {secrets_path}")
        print("Download them from the Google Cloud console (Desktop app client).")
        sys.exit(1)

    flow = InstalledAppFlow.from_client_secrets_file(str(secrets_path), GOOGLE_SCOPES)
    creds = flow.run_local_server(port=0, access_type="offline", prompt="consent")

    TOKEN_PATH.parent.mkdir(parents=True, exist_ok=True)
    TOKEN_PATH.write_text(creds.to_json())
    print(f"Saved token to: {TOKEN_PATH}")

    if creds.refresh_token:
        print("\nAdd this to your .env:")
        print(f"GOOGLE_REFRESH_TOKEN={creds.refresh_token}")
    else:
        print("\nNo refresh token returned; revoke the app's access and run again.")


if __name__ == "__main__":
    main()
