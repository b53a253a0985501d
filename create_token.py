"""Print a long-lived access token for a registered user.

Usage:
    python create_token.py admin@example.com [days]
"""
import sys

from library_catalog_api.app.core.security import create_access_token

if len(sys.argv) < 2:
    sys.exit("usage: create_token.py EMAIL [DAYS]")
days = int(sys.argv[2]) if len(sys.argv) > 2 else 365
token = create_access_token({"sub": sys.argv[1].strip().lower()}, expires_delta=days * 24 * 60 * 60)
print(token)
