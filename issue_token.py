#!/usr/bin/env python3
"""Quick script to mint a bearer token for a user (logins are handled upstream)."""
import sys

from dotenv import load_dotenv

load_dotenv()

from mice.core.constants import UserRole  # noqa: E402
from mice.core.security import create_access_token  # noqa: E402

roles = [role.value for role in UserRole]

if len(sys.argv) not in (3, 4):
    print("Usage: python issue_token.py <user-id> <role> [email]")
    print()
    print(f"Roles: {', '.join(roles)}")
    print()
    print("Example:")
    print("  python issue_token.py 1 ADMIN admin1@mice.com")
    sys.exit(1)

try:
    user_id = int(sys.argv[1])
except ValueError:
    print("❌ Error: user id must be an integer")
    sys.exit(1)

role = sys.argv[2].upper()
if role not in roles:
    print(f"❌ Error: role must be one of {', '.join(roles)}")
    sys.exit(1)

email = sys.argv[3] if len(sys.argv) == 4 else None

token = create_access_token(user_id, UserRole(role), email)

print("✅ Access token issued!")
print()
print("Send it as a request header:")
print("-" * 80)
print(f"Authorization: Bearer {token}")
print("-" * 80)
