"""Print a bearer token for a tenant, for local testing."""
import argparse
import os
import sys
from datetime import datetime, timedelta, timezone

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import settings
from app.core.security import create_access_token
from app.seed_data import DEMO_TENANT_ID


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--tenant-id", default=DEMO_TENANT_ID)
    parser.add_argument("--hours", type=int, default=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    args = parser.parse_args()

    token = create_access_token(args.tenant_id, expires_in=timedelta(hours=args.hours))
    expires = datetime.now(timezone.utc) + timedelta(hours=args.hours)

    print("JWT Token for testing:")
    print("======================")
    print(token)
    print()
    print("Use this in the Authorization header:")
    print(f"Authorization: Bearer {token}")
    print()
    print(f"Tenant ID: {args.tenant_id}")
    print(f"Expires: {expires.isoformat()}")


if __name__ == "__main__":
    main()
