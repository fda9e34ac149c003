import asyncio
import sys
from datetime import datetime, timezone

from bloodbridge.core.db import USERS, get_client, get_db

# No API route hands out the first admin role; run this once per deployment.
async def main(email: str) -> int:
    res = await get_db()[USERS].update_one(
        {"email": email},
        {"$set": {"role": "admin", "updatedAt": datetime.now(timezone.utc)}},
    )
    get_client().close()
    if res.matched_count == 0:
        print(f"No user with email {email}")
        return 1
    print(f"{email} is now an admin")
    return 0

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: python scripts/promote_admin.py <email>")
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1])))
