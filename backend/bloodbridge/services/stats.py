# bloodbridge/services/stats.py

async def compute_overview(repo):
    """
    Returns a dict that matches the AdminStats schema.
    Repo must implement:
      - count_users()
      - count_requests()
      - total_funding()
    """
    return {
        "totalUsers": await repo.count_users(),
        "totalRequests": await repo.count_requests(),
        "totalFunding": await repo.total_funding(),
    }
