"""Domain services shared by the API routers and background jobs."""
