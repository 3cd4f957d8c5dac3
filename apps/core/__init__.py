"""Organizations (the tenant boundary) and plumbing shared by every app."""
