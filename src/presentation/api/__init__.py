"""HTTP plumbing shared by both applications (middleware)."""
