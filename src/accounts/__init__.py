"""User and admin accounts backend."""
