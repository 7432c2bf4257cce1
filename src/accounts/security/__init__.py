from .passwords import BcryptPasswordHasher, PasswordHasher, hash_password

__all__ = ["BcryptPasswordHasher", "PasswordHasher", "hash_password"]
