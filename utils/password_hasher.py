"""
One-way hashing for member passwords and email verification codes.

Both go through the same bcrypt context: ``hash`` salts every call, so equal
inputs never produce equal hashes, and ``verify`` compares in constant time.
"""
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plaintext value against a stored hash.

    A missing or malformed hash counts as a mismatch.
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False
