"""Password hashing with passlib."""

from passlib.context import CryptContext

# pbkdf2_sha256 is implemented inside passlib itself, so hashing does not
# depend on which bcrypt release happens to be installed
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)
