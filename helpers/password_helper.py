from passlib.context import CryptContext
from config.settings import settings

# Initialize password hashing context (bcrypt)
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    """Hash the given password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify that the plain password matches the hashed password."""
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)
