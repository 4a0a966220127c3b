import uuid
from passlib.context import CryptContext
from mindleaf_backend.settings import settings

_pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

def hash_password(password: str) -> str:
    return _pwd_context.hash(password)

def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return _pwd_context.verify(password, password_hash)
    except ValueError:
        # stored value is not a recognised hash
        return False

def generate_token() -> str:
    """Opaque bearer/reset token. Uniqueness is enforced by the user table."""
    return str(uuid.uuid4())
