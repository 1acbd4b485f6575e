import bcrypt

# bcrypt ignores (newer releases reject) anything past 72 bytes
BCRYPT_MAX_BYTES = 72


def _secret_bytes(value: str) -> bytes:
    return value.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_secret_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    return bcrypt.checkpw(_secret_bytes(password), hashed.encode("utf-8"))


def normalize_security_answer(answer: str) -> str:
    return answer.strip().lower()


def hash_security_answer(answer: str) -> str:
    return hash_password(normalize_security_answer(answer))


def verify_security_answer(answer: str, hashed: str) -> bool:
    return verify_password(normalize_security_answer(answer), hashed)
