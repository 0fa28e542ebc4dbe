import secrets
from typing import Optional
from voucher_admin.config import settings


def generate_voucher_code(length: Optional[int] = None) -> str:
    """
    Generate a preview voucher code (8 chars of A-Z0-9 by default).

    Advisory only: the platform assigns the authoritative code when the order
    is created and resolves collisions on its side.
    """
    alphabet = settings.VOUCHER_CODE_ALPHABET
    size = length or settings.VOUCHER_CODE_LENGTH
    return "".join(secrets.choice(alphabet) for _ in range(size))


def bearer_header(token: Optional[str]) -> dict:
    """Authorization header for a bearer token, empty when there is none"""
    return {"Authorization": f"Bearer {token}"} if token else {}
