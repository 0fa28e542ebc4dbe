"""
Voucher state machine: active -> redeemed | expired.

Expired is never stored authoritatively here; it is computed from the
expiration date. Redeemed and expired are terminal.

The redeemability check in this module is an optimization only. Two admins
(or two tabs) can pass it at the same moment; the platform decides which
redemption wins with a conditional update on the voucher's current state and
rejects the other, which arrives here as RedemptionError.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Union
from voucher_admin.errors import (
    AlreadyRedeemed, ApiError, Expired, NotFound, RedemptionError, ValidationError
)
from voucher_admin.models.base import as_utc
from voucher_admin.models.voucher import Voucher, VoucherStatus
from voucher_admin.repositories.voucher_repo import VoucherRepository

logger = logging.getLogger(__name__)


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def effective_state(voucher: Voucher, now: Optional[datetime] = None) -> VoucherStatus:
    """
    The voucher's state as far as any allow/deny decision is concerned.

    Redeemed if it carries a redemption timestamp, otherwise expired once the
    expiration date has passed, otherwise active. The stored `status` field is
    ignored.
    """
    if voucher.redeemed_at is not None:
        return VoucherStatus.REDEEMED
    if _now(now) > voucher.expiration_date:
        return VoucherStatus.EXPIRED
    return VoucherStatus.ACTIVE


def is_redeemable(voucher: Voucher, now: Optional[datetime] = None) -> bool:
    return effective_state(voucher, now) == VoucherStatus.ACTIVE


def ensure_redeemable(voucher: Voucher, now: Optional[datetime] = None) -> None:
    """Raise AlreadyRedeemed or Expired unless the voucher is active"""
    state = effective_state(voucher, now)
    if state == VoucherStatus.REDEEMED:
        raise AlreadyRedeemed(voucher.code)
    if state == VoucherStatus.EXPIRED:
        raise Expired(voucher.code)


def ensure_expiration_change_allowed(
    voucher: Voucher, new_expiration: Union[datetime, str, None], now: Optional[datetime] = None
) -> None:
    """
    Raise AlreadyRedeemed or Expired when a terminal voucher's expiration date
    would move. Setting the same date again is not a change.
    """
    if new_expiration is None or as_utc(new_expiration) == voucher.expiration_date:
        return
    state = effective_state(voucher, now)
    if state == VoucherStatus.REDEEMED:
        raise AlreadyRedeemed(
            voucher.code, f"Voucher {voucher.code} has already been redeemed; its expiration date cannot be changed"
        )
    if state == VoucherStatus.EXPIRED:
        raise Expired(voucher.code, f"Voucher {voucher.code} has expired; its expiration date cannot be changed")


class VoucherLifecycle:
    def __init__(self, voucher_repo: VoucherRepository):
        self.voucher_repo = voucher_repo

    async def redeem(self, code: str, now: Optional[datetime] = None) -> Voucher:
        """
        Redeem a voucher by code.

        Short-circuits with AlreadyRedeemed / Expired without calling the
        redemption endpoint when the current voucher is not active. A refusal
        from the platform raises RedemptionError carrying the server message
        and the voucher as re-fetched afterwards.

        Returns:
            The redeemed voucher, with redeemed_at as recorded by the platform
        """
        voucher = await self.voucher_repo.get_by_code(code)
        try:
            ensure_redeemable(voucher, now)
        except (AlreadyRedeemed, Expired) as e:
            logger.info(f"Redemption of {code} short-circuited: {e.message}")
            raise

        try:
            redeemed = await self.voucher_repo.redeem(code)
        except (ApiError, ValidationError, NotFound) as e:
            logger.warning(f"Platform refused redemption of {code}: {e.message}")
            current = await self._refetch(code)
            raise RedemptionError(e.message, code=code, current=current)

        if redeemed is None or redeemed.redeemed_at is None:
            # Acknowledged without the timestamp; the platform's copy is the record
            redeemed = await self._refetch(code)
            if redeemed is None or redeemed.redeemed_at is None:
                raise RedemptionError(
                    "Redemption was not confirmed by the server",
                    code=code,
                    current=redeemed,
                )

        logger.info(f"Voucher {code} redeemed at {redeemed.redeemed_at.isoformat()}")
        return redeemed

    async def _refetch(self, code: str) -> Optional[Voucher]:
        try:
            return await self.voucher_repo.get_by_code(code)
        except NotFound:
            return None
