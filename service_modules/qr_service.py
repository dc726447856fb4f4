"""
QR Service - member QR identities and branch registration QR codes.
"""
import base64
import io
import secrets
import time
from typing import Optional
from urllib.parse import urlencode

import qrcode

from config import PUBLIC_BASE_URL
from models import BranchQr
from .base import get_db_session, BranchORM, logger
from .scoping import OwnerScope


def issue_member_qr_id() -> str:
    """
    Member check-in token: millisecond timestamp plus 48 random bits.
    Uniqueness is finally enforced by the unique index on members.qr_code_id.
    """
    return f"QR_{int(time.time() * 1000)}_{secrets.token_hex(6)}"


def build_registration_url(branch_id: str, base_url: Optional[str] = None) -> str:
    base = (base_url or PUBLIC_BASE_URL).rstrip("/")
    return f"{base}/register?{urlencode({'branchId': branch_id})}"


def render_qr_data_url(data: str) -> str:
    """Render ``data`` as a PNG QR code and return it as a data URL."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    encoded = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def apply_registration_qr(branch: BranchORM, base_url: Optional[str] = None) -> BranchQr:
    """Replace the branch's current registration QR (caller commits)."""
    registration_url = build_registration_url(branch.id, base_url)
    qr_image = render_qr_data_url(registration_url)
    branch.registration_url = registration_url
    branch.qr_code_url = qr_image
    return BranchQr(qr_image=qr_image, registration_url=registration_url)


class QrService:
    """Service for branch registration QR codes."""

    def generate_branch_qr(self, ctx, branch_id: str, base_url: Optional[str] = None) -> BranchQr:
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            branch = scope.get(BranchORM, branch_id)
            result = apply_registration_qr(branch, base_url)
            db.commit()
            logger.info(f"Regenerated registration QR for branch {branch_id}")
            return result
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


# Singleton instance
qr_service = QrService()


def get_qr_service() -> QrService:
    """Dependency injection helper."""
    return qr_service
