from __future__ import annotations

import base64
import binascii
import io
from dataclasses import dataclass

import pyotp
import qrcode


@dataclass(frozen=True)
class MfaEnrollment:
    secret: str
    otpauth_url: str
    qr_code_url: str


def provisioning_uri(secret: str, *, issuer: str, full_name: str) -> str:
    return pyotp.TOTP(secret).provisioning_uri(name=f"{issuer} ({full_name})", issuer_name=issuer)


def qr_data_url(data: str) -> str:
    """Render `data` as a PNG QR code and return it as a data: URL."""
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
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def new_enrollment(*, issuer: str, full_name: str) -> MfaEnrollment:
    secret = pyotp.random_base32()
    uri = provisioning_uri(secret, issuer=issuer, full_name=full_name)
    return MfaEnrollment(secret=secret, otpauth_url=uri, qr_code_url=qr_data_url(uri))


def is_valid_secret(secret: str) -> bool:
    """True when `secret` decodes as base32."""
    if not secret:
        return False
    try:
        pyotp.TOTP(secret).byte_secret()
    except (binascii.Error, ValueError):
        return False
    return True


def verify_totp(secret: str, code: str) -> bool:
    if not code or not is_valid_secret(secret):
        return False
    # one step of drift either way, like authenticator apps expect
    return pyotp.TOTP(secret).verify(str(code).strip(), valid_window=1)
