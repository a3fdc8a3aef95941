"""
Conversion between human NEAR amounts and yoctoNEAR.
"""
from decimal import Decimal, InvalidOperation, localcontext
from typing import Optional

NEAR_NOMINATION_EXP = 24
NEAR_NOMINATION = 10 ** NEAR_NOMINATION_EXP


def parse_near_amount(amount: Optional[str]) -> Optional[str]:
    """
    Convert a human readable NEAR amount into yoctoNEAR.

    Args:
        amount: Amount such as ``"1.5"`` or ``"1,000"``

    Returns:
        The amount in yoctoNEAR as a decimal string, or None when no amount
        was given

    Raises:
        ValueError: If the amount is malformed or more precise than one yocto
    """
    if amount is None:
        return None
    cleaned = str(amount).replace(",", "").strip()
    if not cleaned:
        return None

    with localcontext() as ctx:
        ctx.prec = 80
        try:
            value = Decimal(cleaned)
        except InvalidOperation:
            raise ValueError(f"Cannot parse '{amount}' as NEAR amount")
        if not value.is_finite() or value < 0:
            raise ValueError(f"Cannot parse '{amount}' as NEAR amount")
        yocto = value.scaleb(NEAR_NOMINATION_EXP)
        if yocto != yocto.to_integral_value():
            raise ValueError(f"Cannot parse '{amount}' as NEAR amount")
        return str(int(yocto))


def format_near_amount(yocto: str) -> str:
    """Render a yoctoNEAR amount as NEAR without trailing zeroes."""
    with localcontext() as ctx:
        ctx.prec = 80
        value = Decimal(str(yocto)).scaleb(-NEAR_NOMINATION_EXP)
        text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
