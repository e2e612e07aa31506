"""
ThorClient - Token Amounts
============================
Token e importi in unità minime (wei-like, 18 decimali).

Security Level: HIGH
Last Updated: 2026-10-17
Version: 1.0.0

Regole:
- value = intero Python a precisione arbitraria (unità minime)
- Parsing decimale con decimal.Decimal, mai float
- Negativi, troppi decimali, overflow uint256 → ArgumentError
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, localcontext
from typing import Optional, Union

from thor_client.constants import (
    ENERGY_CONTRACT_ADDRESS,
    MAX_UINT256,
    VET_DECIMALS,
    VTHO_DECIMALS,
)
from thor_client.domain.addressing import Address
from thor_client.errors import ArgumentError


# ============================================================================
# TOKEN
# ============================================================================

@dataclass(frozen=True)
class Token:
    """
    Descrittore token.

    Attributes:
        name (str): Nome esteso
        symbol (str): Simbolo (VET, VTHO, …)
        decimals (int): Cifre decimali dell'unità umana
        contract (Optional[Address]): Contratto ERC20, None per token nativo
    """

    name: str
    symbol: str
    decimals: int
    contract: Optional[Address] = None

    def __post_init__(self):
        if not 0 <= self.decimals <= 77:
            raise ArgumentError(
                f"Token decimals out of range: {self.decimals}",
                code="INVALID_DECIMALS"
            )

    @property
    def is_native(self) -> bool:
        return self.contract is None

    @property
    def unit(self) -> int:
        """Unità minime per 1 token"""
        return 10 ** self.decimals


VET = Token(name="VeChain", symbol="VET", decimals=VET_DECIMALS)
VTHO = Token(
    name="VeThor",
    symbol="VTHO",
    decimals=VTHO_DECIMALS,
    contract=Address.from_hex(ENERGY_CONTRACT_ADDRESS),
)


# ============================================================================
# AMOUNT
# ============================================================================

@dataclass(frozen=True)
class Amount:
    """
    Importo di un token in unità minime.

    Examples:
        >>> a = Amount.from_decimal(VTHO, "11.12")
        >>> a.value
        11120000000000000000
        >>> a.to_decimal_string()
        '11.12'
    """

    token: Token
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ArgumentError(
                f"Amount value must be int, got {type(self.value).__name__}",
                code="INVALID_AMOUNT"
            )
        if self.value < 0:
            raise ArgumentError(
                f"Amount cannot be negative: {self.value}",
                code="NEGATIVE_AMOUNT"
            )
        if self.value > MAX_UINT256:
            raise ArgumentError(
                "Amount exceeds uint256 range",
                code="AMOUNT_OVERFLOW",
                details={"value": str(self.value)}
            )

    @classmethod
    def from_decimal(cls, token: Token, text: Union[str, int, Decimal]) -> Amount:
        """
        Parse importo umano ("11.12") in unità minime.

        Args:
            token: Token di riferimento (decimali)
            text: Stringa decimale, int o Decimal (float rifiutati)

        Raises:
            ArgumentError: Se non numerico, negativo, troppi decimali o overflow
        """
        if text is None:
            raise ArgumentError("amount is null", code="NULL_ARGUMENT",
                                details={"field": "amount"})
        if isinstance(text, float):
            raise ArgumentError(
                "Float amounts are not accepted, use a decimal string",
                code="INVALID_AMOUNT"
            )

        try:
            parsed = Decimal(str(text).strip())
        except InvalidOperation:
            raise ArgumentError(f"Invalid decimal amount: {text!r}", code="INVALID_AMOUNT")

        if not parsed.is_finite():
            raise ArgumentError(f"Invalid decimal amount: {text!r}", code="INVALID_AMOUNT")
        if parsed < 0:
            raise ArgumentError(f"Amount cannot be negative: {text}", code="NEGATIVE_AMOUNT")

        # 2**256 ha 78 cifre
        if parsed.adjusted() + token.decimals > 78:
            raise ArgumentError(
                "Amount exceeds uint256 range",
                code="AMOUNT_OVERFLOW",
                details={"amount": str(text)}
            )

        with localcontext() as ctx:
            ctx.prec = 160
            exponent = parsed.normalize().as_tuple().exponent
            if exponent < 0 and -exponent > token.decimals:
                raise ArgumentError(
                    f"Too many fraction digits for {token.symbol} "
                    f"(max {token.decimals}): {text}",
                    code="AMOUNT_PRECISION",
                    details={"decimals": token.decimals}
                )
            value = int(parsed.scaleb(token.decimals))

        return cls(token=token, value=value)

    @classmethod
    def from_minimal(cls, token: Token, value: int) -> Amount:
        return cls(token=token, value=value)

    # ------------------------------------------------------------------------
    # RENDERING
    # ------------------------------------------------------------------------

    def to_decimal(self) -> Decimal:
        with localcontext() as ctx:
            ctx.prec = 100
            return Decimal(self.value).scaleb(-self.token.decimals)

    def to_decimal_string(self) -> str:
        """
        Decimale normalizzato, senza zeri finali.

        Examples:
            >>> Amount(VET, 0).to_decimal_string()
            '0'
            >>> Amount(VET, 10**18).to_decimal_string()
            '1'
        """
        whole, frac = divmod(self.value, self.token.unit)
        if frac == 0:
            return str(whole)
        digits = str(frac).rjust(self.token.decimals, "0").rstrip("0")
        return f"{whole}.{digits}"

    def to_hex_string(self) -> str:
        """
        Hex big-endian minimale con prefisso "0x" (zero → "0x0").

        Examples:
            >>> Amount(VET, 255).to_hex_string()
            '0xff'
        """
        return hex(self.value)

    def __str__(self) -> str:
        return f"{self.to_decimal_string()} {self.token.symbol}"


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "Token",
    "Amount",
    "VET",
    "VTHO",
]
