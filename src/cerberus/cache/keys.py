"""Canonical cache fingerprints.

Validated mints, amounts and slippage never contain ``|``, so joining on it
is unambiguous.
"""

DELIMITER = "|"


def quote_key(input_mint: str, output_mint: str, amount: str, slippage_bps: int | str) -> str:
    return DELIMITER.join((input_mint, output_mint, str(amount), str(slippage_bps)))


def build_key(
    input_mint: str,
    output_mint: str,
    amount: str,
    slippage_bps: int | str,
    user_public_key: str,
) -> str:
    """Quote fingerprint extended with the signer.

    Keeps a transaction built for one wallet from being served to another.
    """
    return quote_key(input_mint, output_mint, amount, slippage_bps) + DELIMITER + user_public_key


def shield_key(input_mint: str, output_mint: str) -> str:
    return f"shield:{input_mint}:{output_mint}"
