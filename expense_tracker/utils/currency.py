def group_digits(amount: int) -> str:
    """1200 -> '1,200'. Amounts are whole units, so no decimals."""
    return f"{amount:,}"


def format_amount(amount: int, symbol: str = "¥") -> str:
    """Symbol-prefixed, digit-grouped amount, e.g. '¥1,200'."""
    return f"{symbol}{group_digits(amount)}"
