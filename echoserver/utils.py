from typing import Tuple

NS_PER_US = 1_000
NS_PER_MS = 1_000_000
NS_PER_S = 1_000_000_000


def _split_fraction(value: int, precision: int) -> Tuple[int, str]:
    """Split ``value`` into its whole part and a ``.ddd`` fraction.

    Trailing zeros are dropped from the fraction, and the dot goes with them
    when nothing is left.
    """
    scale = 10**precision
    whole, fraction = divmod(value, scale)
    digits = str(fraction).rjust(precision, "0").rstrip("0")
    return whole, f".{digits}" if digits else ""


def format_duration(nanoseconds: int) -> str:
    """Render a duration compactly, e.g. ``850ns``, ``1.5ms``, ``2m3.25s``, ``1h0m0s``."""
    if nanoseconds == 0:
        return "0s"
    sign = "-" if nanoseconds < 0 else ""
    u = abs(nanoseconds)

    if u < NS_PER_US:
        return f"{sign}{u}ns"
    if u < NS_PER_MS:
        whole, fraction = _split_fraction(u, 3)
        return f"{sign}{whole}{fraction}µs"
    if u < NS_PER_S:
        whole, fraction = _split_fraction(u, 6)
        return f"{sign}{whole}{fraction}ms"

    seconds, fraction = _split_fraction(u, 9)
    out = f"{seconds % 60}{fraction}s"
    minutes = seconds // 60
    if minutes:
        out = f"{minutes % 60}m{out}"
        hours = minutes // 60
        if hours:
            out = f"{hours}h{out}"
    return sign + out


def canonical_header_key(key: str) -> str:
    """``x-forwarded-for`` -> ``X-Forwarded-For``."""
    return "-".join(part[:1].upper() + part[1:].lower() for part in key.split("-"))
