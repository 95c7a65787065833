"""Human-readable sizes and durations for console output."""

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_size(num_bytes: int) -> str:
    """Format a byte count with binary (1024) steps, e.g. ``"1.50 KB"``."""
    size = float(num_bytes)
    unit = 0
    while size >= 1024.0 and unit < len(SIZE_UNITS) - 1:
        size /= 1024.0
        unit += 1
    if unit == 0:
        return f"{int(size)} {SIZE_UNITS[0]}"
    return f"{size:.2f} {SIZE_UNITS[unit]}"


def format_duration(ms: int) -> str:
    """Format milliseconds as ``"850 ms"``, ``"2.50 s"`` or ``"3 m 5 s"``."""
    if ms < 1000:
        return f"{ms} ms"
    if ms < 60_000:
        return f"{ms / 1000:.2f} s"
    minutes, seconds = divmod(ms // 1000, 60)
    return f"{minutes} m {seconds} s"
