GIB = 1024 * 1024 * 1024


def bytes_to_gib(value: float) -> float:
    return float(value) / GIB


def mib_to_gib(value: float) -> float:
    return float(value) / 1024


def usage_line(used_gb: float, total_gb: float, free_gb: float) -> str:
    """"<used>GB / <total>GB (<free>GB free)" with two decimals."""
    return f"{used_gb:0.2f}GB / {total_gb:0.2f}GB ({free_gb:0.2f}GB free)"
