# winecorp/console_style.py
def bold(text: str) -> str:
    return f"\033[1m{text}\033[0m"


def cyan(text: str) -> str:
    return f"\033[96m{text}\033[0m"


def green(text: str) -> str:
    return f"\033[92m{text}\033[0m"


def red(text: str) -> str:
    return f"\033[91m{text}\033[0m"


def yellow(text: str) -> str:
    return f"\033[93m{text}\033[0m"


def signed(value: float, text: str) -> str:
    """Colore `text` en vert si `value` est positive, en rouge si négative."""
    if value > 0:
        return green(text)
    if value < 0:
        return red(text)
    return text


def score(value: float, text: str, good: float = 0.7, bad: float = 0.4) -> str:
    """Colore un score 0-1 : vert au-dessus de `good`, rouge sous `bad`."""
    if value >= good:
        return green(text)
    if value < bad:
        return red(text)
    return yellow(text)
