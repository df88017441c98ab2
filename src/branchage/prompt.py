"""Interactive confirmation."""


def confirm(prompt: str, default: bool = False) -> bool:
    """Ask a yes/no question on the terminal.

    Returns True straight away when ``default`` is True (e.g. ``--yes`` was
    given). Otherwise only an answer of "y" (any case, surrounding whitespace
    ignored) counts as yes.
    """
    if default:
        return True
    try:
        answer = input(f"{prompt} (y/N): ")
    except EOFError:
        return False
    return answer.strip().lower() == "y"
