"""Plain helper module without any resource."""


def slugify(text: str) -> str:
    return "-".join(text.lower().split())
