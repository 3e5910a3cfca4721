from pathlib import Path


def load_targets(path: Path) -> list[str]:
    """Target URLs, one per line; blank lines and # comments are ignored."""
    if not path.exists():
        raise FileNotFoundError(f"Targets file not found: {path}")
    targets: list[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        url = line.strip()
        if not url or url.startswith("#") or url in targets:
            continue
        if not url.startswith(("http://", "https://")):
            raise ValueError(f"Invalid target URL in {path}: {url}")
        targets.append(url)
    return targets
