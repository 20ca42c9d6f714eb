from __future__ import annotations

from pathlib import Path

_NULLS = ("null", "Null", "NULL", "none", "None", "~")
_TRUE = ("true", "True", "TRUE", "yes", "Yes", "on", "On")
_FALSE = ("false", "False", "FALSE", "no", "No", "off", "Off")


def _parse_scalar(s: str) -> object:
    t = s.strip()
    if t == "" or t in _NULLS:
        return None
    if t in _TRUE:
        return True
    if t in _FALSE:
        return False
    if len(t) >= 2 and t[0] == t[-1] and t[0] in "\"'":
        return t[1:-1]
    try:
        return int(t)
    except ValueError:
        pass
    try:
        return float(t)
    except ValueError:
        return t


def _strip_comment(line: str) -> str:
    i = line.find(" #")
    return line if i < 0 else line[:i]


def parse_yaml(text: str) -> dict[str, object]:
    """Parse the nested ``key: value`` subset of YAML used by config files."""
    root: dict[str, object] = {}
    stack: list[tuple[int, dict[str, object]]] = [(-1, root)]

    for lineno, raw in enumerate(text.splitlines(), start=1):
        s = _strip_comment(raw).rstrip()
        body = s.lstrip(" ")
        if body == "" or body.startswith("#"):
            continue
        indent = len(s) - len(body)
        if ":" not in body:
            raise ValueError(f"line {lineno}: expected 'key: value'")

        while stack[-1][0] >= indent:
            stack.pop()
        parent = stack[-1][1]

        key, rest = body.split(":", 1)
        k = key.strip()
        if k in parent:
            raise ValueError(f"line {lineno}: duplicate key {k!r}")
        if rest.strip() == "":
            child: dict[str, object] = {}
            parent[k] = child
            stack.append((indent, child))
        else:
            parent[k] = _parse_scalar(rest)

    return root


def load_yaml(path: Path) -> dict[str, object]:
    return parse_yaml(path.read_text(encoding="utf-8"))


def get_section(cfg: dict[str, object], name: str) -> dict[str, object]:
    v = cfg.get(name)
    if v is None:
        return {}
    if not isinstance(v, dict):
        raise ValueError("config section must be a mapping")
    return v


def pick_bool(
    cfg: dict[str, object], key: str, cli: bool | None, default: bool
) -> bool:
    if cli is not None:
        return bool(cli)
    v = cfg.get(key)
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    if isinstance(v, int) and v in (0, 1):
        return bool(v)
    raise ValueError(f"invalid bool for {key!r} in config")


def pick_str(cfg: dict[str, object], key: str, cli: str | None, default: str) -> str:
    if cli is not None:
        return str(cli)
    v = cfg.get(key)
    if v is None:
        return default
    if isinstance(v, str):
        return v
    raise ValueError(f"invalid str for {key!r} in config")
