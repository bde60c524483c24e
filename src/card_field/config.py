"""Configuration system with a minimal YAML parser.

Configs are small YAML files looked up by name in ~/.card-field/configs/,
./configs/ and the bundled card_field.configs package. The parser has no
external dependencies and supports:
- Scalars (strings, numbers, booleans, null)
- Block lists (- item) and flow lists ([4, 4, 4, 4])
- Nested dictionaries (key: value)
- Comments (# ...)
- Quoted strings (single and double)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from importlib.resources import as_file, files
from pathlib import Path

from card_field.formatter import DEFAULT_GROUP_PATTERN, InvalidPattern, validate_pattern

DEFAULT_HINT = "Your card number"

# --- Minimal YAML Parser ---


def parse_simple_yaml(text: str) -> dict:
    """Parse a simple YAML document into a Python dict."""
    lines = text.split("\n")
    result = _parse_block(lines, 0, 0)[0]
    return result if isinstance(result, dict) else {}


def _next_content_line(lines: list[str], i: int) -> int:
    """Index of the next line that is not blank or a comment."""
    while i < len(lines):
        stripped = lines[i].lstrip()
        if stripped and not stripped.startswith("#"):
            break
        i += 1
    return i


def _parse_block(lines: list[str], start: int, base_indent: int) -> tuple[dict | list, int]:
    """Parse a block of YAML starting at line `start` with `base_indent`."""
    result: dict | list = {}
    i = _next_content_line(lines, start)

    while i < len(lines):
        line = lines[i]
        stripped = line.lstrip()
        indent = len(line) - len(stripped)

        # Dedented past base: this block is done
        if indent < base_indent:
            break

        if stripped.startswith("- ") or stripped == "-":
            if isinstance(result, dict):
                if result:
                    break
                result = []
            result.append(_parse_value(_remove_inline_comment(stripped[1:].strip())))
            i = _next_content_line(lines, i + 1)
            continue

        # A key after list items ends the list
        if isinstance(result, list):
            break

        colon_pos = _find_unquoted_colon(stripped)
        if colon_pos <= 0:
            i = _next_content_line(lines, i + 1)
            continue

        key = stripped[:colon_pos].strip()
        value_part = _remove_inline_comment(stripped[colon_pos + 1 :].strip())
        if value_part:
            result[key] = _parse_value(value_part)
            i = _next_content_line(lines, i + 1)
            continue

        # Nested block, or nothing
        j = _next_content_line(lines, i + 1)
        if j < len(lines):
            next_line = lines[j]
            next_indent = len(next_line) - len(next_line.lstrip())
            is_item = next_line.lstrip().startswith("-")
            if next_indent > indent or (next_indent == indent and is_item):
                result[key], i = _parse_block(lines, j, next_indent)
                continue
        result[key] = None
        i = j

    return result, i


def _find_unquoted_colon(s: str) -> int:
    """Find the position of the first colon not inside quotes."""
    in_single = False
    in_double = False
    for i, c in enumerate(s):
        if c == "'" and not in_double:
            in_single = not in_single
        elif c == '"' and not in_single:
            in_double = not in_double
        elif c == ":" and not in_single and not in_double:
            return i
    return -1


def _remove_inline_comment(s: str) -> str:
    """Remove a trailing ' # comment' from a value string."""
    in_single = False
    in_double = False
    for i, c in enumerate(s):
        if c == "'" and not in_double:
            in_single = not in_single
        elif c == '"' and not in_single:
            in_double = not in_double
        elif c == "#" and not in_single and not in_double and (i == 0 or s[i - 1] == " "):
            return s[:i].rstrip()
    return s


def _split_flow_list(s: str) -> list[str]:
    """Split the inside of [a, b, "c, d"] on unquoted commas."""
    items = []
    current = []
    in_single = False
    in_double = False
    for c in s:
        if c == "'" and not in_double:
            in_single = not in_single
        elif c == '"' and not in_single:
            in_double = not in_double
        elif c == "," and not in_single and not in_double:
            items.append("".join(current))
            current = []
            continue
        current.append(c)
    if "".join(current).strip():
        items.append("".join(current))
    return items


def _parse_value(s: str):
    """Parse a scalar or flow-list YAML value."""
    s = s.strip()

    if not s:
        return None

    if s.lower() in ("null", "~", "none"):
        return None

    if s.lower() in ("true", "yes", "on"):
        return True
    if s.lower() in ("false", "no", "off"):
        return False

    if s.startswith("[") and s.endswith("]"):
        return [_parse_value(item) for item in _split_flow_list(s[1:-1])]

    if len(s) >= 2:
        if s[0] == '"' and s[-1] == '"':
            return _unescape_double_quoted(s[1:-1])
        if s[0] == "'" and s[-1] == "'":
            return s[1:-1].replace("''", "'")

    try:
        if "." in s:
            return float(s)
        return int(s)
    except ValueError:
        pass

    return s


_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", '"': '"', "/": "/", "0": "\0"}


def _unescape_double_quoted(s: str) -> str:
    """Process YAML escape sequences in a double-quoted string."""
    result = []
    i = 0
    while i < len(s):
        if s[i] == "\\" and i + 1 < len(s):
            nxt = s[i + 1]
            # Unknown escapes are kept as-is
            result.append(_ESCAPES.get(nxt, s[i] + nxt))
            i += 2
        else:
            result.append(s[i])
            i += 1
    return "".join(result)


# --- Configuration Dataclasses ---


@dataclass
class FieldConfig:
    """Card number field settings."""

    group_pattern: list[int] = field(default_factory=lambda: list(DEFAULT_GROUP_PATTERN))
    hint: str = DEFAULT_HINT
    incomplete_error: str = "Card number is incomplete"


@dataclass
class UIConfig:
    """Terminal demo settings."""

    prompt: str = "> "


@dataclass
class Config:
    """Complete application configuration."""

    ui: UIConfig = field(default_factory=UIConfig)
    # Must stay last: the attribute shadows dataclasses.field in the class body
    field: FieldConfig = field(default_factory=FieldConfig)


# --- Config Loading ---


def _get_user_data_dir() -> Path:
    """Get the user's card-field data directory ($HOME/.card-field)."""
    return Path.home() / ".card-field"


def _is_path(config_name_or_path: str) -> bool:
    return (
        "/" in config_name_or_path
        or "\\" in config_name_or_path
        or config_name_or_path.endswith((".yml", ".yaml"))
    )


def _find_config_file(config_name_or_path: str) -> Path | None:
    """Find a config file by name or path.

    Search order:
    1. If it looks like a path (contains / or \\ or ends in .yml), treat as path
    2. $HOME/.card-field/configs/<name>.yml
    3. Current working directory configs/<name>.yml
    4. Bundled card_field.configs/<name>.yml
    """
    if _is_path(config_name_or_path):
        path = Path(config_name_or_path).expanduser()
        if path.is_file():
            return path
        return None

    config_filename = f"{config_name_or_path}.yml"

    user_config = _get_user_data_dir() / "configs" / config_filename
    if user_config.is_file():
        return user_config

    cwd_config = Path.cwd() / "configs" / config_filename
    if cwd_config.is_file():
        return cwd_config

    try:
        config_ref = files("card_field.configs").joinpath(config_filename)
        with as_file(config_ref) as p:
            if p.is_file():
                return Path(p)
    except (ModuleNotFoundError, FileNotFoundError, TypeError):
        pass

    return None


def _get_config_search_paths(config_name: str) -> list[str]:
    """Get list of paths that would be searched for a config name."""
    config_filename = f"{config_name}.yml"
    return [
        str(_get_user_data_dir() / "configs" / config_filename),
        str(Path.cwd() / "configs" / config_filename),
        f"card_field.configs/{config_filename} (bundled)",
    ]


def load_config(config_name_or_path: str | None = None) -> Config:
    """Load configuration from a YAML file.

    Args:
        config_name_or_path: Name of config file (without .yml extension),
                            or path to a config file. If None or empty, uses 'default'.

    Returns:
        Config object with loaded values merged over defaults.

    Raises:
        FileNotFoundError: If a non-default config is specified but not found.
        InvalidPattern: If the configured group pattern is unusable.
    """
    if not config_name_or_path:
        config_name_or_path = "default"

    config_path = _find_config_file(config_name_or_path)

    config = Config()

    if config_path is None and config_name_or_path != "default":
        if _is_path(config_name_or_path):
            raise FileNotFoundError(f"Config file not found: {config_name_or_path}")
        search_paths = _get_config_search_paths(config_name_or_path)
        paths_str = "\n  - ".join(search_paths)
        raise FileNotFoundError(
            f"Config '{config_name_or_path}' not found. Searched:\n  - {paths_str}"
        )

    if config_path is not None:
        with open(config_path, encoding="utf-8") as f:
            yaml_data = parse_simple_yaml(f.read())
        _merge_config(config, yaml_data)

    validate_pattern(config.field.group_pattern)
    return config


def _merge_config(config: Config, data: dict):
    """Merge parsed YAML data into a Config object."""
    if not isinstance(data, dict):
        return

    if "field" in data and isinstance(data["field"], dict):
        fc = data["field"]
        if "group_pattern" in fc:
            pattern = fc["group_pattern"]
            if not isinstance(pattern, list):
                raise InvalidPattern(f"group_pattern must be a list, got {pattern!r}")
            config.field.group_pattern = pattern
        if "hint" in fc and fc["hint"] is not None:
            config.field.hint = str(fc["hint"])
        if "incomplete_error" in fc and fc["incomplete_error"] is not None:
            config.field.incomplete_error = str(fc["incomplete_error"])

    if "ui" in data and isinstance(data["ui"], dict):
        ui = data["ui"]
        if "prompt" in ui and ui["prompt"] is not None:
            config.ui.prompt = str(ui["prompt"])


def parse_pattern_arg(value: str) -> list[int]:
    """Parse a comma separated pattern such as '4,6,5'."""
    try:
        pattern = [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise InvalidPattern(f"invalid group pattern: {value!r}") from None
    return list(validate_pattern(pattern))


def get_default_config() -> Config:
    """Return a Config with all default values."""
    return Config()
