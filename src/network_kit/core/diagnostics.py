"""
Best-effort диагностическая строка тела ответа.

Три независимых уровня:
1. pretty-printed JSON
2. тело как UTF-8 текст
3. фиксированная заглушка

Строка используется только в сообщениях об ошибках.
"""

import json
from typing import Optional

NOT_UTF8_PLACEHOLDER = "Could not convert data to utf8 string"


def pretty_json(payload: Optional[bytes]) -> Optional[str]:
    """
    Уровень 1: распарсить JSON и отформатировать с отступами.

    Returns:
        Отформатированный JSON или None

    Examples:
        >>> pretty_json(b'{"a": 1}')
        '{\\n  "a": 1\\n}'
        >>> pretty_json(b'not json') is None
        True
    """
    try:
        return json.dumps(json.loads(payload or b""), indent=2, ensure_ascii=False)
    except (ValueError, TypeError, RecursionError):
        return None


def raw_text(payload: Optional[bytes]) -> Optional[str]:
    """Уровень 2: строгий UTF-8 decode; None если байты не UTF-8."""
    try:
        return (payload or b"").decode("utf-8")
    except UnicodeDecodeError:
        return None


def json_error_description(payload: Optional[bytes]) -> str:
    """Почему тело не является JSON."""
    try:
        json.loads(payload or b"")
    except UnicodeDecodeError as e:
        return f"{{error: {e.reason}}}"
    except ValueError as e:
        return f"{{error: {e}}}"
    except RecursionError:
        return "{error: nesting too deep}"
    return "{error: unknown}"


def to_json_string(payload: Optional[bytes]) -> str:
    """
    Диагностическая строка для тела ответа.

    Если тело - JSON, возвращается pretty-printed JSON. Иначе -
    описание ошибки парсинга и сырой текст (или заглушка).

    Examples:
        >>> to_json_string(b'{"msg": "not found"}')
        '{\\n  "msg": "not found"\\n}'
        >>> to_json_string(b'not json')
        '{error: Expecting value: line 1 column 1 (char 0)}. Input: not json'
    """
    pretty = pretty_json(payload)
    if pretty is not None:
        return pretty

    text = raw_text(payload)
    if text is None:
        text = NOT_UTF8_PLACEHOLDER
    return f"{json_error_description(payload)}. Input: {text}"
