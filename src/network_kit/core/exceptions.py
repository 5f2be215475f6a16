"""
Иерархия ошибок network-kit.

Закрытый набор видов ошибок запроса. Все они - значения: резолвер
возвращает их внутри Failure, и только stream-стиль пробрасывает их
как исключения.
"""

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class NetworkRequestError(Exception):
    """
    Базовая ошибка запроса.

    Args:
        detail: Диагностическая строка (статус + best-effort тело ответа)
    """

    kind: str = "network_request_error"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(detail)

    def __eq__(self, other):
        return type(self) is type(other) and self.detail == other.detail

    def __hash__(self):
        return hash((type(self), self.detail))

    def __repr__(self):
        return f"{self.__class__.__name__}({self.detail!r})"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ДО ТРАНСПОРТА
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class BadURLError(NetworkRequestError):
    """URL не прошёл валидацию, запрос не отправлялся."""
    kind = "bad_url"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ПО СТАТУС КОДУ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class BadRequestError(NetworkRequestError):
    """400 и 402-499."""
    kind = "bad_request"

class UnauthorizedError(NetworkRequestError):
    """401 Unauthorized."""
    kind = "unauthorized"

class ServerError(NetworkRequestError):
    """5xx ошибка сервера."""
    kind = "server_error"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОТВЕТ И ДЕКОДИРОВАНИЕ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class NoResponseError(NetworkRequestError):
    """Транспорт не вернул ни ответа, ни ошибки."""
    kind = "no_response"

class UnableToParseDataError(NetworkRequestError):
    """Ответ получен, но тела нет совсем."""
    kind = "unable_to_parse_data"

class InvalidJSONError(NetworkRequestError):
    """
    Тело 2xx ответа не декодируется в целевой тип.

    detail содержит описание ошибки декодирования, маркер " Input:"
    и диагностическую строку тела.
    """
    kind = "invalid_json"

class UnknownError(NetworkRequestError):
    """
    Всё остальное.

    Примеры:
    - Таймаут, DNS, TLS (обмен не завершился)
    - Статус вне 200-599 (1xx, 3xx)
    """
    kind = "unknown"

class ApiError(NetworkRequestError):
    """Ошибка уровня API, зарезервирована для прикладного кода."""
    kind = "api_error"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# КОНФИГУРАЦИЯ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(ValueError):
    """Ошибка конфигурации клиента (не входит в набор ошибок запроса)."""
    pass


ERROR_KINDS = (
    BadURLError,
    BadRequestError,
    UnauthorizedError,
    ServerError,
    NoResponseError,
    UnableToParseDataError,
    InvalidJSONError,
    UnknownError,
    ApiError,
)
