# tailorcraft/core/errors.py
# Доменные исключения. HTTP-коды навешиваются обработчиком в main.py,
# сервисы о FastAPI ничего не знают.


class AppError(Exception):
    """Базовая ошибка приложения."""

    status_code = 500

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationError(AppError):
    """Некорректный ввод клиента, побочных эффектов нет."""

    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class InvalidTransitionError(AppError):
    """Нарушено правило жизненного цикла заказа."""

    status_code = 409


class PersistenceError(AppError):
    """Сбой хранилища. Запись атомарна, операцию можно повторить целиком."""

    status_code = 500


class AuthError(AppError):
    status_code = 401

    def __init__(self, message: str, *, status_code: int = 401) -> None:
        super().__init__(message)
        self.status_code = status_code
