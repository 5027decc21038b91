"""
Focusboard - Dashboard Errors
Иерархия ошибок сервиса и их HTTP-коды
"""

class DashboardError(Exception):
    """Базовое исключение дашборда"""
    status_code = 500

    def __init__(self, message: str = "internal error"):
        super().__init__(message)
        self.message = message

class Unauthenticated(DashboardError):
    """Нет действующей сессии"""
    status_code = 401

    def __init__(self, message: str = "unauthorized"):
        super().__init__(message)

class ValidationError(DashboardError):
    """Некорректный или неполный запрос"""
    status_code = 400

class NotFoundOrForbidden(DashboardError):
    """Запись не найдена или принадлежит другому пользователю.

    Мутации по чужим/отсутствующим записям завершаются успешно без изменений,
    поэтому наружу это исключение не выбрасывается.
    """
    status_code = 404

class StorageUnavailable(DashboardError):
    """Хранилище недоступно или отклонило запрос"""
    status_code = 503

    def __init__(self, message: str = "storage unavailable"):
        super().__init__(message)
