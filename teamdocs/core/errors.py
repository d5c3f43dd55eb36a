class PermissionDeniedError(PermissionError):
    """Пользователь не является автором документа и не администратор"""


class VersionConflictError(Exception):
    """Версия документа изменилась с момента чтения"""

    def __init__(self, document_id, expected: int, actual: int):
        super().__init__(
            f"Document {document_id} is at version {actual}, expected {expected}"
        )
        self.document_id = document_id
        self.expected = expected
        self.actual = actual


class UpstreamError(RuntimeError):
    """Ошибка внешнего AI-сервиса или неразборчивый ответ"""
