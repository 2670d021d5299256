class ImgResizerError(Exception):
    """Базовое исключение imgResizer"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class OptionError(ImgResizerError):
    """Некорректные аргументы командной строки"""

    def __init__(self, message: str):
        super().__init__(message)


class ResizeError(ImgResizerError):
    """Изображение не удалось загрузить, изменить или сохранить"""

    def __init__(self, message: str):
        super().__init__(message)


class WatchSetupError(ImgResizerError):
    """Не удалось подготовить папки или запустить наблюдение"""

    def __init__(self, message: str):
        super().__init__(message)
