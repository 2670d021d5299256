"""imgResizer: изменение размера одного изображения или всех файлов из папки."""

__version__ = "0.1.0"

PROGRAM_NAME = "imgResizer"
