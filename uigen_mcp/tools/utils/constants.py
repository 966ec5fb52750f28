# Константы для инструментов редактирования

# Количество строк контекста вокруг правки
SNIPPET_LINES = 4

# Лимит длины ответа инструмента
MAX_RESPONSE_LEN = 16000
TRUNCATED_MESSAGE = (
    "<response clipped><NOTE>To save on context only part of this file has been shown to you. "
    "Use `view` with `view_range` to see the rest.</NOTE>"
)

# Глубина вывода для `view` директории
DIRECTORY_VIEW_DEPTH = 2
