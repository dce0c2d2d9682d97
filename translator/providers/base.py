class TranslationError(Exception):
    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class TranslationProvider:
    name = "base"

    def translate_text(self, text: str, source_language: str, target_language: str) -> str:
        raise NotImplementedError(
            "subclasses of TranslationProvider must provide a translate_text() method"
        )

    def close(self):
        pass

    def __str__(self):
        return self.name
