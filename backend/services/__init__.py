# Services are imported lazily so the CLI size-lock path does not pull in the
# Gemini SDK. Import specific services where needed:
# from services.gemini_generator import GeminiImageGenerator
# from services.size_lock import reencode

__all__ = []
