from .models import ServerStatus

__all__ = ["ServerStatus"]
