from app.models.token import Token

__all__ = [
    "Token",
]
