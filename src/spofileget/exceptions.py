"""Exceções customizadas para spofileget."""


class SharePointError(Exception):
    """Erro base para operações SharePoint."""

    pass


class ValidationError(SharePointError):
    """Opções inválidas, detectadas antes de qualquer requisição."""

    pass


class AuthenticationError(SharePointError):
    """Erro de autenticação com o SharePoint."""

    pass


class FileNotFoundError(SharePointError):
    """Arquivo não encontrado no SharePoint."""

    pass


class RequestError(SharePointError):
    """O serviço respondeu com erro."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DownloadError(SharePointError):
    """Erro ao baixar arquivo."""

    pass
