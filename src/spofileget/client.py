"""Cliente SharePoint usando a API REST do SharePoint Online."""

import logging
import os
import time
from pathlib import Path
from typing import Any, Callable
from urllib.parse import urlparse

import httpx
from msal import ConfidentialClientApplication

from .exceptions import (
    AuthenticationError,
    DownloadError,
    FileNotFoundError,
    RequestError,
)

logger = logging.getLogger(__name__)


def extract_error_message(response: httpx.Response) -> str:
    """
    Extrai a mensagem de erro de uma resposta OData.

    Aceita os formatos nometadata (``odata.error``), verbose (``error``)
    e OAuth (``error_description``).

    Args:
        response: Resposta com status de erro

    Returns:
        Mensagem legível para o usuário
    """
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error = payload.get("odata.error") or payload.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, dict) and message.get("value"):
                return message["value"]
            if isinstance(message, str) and message:
                return message
        if payload.get("error_description"):
            return payload["error_description"]

    return response.reason_phrase or f"HTTP {response.status_code}"


class SharePointClient:
    """Cliente para ler arquivos de um site SharePoint via REST."""

    ACCEPT = "application/json;odata=nometadata"

    def __init__(
        self,
        web_url: str,
        client_id: str | None = None,
        client_secret: str | None = None,
        tenant_id: str | None = None,
        certificate_path: str | None = None,
        certificate_thumbprint: str | None = None,
        timeout: float = 60.0,
        download_timeout: float = 120.0,
    ):
        """
        Inicializa o cliente SharePoint.

        Args:
            web_url: URL do site SharePoint
            client_id: ID do aplicativo Azure AD (ou env MICROSOFT_CLIENT_ID)
            client_secret: Secret do aplicativo (ou env MICROSOFT_CLIENT_SECRET)
            tenant_id: ID do tenant Azure AD (ou env MICROSOFT_TENANT_ID)
            certificate_path: Chave privada PEM (ou env MICROSOFT_CERTIFICATE_PATH)
            certificate_thumbprint: Thumbprint do certificado
                (ou env MICROSOFT_CERTIFICATE_THUMBPRINT)
            timeout: Timeout das requisições de metadados, em segundos
            download_timeout: Timeout dos downloads, em segundos

        Raises:
            AuthenticationError: Se as credenciais não estiverem configuradas
        """
        self.web_url = web_url
        self.client_id = client_id or os.getenv("MICROSOFT_CLIENT_ID")
        self.client_secret = client_secret or os.getenv("MICROSOFT_CLIENT_SECRET")
        self.tenant_id = tenant_id or os.getenv("MICROSOFT_TENANT_ID")
        self.certificate_path = certificate_path or os.getenv("MICROSOFT_CERTIFICATE_PATH")
        self.certificate_thumbprint = certificate_thumbprint or os.getenv(
            "MICROSOFT_CERTIFICATE_THUMBPRINT"
        )
        self.timeout = timeout
        self.download_timeout = download_timeout

        has_certificate = bool(self.certificate_path and self.certificate_thumbprint)
        if not all([self.client_id, self.tenant_id]) or not (
            self.client_secret or has_certificate
        ):
            raise AuthenticationError(
                "Credentials not configured. Set MICROSOFT_CLIENT_ID, MICROSOFT_TENANT_ID "
                "and either MICROSOFT_CLIENT_SECRET or MICROSOFT_CERTIFICATE_PATH with "
                "MICROSOFT_CERTIFICATE_THUMBPRINT."
            )

        self._access_token: str | None = None
        self._token_expires_at: float = 0
        self._app: ConfidentialClientApplication | None = None

    @property
    def scopes(self) -> list[str]:
        """Escopo do token: o host do tenant SharePoint."""
        return [f"https://{urlparse(self.web_url).hostname}/.default"]

    def _get_credential(self) -> str | dict[str, str]:
        if self.client_secret:
            return self.client_secret
        try:
            private_key = Path(self.certificate_path).read_text()
        except OSError as e:
            raise AuthenticationError(f"Cannot read certificate: {e}") from e
        return {
            "private_key": private_key,
            "thumbprint": self.certificate_thumbprint,
        }

    def _get_app(self) -> ConfidentialClientApplication:
        """Retorna instância do MSAL app."""
        if self._app is None:
            authority = f"https://login.microsoftonline.com/{self.tenant_id}"
            self._app = ConfidentialClientApplication(
                client_id=self.client_id,
                client_credential=self._get_credential(),
                authority=authority,
            )
        return self._app

    def _get_token(self) -> str:
        """Obtém token de acesso para o SharePoint com cache."""
        # Verifica se o token ainda é válido (com margem de 5 minutos)
        if self._access_token and time.time() < self._token_expires_at - 300:
            return self._access_token

        app = self._get_app()
        result = app.acquire_token_for_client(scopes=self.scopes)

        if "access_token" not in result:
            error = result.get("error_description", result.get("error", "Unknown error"))
            raise AuthenticationError(f"Failed to acquire token: {error}")

        self._access_token = result["access_token"]
        self._token_expires_at = time.time() + result.get("expires_in", 3600)
        return self._access_token

    def _get_headers(self) -> dict[str, str]:
        """Retorna headers para requisições à API."""
        return {
            "Authorization": f"Bearer {self._get_token()}",
            "accept": self.ACCEPT,
        }

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return

        message = extract_error_message(response)
        if response.status_code == 404:
            raise FileNotFoundError(message)
        raise RequestError(message, status_code=response.status_code)

    # =========================================================================
    # Arquivos
    # =========================================================================

    def get_file(self, request_url: str, as_text: bool = False) -> Any:
        """
        Lê metadados ou conteúdo de um arquivo.

        Args:
            request_url: URL montada por build_request_url
            as_text: Retornar o corpo como texto em vez de JSON

        Returns:
            Texto do arquivo ou propriedades decodificadas do JSON

        Raises:
            FileNotFoundError: Se o arquivo não existir
            RequestError: Se o serviço responder com erro
        """
        logger.debug("GET %s", request_url)

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(request_url, headers=self._get_headers())
        except httpx.HTTPError as e:
            raise RequestError(f"Request failed: {e}") from e

        self._raise_for_status(response)

        if as_text:
            return response.text

        try:
            return response.json()
        except ValueError as e:
            raise RequestError(
                f"Invalid JSON response: {e}", status_code=response.status_code
            ) from e

    def download_file(
        self,
        request_url: str,
        destination: str | Path,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> Path:
        """
        Baixa o conteúdo binário de um arquivo para o disco.

        Args:
            request_url: URL montada por build_request_url (terminada em /$value)
            destination: Caminho local de destino
            progress_callback: Callback para progresso (bytes_downloaded, total_bytes)

        Returns:
            Path do arquivo baixado

        Raises:
            FileNotFoundError: Se o arquivo não existir
            DownloadError: Se houver erro no download
        """
        destination = Path(destination)
        partial = destination.with_name(f"{destination.name}.part")
        logger.debug("GET %s -> %s", request_url, destination)

        try:
            with httpx.Client(follow_redirects=True, timeout=self.download_timeout) as client:
                with client.stream("GET", request_url, headers=self._get_headers()) as response:
                    if not response.is_success:
                        response.read()
                        if response.status_code == 404:
                            raise FileNotFoundError(extract_error_message(response))
                        raise DownloadError(extract_error_message(response))

                    total_size = int(response.headers.get("content-length", 0))
                    downloaded = 0

                    # Baixa num arquivo temporário; o destino só é trocado no fim
                    with open(partial, "wb") as f:
                        for chunk in response.iter_bytes(chunk_size=8192):
                            f.write(chunk)
                            downloaded += len(chunk)
                            if progress_callback and total_size:
                                progress_callback(downloaded, total_size)

            partial.replace(destination)

        except httpx.HTTPError as e:
            partial.unlink(missing_ok=True)
            raise DownloadError(f"Error downloading file: {e}") from e
        except OSError as e:
            partial.unlink(missing_ok=True)
            raise DownloadError(f"Error writing file: {e}") from e

        logger.debug("Wrote %d bytes to %s", downloaded, destination)
        return destination
