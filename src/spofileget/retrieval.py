"""Montagem da requisição de leitura de arquivo na API REST do SharePoint."""

import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote, urlparse

from .exceptions import ValidationError

GUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

# Caracteres que encodeURIComponent não escapa, além de letras, dígitos e "-_."
_URI_COMPONENT_SAFE = "!~*'()"


# =========================================================================
# Localizadores
# =========================================================================


@dataclass(frozen=True)
class FileById:
    """Arquivo identificado pelo UniqueId (GUID)."""

    id: str


@dataclass(frozen=True)
class FileByUrl:
    """Arquivo identificado pela URL relativa ao servidor."""

    url: str


Locator = FileById | FileByUrl


# =========================================================================
# Modos de leitura
# =========================================================================


@dataclass(frozen=True)
class Metadata:
    """Propriedades completas do arquivo."""


@dataclass(frozen=True)
class AsString:
    """Conteúdo do arquivo como texto."""


@dataclass(frozen=True)
class ListItem:
    """Item de lista associado ao arquivo."""


@dataclass(frozen=True)
class SaveToFile:
    """Conteúdo binário salvo em disco."""

    path: Path


RetrievalMode = Metadata | AsString | ListItem | SaveToFile


def encode_uri_component(value: str) -> str:
    """Codifica um valor como o encodeURIComponent do JavaScript."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_request_url(web_url: str, locator: Locator, mode: RetrievalMode) -> str:
    """
    Monta a URL da requisição para um arquivo.

    Args:
        web_url: URL do site (ex: "https://contoso.sharepoint.com/sites/project-x")
        locator: Como o arquivo é identificado (ID ou URL relativa)
        mode: O que deve ser lido do arquivo

    Returns:
        URL completa, incluindo a query string
    """
    web_url = web_url.rstrip("/")

    if isinstance(locator, FileById):
        request_url = f"{web_url}/_api/web/GetFileById('{encode_uri_component(locator.id)}')"
    else:
        request_url = f"{web_url}/_api/web/GetFileByServerRelativePath(DecodedUrl=@f)"

    options = ""
    if isinstance(mode, ListItem):
        options = "?$expand=ListItemAllFields"
    elif isinstance(mode, (AsString, SaveToFile)):
        options = "/$value"

    if isinstance(locator, FileByUrl):
        options += "&" if "?" in options else "?"
        options += f"@f='{encode_uri_component(locator.url)}'"

    return request_url + options


def is_valid_guid(value: str) -> bool:
    """Verifica se o valor é um GUID."""
    return bool(GUID_PATTERN.match(value))


def is_valid_sharepoint_url(url: str) -> bool:
    """Verifica se a URL parece a de um site SharePoint Online."""
    if not url.startswith("https://"):
        return False
    return bool(urlparse(url).hostname)


@dataclass(frozen=True)
class FileRetrieval:
    """Requisição validada: site, arquivo e modo de leitura."""

    web_url: str
    locator: Locator
    mode: RetrievalMode

    @property
    def request_url(self) -> str:
        return build_request_url(self.web_url, self.locator, self.mode)


def validate_options(
    web_url: str | None,
    *,
    id: str | None = None,
    url: str | None = None,
    as_string: bool = False,
    as_list_item: bool = False,
    as_file: bool = False,
    path: str | Path | None = None,
) -> FileRetrieval:
    """
    Valida as opções da linha de comando e monta a requisição.

    Args:
        web_url: URL do site onde o arquivo está
        id: UniqueId (GUID) do arquivo
        url: URL relativa ao servidor do arquivo
        as_string: Ler o conteúdo como texto
        as_list_item: Ler o item de lista associado
        as_file: Salvar o arquivo em disco
        path: Caminho local de destino (obrigatório com as_file)

    Returns:
        FileRetrieval pronto para execução

    Raises:
        ValidationError: Na primeira opção inválida encontrada
    """
    if not web_url:
        raise ValidationError("Required parameter webUrl missing")

    if not is_valid_sharepoint_url(web_url):
        raise ValidationError(f"{web_url} is not a valid SharePoint Online site URL")

    if id and not is_valid_guid(id):
        raise ValidationError(f"{id} is not a valid GUID")

    if id and url:
        raise ValidationError("Specify id or url, but not both")

    if not id and not url:
        raise ValidationError("Specify id or url, one is required")

    if as_file and not path:
        raise ValidationError("The path should be specified when the --asFile option is used")

    if path and not Path(path).parent.is_dir():
        raise ValidationError("Specified path where to save the file does not exist")

    if sum([as_string, as_list_item, as_file]) > 1:
        raise ValidationError(
            "Specify to retrieve the file either as file, list item or string but not multiple"
        )

    locator: Locator = FileById(id) if id else FileByUrl(url)

    mode: RetrievalMode
    if as_file:
        mode = SaveToFile(Path(path))
    elif as_list_item:
        mode = ListItem()
    elif as_string:
        mode = AsString()
    else:
        mode = Metadata()

    return FileRetrieval(web_url=web_url, locator=locator, mode=mode)
