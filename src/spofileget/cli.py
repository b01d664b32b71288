"""Interface de linha de comando para spofileget."""

import argparse
import logging
import sys

from .client import SharePointClient
from .exceptions import SharePointError
from .retrieval import AsString, ListItem, SaveToFile, validate_options
from .utils import (
    OUTPUT_FORMATS,
    RichProgressCallback,
    create_rich_progress,
    format_output,
    format_size,
)

logger = logging.getLogger(__name__)

FILE_GET_EXAMPLES = """\
examples:

  Get file properties for file with id (UniqueId) b2307a39-e878-458b-bc90-03bc578531d6
  located in site https://contoso.sharepoint.com/sites/project-x
    spo file get --webUrl https://contoso.sharepoint.com/sites/project-x --id 'b2307a39-e878-458b-bc90-03bc578531d6'

  Get contents of the file with id (UniqueId) b2307a39-e878-458b-bc90-03bc578531d6
    spo file get --webUrl https://contoso.sharepoint.com/sites/project-x --id 'b2307a39-e878-458b-bc90-03bc578531d6' --asString

  Get list item properties for file with id (UniqueId) b2307a39-e878-458b-bc90-03bc578531d6
    spo file get --webUrl https://contoso.sharepoint.com/sites/project-x --id 'b2307a39-e878-458b-bc90-03bc578531d6' --asListItem

  Save file with id (UniqueId) b2307a39-e878-458b-bc90-03bc578531d6 to local file
  /Users/user/documents/SavedAsTest1.docx
    spo file get --webUrl https://contoso.sharepoint.com/sites/project-x --id 'b2307a39-e878-458b-bc90-03bc578531d6' --asFile --path /Users/user/documents/SavedAsTest1.docx

  Return file properties for file with server-relative url /sites/project-x/documents/Test1.docx
    spo file get --webUrl https://contoso.sharepoint.com/sites/project-x --url '/sites/project-x/documents/Test1.docx'

  Return file as string for file with server-relative url /sites/project-x/documents/Test1.docx
    spo file get --webUrl https://contoso.sharepoint.com/sites/project-x --url '/sites/project-x/documents/Test1.docx' --asString

  Return list item properties for file with server-relative url /sites/project-x/documents/Test1.docx
    spo file get --webUrl https://contoso.sharepoint.com/sites/project-x --url '/sites/project-x/documents/Test1.docx' --asListItem

  Save file with server-relative url /sites/project-x/documents/Test1.docx to local file
  /Users/user/documents/SavedAsTest1.docx
    spo file get --webUrl https://contoso.sharepoint.com/sites/project-x --url '/sites/project-x/documents/Test1.docx' --asFile --path /Users/user/documents/SavedAsTest1.docx
"""


def configure_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configura o logging da CLI em stderr."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr, force=True)
    # httpx loga cada requisição em INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)


def get_client(web_url: str) -> SharePointClient:
    """Cria cliente SharePoint com credenciais do ambiente."""
    try:
        return SharePointClient(web_url)
    except SharePointError as e:
        print(f"Authentication error: {e}", file=sys.stderr)
        print("\nSet the environment variables:", file=sys.stderr)
        print("  export MICROSOFT_CLIENT_ID='...'", file=sys.stderr)
        print("  export MICROSOFT_TENANT_ID='...'", file=sys.stderr)
        print("  export MICROSOFT_CLIENT_SECRET='...'", file=sys.stderr)
        print("or, for certificate authentication:", file=sys.stderr)
        print("  export MICROSOFT_CERTIFICATE_PATH='...'", file=sys.stderr)
        print("  export MICROSOFT_CERTIFICATE_THUMBPRINT='...'", file=sys.stderr)
        sys.exit(1)


def cmd_file_get(args: argparse.Namespace) -> None:
    """Obtém um arquivo: propriedades, item de lista, texto ou cópia local."""
    retrieval = validate_options(
        args.web_url,
        id=args.id,
        url=args.url,
        as_string=args.as_string,
        as_list_item=args.as_list_item,
        as_file=args.as_file,
        path=args.path,
    )

    logger.info("Retrieving file from site %s...", retrieval.web_url)
    client = get_client(retrieval.web_url)
    mode = retrieval.mode

    if isinstance(mode, SaveToFile):
        with create_rich_progress() as progress:
            task_id = progress.add_task("Downloading", total=None)
            saved = client.download_file(
                retrieval.request_url,
                mode.path,
                progress_callback=RichProgressCallback(progress, task_id),
            )
        print(f"File saved at {saved} ({format_size(saved.stat().st_size)})")
        return

    data = client.get_file(retrieval.request_url, as_text=isinstance(mode, AsString))

    if isinstance(mode, AsString):
        print(data)
    elif isinstance(mode, ListItem):
        print(format_output(data.get("ListItemAllFields"), args.output))
    else:
        print(format_output(data, args.output))


def create_parser() -> argparse.ArgumentParser:
    """Cria parser de argumentos."""
    parser = argparse.ArgumentParser(
        prog="spo",
        description="SharePoint Online file commands",
    )

    # Argumentos globais
    parser.add_argument("--verbose", action="store_true", help="Show progress messages")
    parser.add_argument("--debug", action="store_true", help="Show debug messages")
    parser.add_argument(
        "--output",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format (default: text)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # file
    file_parser = subparsers.add_parser("file", help="Manage files")
    file_subparsers = file_parser.add_subparsers(dest="file_command")

    # file get
    sp = file_subparsers.add_parser(
        "get",
        help="Gets information about the specified file",
        description="Gets information about the specified file",
        epilog=FILE_GET_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sp.add_argument(
        "-w", "--webUrl",
        dest="web_url",
        help="The URL of the site where the file is located",
    )
    sp.add_argument(
        "-u", "--url",
        help="The server-relative URL of the file to retrieve. "
        "Specify either url or id but not both",
    )
    sp.add_argument(
        "-i", "--id",
        help="The UniqueId (GUID) of the file to retrieve. Specify either url or id but not both",
    )
    sp.add_argument(
        "--asString",
        dest="as_string",
        action="store_true",
        help="Set to retrieve the contents of the specified file as string",
    )
    sp.add_argument(
        "--asListItem",
        dest="as_list_item",
        action="store_true",
        help="Set to retrieve the underlying list item",
    )
    sp.add_argument(
        "--asFile",
        dest="as_file",
        action="store_true",
        help="Set to save the file to the path specified in the path option",
    )
    sp.add_argument(
        "-p", "--path",
        help="The local path where to save the retrieved file. "
        "Must be specified when the --asFile option is used",
    )
    sp.set_defaults(func=cmd_file_get)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Ponto de entrada da CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "func", None):
        parser.print_help()
        sys.exit(0)

    configure_logging(verbose=args.verbose, debug=args.debug)

    try:
        args.func(args)
    except SharePointError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nCancelled by user.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
