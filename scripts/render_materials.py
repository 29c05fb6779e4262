#!/usr/bin/env python3
"""
Render generated material to DOCX/PDF

Reads a text file written in the generator's markup (**HEADERS**, --- separators,
* bullets, **bold** and plain URLs) and writes one file per requested format,
named the same way the app names its downloads.

Examples:\n

    render_materials.py resume.txt --kind resume --format pdf --format docx

    render_materials.py letter.txt --kind cover_letter --company "Acme Corp" --applicant "Jane Doe"

    render_materials.py answers.txt --kind answers --out-dir out/
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

from materials.activity_log import ActivityLog
from materials.document import DocumentFormat, DocumentKind
from materials.errors import MaterialsError
from materials.pipeline import prepare_download

app = typer.Typer(
    help="Render markup text files to DOCX and PDF documents",
    add_completion=False,
)


@app.command()
def render(
    input_path: Annotated[
        Path,
        typer.Argument(help="Markup text file to render", exists=True, dir_okay=False, readable=True),
    ],
    kind: Annotated[
        DocumentKind,
        typer.Option("--kind", "-k", help="Which material the text is"),
    ] = DocumentKind.RESUME,
    formats: Annotated[
        Optional[List[DocumentFormat]],
        typer.Option("--format", "-f", help="Output format; repeat for several (default: both)"),
    ] = None,
    applicant: Annotated[
        Optional[str],
        typer.Option("--applicant", help="Applicant name used in the file name"),
    ] = None,
    company: Annotated[
        Optional[str],
        typer.Option("--company", help="Company name used in the file name"),
    ] = None,
    out_dir: Annotated[
        Path,
        typer.Option("--out-dir", "-o", help="Directory for the rendered files", file_okay=False),
    ] = Path("."),
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Print activity log entries"),
    ] = False,
):
    """
    Render INPUT_PATH to each requested format.

    Examples:\n

        $ render_materials.py resume.txt -f pdf             # PDF only

        $ render_materials.py resume.txt --company Acme     # Acme_Applicant_Resume.docx/.pdf
    """
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)
    log = ActivityLog()
    content = input_path.read_text(encoding="utf-8")
    out_dir.mkdir(parents=True, exist_ok=True)

    for fmt in formats or list(DocumentFormat):
        try:
            rendered = prepare_download(
                content,
                kind,
                fmt,
                log=log,
                applicant_name=applicant,
                company_name=company,
                settle_delay=0,
            )
        except MaterialsError as e:
            typer.secho(f"Error: {e.detail}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)

        target = out_dir / rendered.file_name
        target.write_bytes(rendered.data)
        typer.secho(f"Wrote {target} ({len(rendered.data)} bytes)", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
