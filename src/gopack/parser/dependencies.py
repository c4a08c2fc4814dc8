import re
from pathlib import Path
from typing import List

from gopack.schemas import ImportReference

# Lightweight regex patterns for Go import declarations. Comments inside an
# import block are skipped line by line.
GO_IMPORT_RE = re.compile(r'^\s*import\s+(?:[A-Za-z_.][A-Za-z0-9_]*\s+)?"([^"]+)"', re.MULTILINE)
GO_IMPORT_BLOCK_RE = re.compile(r"^\s*import\s*\((?P<body>.*?)\)", re.MULTILINE | re.DOTALL)
GO_IMPORT_SPEC_RE = re.compile(r'^\s*(?:[A-Za-z_.][A-Za-z0-9_]*\s+)?"([^"]+)"')


def _line_number(content: str, index: int) -> int:
    return content.count("\n", 0, index) + 1


def extract_imports(file_path: Path, content: str) -> List[ImportReference]:
    """
    Extract every import path declared in a Go file, single or grouped.
    """
    imports: List[ImportReference] = []
    file_str = str(file_path)

    for match in GO_IMPORT_RE.finditer(content):
        imports.append(ImportReference(
            module=match.group(1),
            file_path=file_str,
            line=_line_number(content, match.start(1)),
        ))

    for block in GO_IMPORT_BLOCK_RE.finditer(content):
        first_line = _line_number(content, block.start("body"))
        for offset, line in enumerate(block.group("body").splitlines()):
            stripped = line.strip()
            if not stripped or stripped.startswith("//"):
                continue
            spec = GO_IMPORT_SPEC_RE.match(line)
            if spec:
                imports.append(ImportReference(module=spec.group(1), file_path=file_str, line=first_line + offset))

    imports.sort(key=lambda ref: ref.line)
    return imports


def is_remote_import(import_path: str) -> bool:
    """Remote imports start with a host name (first segment holds a dot)."""
    return "." in import_path.split("/", 1)[0]
