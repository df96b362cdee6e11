"""Contract extraction: schema literals, type declarations and JSON schemas."""

import asyncio
import json
import logging
import re
from pathlib import Path, PurePosixPath

from quarry.catalog import CONTRACT_PATTERNS, TYPE_PATTERNS
from quarry.exceptions import SchemaParseError
from quarry.extractors.literals import parse_literal
from quarry.extractors.text import find_block_end, leading_doc_comment, mask_comments
from quarry.files import scan
from quarry.models import ContractAnalysis

logger = logging.getLogger(__name__)

SCHEMA_SUFFIX = "Schema"

# export const OrderSchema = { ... }  (optionally type-annotated)
_SCHEMA_LITERAL = re.compile(
    rf"export\s+const\s+(\w+{SCHEMA_SUFFIX})\s*(?::\s*[^=;]+?)?\s*=\s*(?=\{{)"
)
_EXPORTED_TYPE = re.compile(r"export\s+(?:type|interface)\s+(\w+)")
_INTERFACE = re.compile(r"export\s+interface\s+(\w+)\b")
_TYPE_ALIAS = re.compile(r"export\s+type\s+(\w+)\s*(?:<[^=;]*>)?\s*=\s*(?=\{)")


def contract_name(identifier: str) -> str:
    """Strip the conventional schema suffix: ``OrderSchema`` -> ``Order``."""
    return identifier.removesuffix(SCHEMA_SUFFIX) or identifier


def extract_schema_literals(relative: str, content: str) -> list[ContractAnalysis]:
    """Find exported ``*Schema`` object literals and parse them.

    A literal that cannot be parsed is skipped on its own; later literals in
    the same file are still extracted.
    """
    code = mask_comments(content)
    types = [match.group(1) for match in _EXPORTED_TYPE.finditer(code)]
    contracts = []

    for match in _SCHEMA_LITERAL.finditer(code):
        identifier = match.group(1)
        end = find_block_end(content, match.end())
        if end is None:
            logger.warning("Unterminated schema literal %s in %s", identifier, relative)
            continue

        try:
            schema = parse_literal(content[match.end() : end])
        except SchemaParseError as e:
            logger.warning("Failed to parse schema %s in %s: %s", identifier, relative, e)
            continue

        contracts.append(
            ContractAnalysis(
                name=contract_name(identifier),
                file=relative,
                schema=schema,
                description=leading_doc_comment(content, match.start()),
                types=types,
            )
        )

    return contracts


def _interface_body(code: str, start: int) -> int | None:
    """Index of the brace opening an interface body, past any generic parameters."""
    depth = 0
    i = start
    while i < len(code):
        ch = code[i]
        if ch == "<":
            depth += 1
        elif ch == ">" and depth:
            depth -= 1
        elif ch == "{":
            if not depth:
                return i
            # Object type inside a generic constraint or default
            end = find_block_end(code, i)
            if end is None:
                return None
            i = end
            continue
        elif ch == ";" and not depth:
            return None
        i += 1
    return None


def extract_type_declarations(relative: str, content: str) -> list[ContractAnalysis]:
    """Emit one contract per exported interface or object type alias."""
    code = mask_comments(content)
    declarations = []
    for match in _INTERFACE.finditer(code):
        body = _interface_body(code, match.end())
        if body is not None:
            declarations.append((match.start(), body, match.group(1), "interface"))
    for match in _TYPE_ALIAS.finditer(code):
        declarations.append((match.start(), match.end(), match.group(1), "type"))
    declarations.sort()

    contracts = []
    for start, body, name, kind in declarations:
        end = find_block_end(code, body)
        if end is None:
            logger.warning("Unterminated %s %s in %s", kind, name, relative)
            continue

        contracts.append(
            ContractAnalysis(
                name=name,
                file=relative,
                schema={"type": kind, "definition": content[start:end]},
                description=leading_doc_comment(content, start),
                types=[name],
            )
        )

    return contracts


def _name_from_path(relative: str) -> str:
    stem = PurePosixPath(relative).name.split(".")[0]
    stem = contract_name(stem)
    return stem[:1].upper() + stem[1:]


def extract_json_contract(relative: str, content: str) -> list[ContractAnalysis]:
    """Treat a JSON contract file as one schema document."""
    try:
        document = json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse JSON contract %s: %s", relative, e)
        return []

    if not isinstance(document, dict):
        return []

    title = document.get("title")
    if isinstance(title, str) and title.strip():
        name = title.strip()
    else:
        name = _name_from_path(relative)

    description = document.get("description")
    return [
        ContractAnalysis(
            name=name,
            file=relative,
            schema=document,
            description=description.strip() if isinstance(description, str) else None,
        )
    ]


def extract_contract_file(relative: str, content: str) -> list[ContractAnalysis]:
    """Extract from a file in the contracts directory.

    Source files try schema literals first and fall back to type
    declarations when none are found.
    """
    if relative.endswith(".json"):
        return extract_json_contract(relative, content)
    return extract_schema_literals(relative, content) or extract_type_declarations(
        relative, content
    )


async def analyze_contracts(root: Path) -> list[ContractAnalysis]:
    """Collect data contracts from the contracts directory and type modules.

    Args:
        root: Project root directory.

    Returns:
        Contracts with root-relative file paths.
    """
    from_contracts, from_types = await asyncio.gather(
        scan(root, CONTRACT_PATTERNS, extract_contract_file),
        scan(root, TYPE_PATTERNS, extract_type_declarations),
    )
    return from_contracts + from_types
