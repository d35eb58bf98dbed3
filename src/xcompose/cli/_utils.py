"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List

import yaml

from xcompose.core.exceptions import EmptyInputError, InvalidDocumentError
from xcompose.core.utils.io import read_yaml_documents


def get_repo_root(args: argparse.Namespace) -> Path:
    """Get repository root from ``--repo-root`` or the working directory."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return Path.cwd().resolve()


def load_yaml_documents(path: str) -> List[Any]:
    """Load every non-empty document of ``path``; ``-`` reads stdin."""
    if path == "-":
        return [doc for doc in yaml.safe_load_all(sys.stdin) if doc is not None]
    return read_yaml_documents(Path(path))


def load_yaml_objects(path: str) -> List[Dict[str, Any]]:
    """Load every document of a YAML file, requiring each to be a mapping.

    Raises:
        InvalidDocumentError: A document is a list or scalar.
    """
    docs = load_yaml_documents(path)
    for index, doc in enumerate(docs):
        if not isinstance(doc, dict):
            raise InvalidDocumentError(
                f"document {index} in {path} is not a YAML object",
                context={"path": str(path), "index": index, "type": type(doc).__name__},
            )
    return docs


def load_yaml_document(path: str) -> Dict[str, Any]:
    """Load the first document of a YAML file.

    Raises:
        EmptyInputError: The file holds no document.
        InvalidDocumentError: A document is not a mapping.
    """
    docs = load_yaml_objects(path)
    if not docs:
        raise EmptyInputError(f"no YAML object found in {path}", context={"path": str(path)})
    return docs[0]


__all__ = ["get_repo_root", "load_yaml_document", "load_yaml_documents", "load_yaml_objects"]
