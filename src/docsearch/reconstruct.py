"""Reconstruction of full item records from column-oriented index data.

The raw layout spreads a single item over several parallel columns and
only stores a module path when it changes from the previous item. This
module zips the columns back together, carries the path forward and turns
the 1-based parent references into plain indexes. It is identical for all
index epochs.
"""
from __future__ import annotations

from docsearch.errors import ShapeMismatch
from docsearch.item_types import ItemKind, item_kind
from docsearch.types import PackageIndex, RawItemColumns, ResolvedItem


def _check_columns(columns: RawItemColumns) -> None:
    n = len(columns.type_codes)
    lengths = {
        "names": len(columns.names),
        "descriptions": len(columns.descriptions),
        "parent references": len(columns.parent_refs),
    }
    for column, length in lengths.items():
        if length != n:
            raise ShapeMismatch(f"{column} column has {length} entries, expected {n}")

    out_of_range = sorted(pos for pos in columns.path_delta if not 0 <= pos < n)
    if out_of_range:
        raise ShapeMismatch(
            f"path entry for position {out_of_range[0]} is outside 0..{n}",
        )


def resolve_parent_index(parent_ref: int, table_size: int) -> int | None:
    """Map a 1-based parent reference to a parent table index.

    ``0`` means "no parent". Any other reference must point into the table.
    """
    if parent_ref == 0:
        return None
    index = parent_ref - 1
    if not 0 <= index < table_size:
        raise ShapeMismatch(
            f"parent reference {parent_ref} is outside the parent table of {table_size}",
        )
    return index


def reconstruct(name: str, columns: RawItemColumns) -> PackageIndex:
    """Build the ``PackageIndex`` for one package.

    Raises:
        ShapeMismatch: column lengths differ, or a path position or parent
            reference is out of range.
        UnknownItemKind: a type code is not a defined item kind.
    """
    _check_columns(columns)

    parent_table: tuple[tuple[ItemKind, str], ...] = tuple(
        (item_kind(code), parent_name) for code, parent_name in columns.parent_table
    )

    items: list[ResolvedItem] = []
    path = ""
    for pos, (code, item_name, desc, parent_ref) in enumerate(
        zip(
            columns.type_codes,
            columns.names,
            columns.descriptions,
            columns.parent_refs,
            strict=True,
        ),
    ):
        path = columns.path_delta.get(pos, path)
        items.append(ResolvedItem(
            kind=item_kind(code),
            name=item_name,
            path=path,
            description=desc,
            parent_index=resolve_parent_index(parent_ref, len(parent_table)),
        ))

    return PackageIndex(
        name=name,
        doc=columns.doc,
        items=tuple(items),
        parent_table=parent_table,
    )
