"""FADN CSV — parsing the FADN crop code dictionary.

Invariants:
    - Header names are matched case-insensitively and in any column order
    - Every parsed product is agricultural
    - A bad row aborts the whole parse with the offending line number
"""

import csv
import io
from dataclasses import dataclass

from farmdata.core.domain_types import ProductType
from farmdata.core.errors import InvalidInputError

REQUIRED_COLUMNS = ("fadn code", "crop description", "arable")

_TRUE = {"true", "1", "yes", "y"}
_FALSE = {"false", "0", "no", "n", ""}


@dataclass(frozen=True)
class FADNProductRow:
    fadn_identifier: str
    description: str
    arable: bool
    product_type: ProductType = ProductType.AGRICULTURAL


def parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def parse_fadn_products(text: str) -> list[FADNProductRow]:
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header is None:
        raise InvalidInputError("FADN CSV is empty", field="file")
    columns = [h.strip().lower() for h in header]
    missing = [c for c in REQUIRED_COLUMNS if c not in columns]
    if missing:
        raise InvalidInputError(
            f"FADN CSV header is missing columns: {', '.join(missing)}", field="file",
        )
    index = {name: columns.index(name) for name in REQUIRED_COLUMNS}

    rows: list[FADNProductRow] = []
    for line_number, row in enumerate(reader, start=2):
        if not any(cell.strip() for cell in row):
            continue
        try:
            identifier = row[index["fadn code"]].strip()
            description = row[index["crop description"]].strip()
            arable = parse_bool(row[index["arable"]])
        except (IndexError, ValueError) as e:
            raise InvalidInputError(f"FADN CSV line {line_number}: {e}", field="file") from e
        if not identifier:
            raise InvalidInputError(
                f"FADN CSV line {line_number}: empty fadn code", field="file",
            )
        rows.append(FADNProductRow(identifier, description, arable))
    return rows
