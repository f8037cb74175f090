"""Bank profile registry.

A registry is built once and never mutated; loading a different profile set
produces a new registry object. Parsers receive the registry explicitly.
"""

from functools import lru_cache
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

from bankimport.domain.entities import (
    ABONO,
    AMOUNT,
    BALANCE,
    CARGO,
    COUNTERPARTY,
    CURRENCY,
    DATE,
    DESCRIPTION,
    REFERENCE,
    VALUE_DATE,
    BankProfile,
)
from bankimport.domain.errors import NotFoundError, ValidationError, profile_not_found

logger = logging.getLogger(__name__)

GENERIC_KEY = "generic"

GENERIC_ALIASES = {
    VALUE_DATE: ("fecha valor", "f valor", "f. valor", "fecha de valor", "value date"),
    DATE: (
        "fecha",
        "fecha operacion",
        "fecha operación",
        "f operacion",
        "f. operación",
        "fecha mov",
        "fecha movimiento",
        "fecha de operacion",
        "fecha de operación",
        "fecha contable",
        "date",
        "operation date",
        "booking date",
        "posting date",
        "transaction date",
        "completed date",
    ),
    CARGO: (
        "cargo",
        "cargos",
        "debito",
        "débito",
        "debe",
        "adeudo",
        "salida",
        "cargo en cuenta",
        "debit",
        "paid out",
        "money out",
        "withdrawal",
    ),
    ABONO: (
        "abono",
        "abonos",
        "credito",
        "crédito",
        "haber",
        "ingreso",
        "entrada",
        "abono en cuenta",
        "credit",
        "paid in",
        "money in",
        "deposit",
    ),
    AMOUNT: (
        "importe",
        "importe (€)",
        "importe eur",
        "importe euros",
        "cantidad",
        "monto",
        "euros",
        "eur",
        "import",
        "amount",
    ),
    DESCRIPTION: (
        "concepto",
        "concepto operacion",
        "concepto operación",
        "descripcion",
        "descripción",
        "descripcion ampliada",
        "detalle",
        "detalle operacion",
        "detalle operación",
        "movimiento",
        "observaciones",
        "motivo",
        "description",
        "details",
        "concept",
    ),
    COUNTERPARTY: (
        "contraparte",
        "contrapartida",
        "beneficiario",
        "ordenante",
        "tercero",
        "counterparty",
        "payee",
        "payer",
    ),
    BALANCE: (
        "saldo",
        "saldo disponible",
        "saldo tras",
        "saldo después",
        "saldo resultante",
        "saldo actual",
        "saldo posterior",
        "saldo final",
        "disponible",
        "balance",
        "running balance",
    ),
    CURRENCY: ("divisa", "moneda", "currency"),
    REFERENCE: (
        "referencia",
        "ref",
        "numero operacion",
        "número operación",
        "num operacion",
        "id operacion",
        "id operación",
        "reference",
    ),
}

# Six matched roles give the generic profile full confidence.
GENERIC_EXPECTED_ROLES = (DATE, VALUE_DATE, DESCRIPTION, AMOUNT, BALANCE, REFERENCE)

BUILTIN_PROFILES = (
    {
        "key": "santander",
        "name": "Banco Santander",
        "header_aliases": {
            DATE: ("Fecha Operación", "Fecha operacion"),
            VALUE_DATE: ("Fecha Valor",),
            DESCRIPTION: ("Concepto",),
            AMOUNT: ("Importe", "Importe EUR"),
            BALANCE: ("Saldo",),
            CURRENCY: ("Divisa",),
        },
    },
    {
        "key": "bbva",
        "name": "BBVA",
        "header_aliases": {
            DATE: ("Fecha",),
            VALUE_DATE: ("F.Valor", "F. Valor"),
            DESCRIPTION: ("Concepto",),
            COUNTERPARTY: ("Movimiento",),
            AMOUNT: ("Importe",),
            BALANCE: ("Disponible",),
            CURRENCY: ("Divisa",),
        },
    },
    {
        "key": "caixabank",
        "name": "CaixaBank",
        "header_aliases": {
            DATE: ("Fecha",),
            VALUE_DATE: ("Fecha valor",),
            DESCRIPTION: ("Movimiento",),
            COUNTERPARTY: ("Más datos",),
            AMOUNT: ("Importe",),
            BALANCE: ("Saldo",),
        },
    },
    {
        "key": "ing",
        "name": "ING",
        "header_aliases": {
            DATE: ("F. Valor",),
            DESCRIPTION: ("Descripción",),
            REFERENCE: ("Comentario",),
            AMOUNT: ("Importe (€)",),
            BALANCE: ("Saldo (€)",),
        },
    },
    {
        "key": "sabadell",
        "name": "Banco Sabadell",
        "header_aliases": {
            DATE: ("F. Operativa",),
            VALUE_DATE: ("F. Valor",),
            DESCRIPTION: ("Concepto",),
            AMOUNT: ("Importe",),
            BALANCE: ("Saldo",),
            REFERENCE: ("Referencia 1",),
        },
    },
    {
        "key": "bankinter",
        "name": "Bankinter",
        "header_aliases": {
            DATE: ("Fecha contable",),
            VALUE_DATE: ("Fecha valor",),
            DESCRIPTION: ("Descripción",),
            AMOUNT: ("Importe",),
            BALANCE: ("Saldo",),
        },
    },
    {
        "key": "unicaja",
        "name": "Unicaja Banco",
        "header_aliases": {
            DATE: ("Fecha",),
            VALUE_DATE: ("Fecha valor",),
            DESCRIPTION: ("Concepto",),
            CARGO: ("Cargo", "Cargos"),
            ABONO: ("Abono", "Abonos"),
            BALANCE: ("Saldo",),
        },
    },
    {
        "key": "revolut",
        "name": "Revolut",
        "date_format": "YYYY-MM-DD",
        "decimal_separator": ".",
        "header_aliases": {
            DATE: ("Completed Date",),
            DESCRIPTION: ("Description",),
            AMOUNT: ("Amount",),
            CURRENCY: ("Currency",),
            BALANCE: ("Balance",),
        },
    },
)


class BankProfileRegistry:
    """Read-only set of known bank profiles plus the generic fallback."""

    def __init__(self, profiles: Iterable[BankProfile], generic: BankProfile):
        """Initialize registry.

        Args:
            profiles: Known bank profiles, in match priority order
            generic: Fallback profile, used when no bank profile fits

        Raises:
            ValidationError: If two profiles share a key
        """
        self._profiles = tuple(profiles)
        self._generic = generic
        keys = [p.key for p in self._profiles] + [generic.key]
        duplicates = sorted({key for key in keys if keys.count(key) > 1})
        if duplicates:
            raise ValidationError(f"Duplicate bank profile key(s): {', '.join(duplicates)}")
        self._by_key = {p.key: p for p in self.all_profiles()}

    @property
    def profiles(self) -> tuple[BankProfile, ...]:
        return self._profiles

    @property
    def generic(self) -> BankProfile:
        return self._generic

    def all_profiles(self) -> tuple[BankProfile, ...]:
        """Known profiles first, generic last."""
        return self._profiles + (self._generic,)

    def get(self, key: str) -> BankProfile:
        """Get profile by key.

        Raises:
            NotFoundError: If no profile has this key
        """
        try:
            return self._by_key[key]
        except KeyError:
            raise NotFoundError(profile_not_found(key))

    def is_generic(self, profile: BankProfile) -> bool:
        return profile.key == self._generic.key

    def __len__(self) -> int:
        return len(self._by_key)

    def __iter__(self):
        return iter(self.all_profiles())


def generic_profile() -> BankProfile:
    """Return the fallback profile with the broad Spanish/English vocabulary."""
    return BankProfile(
        key=GENERIC_KEY,
        name="Generic",
        header_aliases=GENERIC_ALIASES,
        date_format="DD/MM/YYYY",
        decimal_separator=",",
        expected_roles=GENERIC_EXPECTED_ROLES,
    )


def profile_from_dict(data: dict[str, Any]) -> BankProfile:
    """Build a BankProfile from its JSON representation.

    Raises:
        ValidationError: If required keys are missing or values are invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Each bank profile must be a JSON object")
    missing = [name for name in ("key", "header_aliases") if name not in data]
    if missing:
        raise ValidationError(f"Bank profile is missing: {', '.join(missing)}")

    aliases = data["header_aliases"]
    if not isinstance(aliases, dict) or not all(isinstance(v, (list, tuple)) for v in aliases.values()):
        raise ValidationError(f"Profile '{data['key']}' header_aliases must map roles to lists")

    try:
        return BankProfile(
            key=str(data["key"]),
            name=str(data.get("name") or data["key"]),
            header_aliases={role: tuple(str(label) for label in labels) for role, labels in aliases.items()},
            date_format=data.get("date_format", "DD/MM/YYYY"),
            decimal_separator=data.get("decimal_separator", ","),
            header_skip_rows=int(data.get("header_skip_rows", 0)),
            expected_roles=tuple(data.get("expected_roles", ())),
        )
    except ValidationError:
        raise
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid bank profile '{data['key']}': {e}")


def build_registry(profile_data: Iterable[dict[str, Any]], generic: Optional[BankProfile] = None) -> BankProfileRegistry:
    """Build a registry from profile dicts; a "generic" entry replaces the fallback."""
    profiles = []
    for entry in profile_data:
        profile = profile_from_dict(entry)
        if profile.key == GENERIC_KEY:
            generic = profile
        else:
            profiles.append(profile)
    return BankProfileRegistry(profiles, generic or generic_profile())


@lru_cache(maxsize=1)
def default_registry() -> BankProfileRegistry:
    """Return the built-in registry, built once per process."""
    return build_registry(BUILTIN_PROFILES)


def load_registry(path: str | Path) -> BankProfileRegistry:
    """Load a registry from a JSON file of the form {"profiles": [...]}.

    Args:
        path: Path to the JSON document

    Returns:
        A new registry; the built-in generic profile is kept unless the file
        defines one with key "generic"

    Raises:
        NotFoundError: If the file does not exist
        ValidationError: If the document is malformed
    """
    profiles_path = Path(path)
    if not profiles_path.exists():
        raise NotFoundError(f"Bank profiles file not found: {path}")

    try:
        document = json.loads(profiles_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(f"Bank profiles file is not valid JSON: {e}")

    if not isinstance(document, dict) or not isinstance(document.get("profiles"), list):
        raise ValidationError("Bank profiles file must contain a 'profiles' list")

    registry = build_registry(document["profiles"])
    logger.info("Loaded %d bank profile(s) from %s", len(registry.profiles), profiles_path)
    return registry
