"""Route identity — normalization and duplicate-key derivation for imported rows.

Two stored routes are "the same" when every identity field matches after
normalization; price is deliberately not part of the identity so a re-import
with a new price can overwrite the stored one.

Normalization rules:
    - identity strings are trimmed and upper-cased
    - route_type is trimmed but keeps the case it was supplied with
    - price is parsed as a number, falling back to 0
    - name is derived as "{origin}/{destination}"

The identity key is never hashed: ``identity_filter`` returns the full set of
normalized fields so it can be used directly as an exact-match query.
"""

from dataclasses import dataclass, field
from typing import Any

from routedesk.database import Base
from routedesk.models.ptyss_route import PTYSSRoute
from routedesk.models.shipping_route import RouteStatus
from routedesk.models.trucking_route import TruckingRoute
from routedesk.utils.row_fields import (
    FieldDef,
    coerce_price,
    coerce_text,
    coerce_upper,
)


@dataclass(frozen=True)
class RouteFamily:
    """One importable route collection and the shape of its rows."""
    key: str
    label: str
    model: type[Base]
    fields: tuple[FieldDef, ...]

    @property
    def identity_fields(self) -> tuple[str, ...]:
        return ("name",) + tuple(
            fd.db_field for fd in self.fields if fd.db_field != "price"
        )


@dataclass
class NormalizedRow:
    values: dict[str, Any] = field(default_factory=dict)
    problems: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.problems


# ── Family definitions ──────────────────────────────────────

TRUCKING_FIELDS = (
    FieldDef(column="origin", db_field="origin", required=True, coerce=coerce_upper),
    FieldDef(column="destination", db_field="destination", required=True, coerce=coerce_upper),
    FieldDef(column="containerType", db_field="container_type", required=True,
             coerce=coerce_upper, aliases=("tipo", "container_type")),
    FieldDef(column="routeType", db_field="route_type", required=True,
             coerce=coerce_text, aliases=("billing", "route_type")),
    FieldDef(column="status", db_field="status", required=True, coerce=coerce_upper),
    FieldDef(column="client", db_field="client", required=True,
             coerce=coerce_upper, aliases=("cliente",)),
    FieldDef(column="routeArea", db_field="route_area", required=True,
             coerce=coerce_upper, aliases=("route_area",)),
    FieldDef(column="containerSize", db_field="container_size",
             coerce=coerce_upper, aliases=("sizeContenedor", "container_size")),
    FieldDef(column="price", db_field="price", required=True,
             coerce=coerce_price, aliases=("rate",)),
)

PTYSS_FIELDS = (
    FieldDef(column="from", db_field="origin", required=True,
             coerce=coerce_upper, aliases=("origin",)),
    FieldDef(column="to", db_field="destination", required=True,
             coerce=coerce_upper, aliases=("destination",)),
    FieldDef(column="containerType", db_field="container_type", required=True,
             coerce=coerce_upper, aliases=("container_type",)),
    FieldDef(column="routeType", db_field="route_type", required=True,
             coerce=coerce_text, aliases=("route_type",)),
    FieldDef(column="status", db_field="status", required=True, coerce=coerce_upper),
    FieldDef(column="client", db_field="client", required=True,
             coerce=coerce_upper, aliases=("cliente",)),
    FieldDef(column="routeArea", db_field="route_area", required=True,
             coerce=coerce_upper, aliases=("route_area",)),
    FieldDef(column="price", db_field="price", required=True, coerce=coerce_price),
)

TRUCKING = RouteFamily(
    key="trucking", label="trucking route", model=TruckingRoute, fields=TRUCKING_FIELDS,
)
PTYSS = RouteFamily(
    key="ptyss", label="PTYSS route", model=PTYSSRoute, fields=PTYSS_FIELDS,
)

ROUTE_FAMILIES: dict[str, RouteFamily] = {f.key: f for f in (TRUCKING, PTYSS)}

_STATUS_VALUES = {s.value for s in RouteStatus}


def get_family(key: str) -> RouteFamily:
    try:
        return ROUTE_FAMILIES[key.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown route family '{key}' (expected one of {', '.join(ROUTE_FAMILIES)})"
        ) from None


def route_name(origin: str, destination: str) -> str:
    return f"{origin}/{destination}"


def normalize_row(family: RouteFamily, raw_row: dict[str, Any]) -> NormalizedRow:
    """Coerce a raw row into model values and collect validation problems.

    Problems name the canonical column, e.g. "missing fields (client, price)".
    """
    result = NormalizedRow()
    missing: list[str] = []

    for fd in family.fields:
        value = fd.coerce(fd.read(raw_row)) if fd.coerce else fd.read(raw_row)
        result.values[fd.db_field] = value

        if fd.db_field == "price":
            if value <= 0:
                missing.append(fd.column)
        elif fd.required and not value:
            missing.append(fd.column)

    if missing:
        result.problems.append(f"missing fields ({', '.join(missing)})")

    status = result.values.get("status")
    if status and status not in _STATUS_VALUES:
        result.problems.append(
            f"invalid status '{status}' (expected one of {', '.join(sorted(_STATUS_VALUES))})"
        )

    result.values["name"] = route_name(
        result.values.get("origin", ""), result.values.get("destination", "")
    )
    return result


def identity_filter(family: RouteFamily, values: dict[str, Any]) -> dict[str, Any]:
    """Exact-match filter over every identity field (price excluded)."""
    return {name: values[name] for name in family.identity_fields}


def identity_key(family: RouteFamily, values: dict[str, Any]) -> tuple:
    """Ordered identity tuple, used to group stored rows when deduplicating."""
    return tuple(values[name] for name in family.identity_fields)
