"""Reference part catalog."""

import logging
from dataclasses import dataclass

from beymeta.models import (
    ASSIST_BLADE,
    BIT,
    BLADE,
    CATEGORIES,
    LINES,
    LOCKCHIP,
    RATCHET,
    AssistBlade,
    Bit,
    Blade,
    Lockchip,
    PartEntry,
    Ratchet,
)
from beymeta.util import CatalogError

logger = logging.getLogger(__name__)

# Data store column names per category (logical names are accepted too)
_NAME_COLUMNS = {
    BLADE: ("Blades", "Blade", "name"),
    RATCHET: ("Ratchet", "name"),
    BIT: ("Bit", "name"),
    LOCKCHIP: ("Lockchip", "name"),
    ASSIST_BLADE: ("Assist Blade", "AssistBlade", "name"),
}
_LINE_COLUMNS = ("Line", "line")
_ALIAS_COLUMNS = ("Shortcut", "alias")


def _column(row: dict, candidates: tuple[str, ...]) -> str:
    for key in candidates:
        val = row.get(key)
        if val:
            return str(val).strip()
    return ""


@dataclass(frozen=True)
class Catalog:
    blades: tuple[Blade, ...] = ()
    ratchets: tuple[Ratchet, ...] = ()
    bits: tuple[Bit, ...] = ()
    lockchips: tuple[Lockchip, ...] = ()
    assist_blades: tuple[AssistBlade, ...] = ()

    @classmethod
    def from_rows(
        cls,
        blades: list[dict] | None = None,
        ratchets: list[dict] | None = None,
        bits: list[dict] | None = None,
        lockchips: list[dict] | None = None,
        assist_blades: list[dict] | None = None,
    ) -> "Catalog":
        """Build a catalog from raw data store rows, skipping nameless rows."""

        def names(rows: list[dict] | None, category: str) -> list[tuple[str, dict]]:
            out = []
            for row in rows or []:
                name = _column(row, _NAME_COLUMNS[category])
                if not name:
                    logger.debug("Skipping %s row without a name: %r", category, row)
                    continue
                out.append((name, row))
            return out

        catalog = cls(
            blades=tuple(
                Blade(name, _column(row, _LINE_COLUMNS))
                for name, row in names(blades, BLADE)
            ),
            ratchets=tuple(Ratchet(name) for name, _ in names(ratchets, RATCHET)),
            bits=tuple(
                Bit(name, _column(row, _ALIAS_COLUMNS))
                for name, row in names(bits, BIT)
            ),
            lockchips=tuple(Lockchip(name) for name, _ in names(lockchips, LOCKCHIP)),
            assist_blades=tuple(
                AssistBlade(name) for name, _ in names(assist_blades, ASSIST_BLADE)
            ),
        )
        for blade in catalog.blades:
            if blade.line not in LINES:
                logger.warning(
                    "Blade %r has unknown line %r; it will never match",
                    blade.name, blade.line,
                )
        logger.info(
            "Loaded catalog: %s",
            ", ".join(f"{c}={n}" for c, n in catalog.counts().items()),
        )
        return catalog

    def entries(self, category: str) -> tuple[PartEntry, ...]:
        tables = {
            BLADE: self.blades,
            RATCHET: self.ratchets,
            BIT: self.bits,
            LOCKCHIP: self.lockchips,
            ASSIST_BLADE: self.assist_blades,
        }
        try:
            return tables[category]
        except KeyError:
            raise CatalogError(f"Unknown part category: {category!r}") from None

    def blades_for_line(self, line: str) -> tuple[Blade, ...]:
        return tuple(b for b in self.blades if b.line == line)

    def counts(self) -> dict[str, int]:
        return {c: len(self.entries(c)) for c in CATEGORIES}

    @property
    def is_empty(self) -> bool:
        return not any(self.counts().values())
