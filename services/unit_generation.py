# services/unit_generation.py

"""
Unit generation engine.

Expands a property's layout (blocks × floors × units per floor) and naming
scheme into the concrete list of unit rows, then stores them with an
idempotent batched upsert keyed on (condo_id, unit_number).

The naming policy is split into small pure functions so it can be tested
without a database:

    compute_floor_display(4)                       -> "3A"
    compute_unit_name(1, "3A", 2, scheme)          -> "013A02"
    iter_candidate_units(condo_id, config)         -> lazy GeneratedUnit stream
    generate_units(condo_id, config)               -> deduplicated list
    persist_units(condo_id, units, client=...)     -> GenerationReport
"""

import threading
from typing import Iterable, Iterator, List, Optional, Sequence

from core.config import settings
from core.errors import (
    InvalidConfiguration,
    PersistenceBatchFailure,
    GenerationCancelled,
    extract_supabase_error,
)
from core.logging_config import get_logger
from models.property_configuration import NamingScheme, PropertyConfigurationBase
from models.unit import GeneratedUnit, DEFAULT_UNIT_TYPE


UNITS_TABLE = "units"
CONFLICT_KEYS = "condo_id,unit_number"
MAX_LETTER_BLOCKS = 26

logger = get_logger("units")


# ============================================================
# NAMING POLICY
# ============================================================

def compute_floor_display(actual_floor: int) -> str:
    """
    Label shown for a physical floor.

    Floor 4 is relabelled "3A". Floors above it keep their own number,
    so the labels run 1, 2, 3, 3A, 5, 6, ...
    """
    if actual_floor == 4:
        return "3A"
    return str(actual_floor)


def format_width(template: str) -> int:
    """Digit width implied by a "##"-style template (0 = no padding)."""
    return (template or "").count("#")


def pad(value, template: str) -> str:
    """Left-pad `value` with zeros to the template width; longer values pass through."""
    return str(value).zfill(format_width(template))


def block_letter(block_idx: int) -> str:
    if not 1 <= block_idx <= MAX_LETTER_BLOCKS:
        raise InvalidConfiguration(
            f"Block {block_idx} cannot be labelled with a single letter (A-Z)"
        )
    return chr(ord("A") + block_idx - 1)


def compute_unit_name(block_idx: int, floor_display: str, unit_idx: int, scheme: NamingScheme) -> str:
    """
    Render the identifier for one (block, floor, position).

    `unit_idx` is the 1-based position on the floor; `scheme.start_unit`
    offsets the printed number.
    """
    unit_no = scheme.start_unit + unit_idx - 1

    if scheme.uses_detected_pattern:
        return f"{block_letter(block_idx)}-{floor_display}-{unit_no}"

    return (
        scheme.block_prefix + pad(block_idx, scheme.block_format)
        + scheme.floor_prefix + pad(floor_display, scheme.floor_format)
        + scheme.unit_prefix + pad(unit_no, scheme.unit_format)
    )


# ============================================================
# VALIDATION
# ============================================================

def _positive_int(config, field: str) -> int:
    value = getattr(config, field, None)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidConfiguration(f"{field} must be a positive integer (got {value!r})")
    return value


def validate_layout(condo_id: str, config: PropertyConfigurationBase) -> None:
    """Fail fast on a layout the engine cannot expand."""
    if not condo_id or not str(condo_id).strip():
        raise InvalidConfiguration("condo_id is required")

    blocks = _positive_int(config, "blocks")
    _positive_int(config, "floors_per_block")
    _positive_int(config, "units_per_floor")

    if config.naming_scheme.uses_detected_pattern and blocks > MAX_LETTER_BLOCKS:
        raise InvalidConfiguration(
            f"The detected naming pattern labels blocks A-Z; {blocks} blocks is more than {MAX_LETTER_BLOCKS}"
        )


# ============================================================
# GENERATION
# ============================================================

def iter_candidate_units(condo_id: str, config: PropertyConfigurationBase) -> Iterator[GeneratedUnit]:
    """
    Yield units block-major, then floor, then position on the floor.

    Excluded names are skipped here; duplicates are not (see generate_units).
    """
    validate_layout(condo_id, config)

    scheme = config.naming_scheme
    excluded = set(config.excluded_units)
    unit_types = config.unit_types

    for block_idx in range(1, config.blocks + 1):
        block_str = pad(block_idx, scheme.block_format)

        for floor_idx in range(1, config.floors_per_block + 1):
            actual_floor = scheme.start_floor + floor_idx - 1
            floor_display = compute_floor_display(actual_floor)

            for unit_idx in range(1, config.units_per_floor + 1):
                name = compute_unit_name(block_idx, floor_display, unit_idx, scheme)
                if name in excluded:
                    continue

                yield GeneratedUnit(
                    condo_id=condo_id,
                    unit_number=name,
                    floor_number=actual_floor,
                    block_number=block_str,
                    unit_type=unit_types.get(name, DEFAULT_UNIT_TYPE),
                )


def dedupe_units(units: Iterable[GeneratedUnit]) -> List[GeneratedUnit]:
    """Drop repeated unit_numbers, keeping the first occurrence."""
    seen = set()
    unique = []
    for unit in units:
        if unit.unit_number in seen:
            continue
        seen.add(unit.unit_number)
        unique.append(unit)
    return unique


def generate_units(condo_id: str, config: PropertyConfigurationBase) -> List[GeneratedUnit]:
    """
    Expand `config` into the ordered, deduplicated list of units for `condo_id`.

    Pure: same inputs always give the same list, and nothing is written.
    Raises InvalidConfiguration before yielding anything if the layout is bad.
    """
    units = dedupe_units(iter_candidate_units(condo_id, config))

    candidates = config.blocks * config.floors_per_block * config.units_per_floor
    logger.debug(
        f"Generated {len(units)} of {candidates} candidate units for condo {condo_id}"
    )
    return units


# ============================================================
# PERSISTENCE
# ============================================================

class GenerationReport:
    """Outcome of a persist run: new rows vs rows that already existed."""
    def __init__(self, units_created: int, units_skipped: int, batches: int, rows: Optional[List[dict]] = None):
        self.units_created = units_created
        self.units_skipped = units_skipped
        self.batches = batches
        # rows the data store reported as newly inserted
        self.rows = rows or []

    @property
    def message(self) -> str:
        msg = f"{self.units_created} units created successfully"
        if self.units_skipped:
            msg += f" ({self.units_skipped} already existed)"
        return msg

    def to_dict(self) -> dict:
        return {
            "units_created": self.units_created,
            "units_skipped": self.units_skipped,
            "message": self.message,
        }


def chunked(items: Sequence, size: int) -> Iterator[Sequence]:
    if size <= 0:
        raise ValueError("batch size must be positive")
    for start in range(0, len(items), size):
        yield items[start:start + size]


def persist_units(
    condo_id: str,
    units: Sequence[GeneratedUnit],
    *,
    client,
    batch_size: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> GenerationReport:
    """
    Upsert `units` into the units table in sequential batches.

    Rows whose (condo_id, unit_number) already exist are ignored, so a
    re-run creates nothing new. A failing batch raises
    PersistenceBatchFailure carrying the count created so far; earlier
    batches are not rolled back. Setting `cancel_event` stops the run
    before the next batch is sent.
    """
    batch_size = batch_size or settings.UNIT_BATCH_SIZE
    created = 0
    batches = 0
    inserted_rows = []

    for batch_index, batch in enumerate(chunked(list(units), batch_size)):
        if cancel_event is not None and cancel_event.is_set():
            logger.warning(
                f"Unit generation for condo {condo_id} cancelled before batch {batch_index} "
                f"({created} units created)"
            )
            raise GenerationCancelled(created)

        rows = [u.to_row() for u in batch]
        try:
            result = (
                client.table(UNITS_TABLE)
                .upsert(
                    rows,
                    on_conflict=CONFLICT_KEYS,
                    ignore_duplicates=True,
                    returning="representation",
                )
                .execute()
            )
        except Exception as e:
            detail = extract_supabase_error(e)
            logger.error(
                f"Unit upsert failed for condo {condo_id} at batch {batch_index}: {detail}"
            )
            raise PersistenceBatchFailure(created, detail, batch_index=batch_index)

        # ignore-duplicates only returns the rows it actually inserted
        new_rows = result.data or []
        inserted = len(new_rows)
        inserted_rows.extend(new_rows)
        created += inserted
        batches += 1
        logger.info(
            f"Condo {condo_id}: batch {batch_index} upserted {len(rows)} rows, {inserted} new"
        )

    return GenerationReport(
        units_created=created,
        units_skipped=len(units) - created,
        batches=batches,
        rows=inserted_rows,
    )


def generate_and_persist(
    condo_id: str,
    config: PropertyConfigurationBase,
    *,
    client,
    batch_size: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> GenerationReport:
    """Generate every unit for `config` and store it; generation errors abort before any write."""
    units = generate_units(condo_id, config)
    logger.info(f"Persisting {len(units)} generated units for condo {condo_id}")
    return persist_units(
        condo_id,
        units,
        client=client,
        batch_size=batch_size,
        cancel_event=cancel_event,
    )
