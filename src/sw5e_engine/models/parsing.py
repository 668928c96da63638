"""Boundary parsing from host actor data to ActorSnapshot.

The host stores loosely typed data: numbers arrive as strings, overrides as
empty strings, bonuses as roll formulas, archetype tags as free text. This
module runs one normalization pass over that data so the computation core
only ever sees clean numeric and enum types.

Coercions that lose information (an unknown archetype read as 'none', a
formula bonus read as 0, a non-numeric override dropped) are recorded as
warnings. Structural problems that make the actor unusable (an ability
score of 45, a section that is not a mapping) are errors.

Example:
    >>> result = parse_actor_data({"name": "Kira", "type": "character",
    ...                            "abilities": {"dex": {"value": "16"}}})
    >>> result.success
    True
    >>> result.snapshot.ability(Ability.DEX).value
    16
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from sw5e_engine.core.exceptions import SnapshotValidationError
from sw5e_engine.core.logging import get_logger
from sw5e_engine.models.enums import Ability, ActorKind, Powercasting, Size, Skill
from sw5e_engine.models.snapshot import ActorSnapshot


logger = get_logger(__name__)


# Host flag key -> FeatFlags field
FLAG_FIELDS: dict[str, str] = {
    "jackOfAllTrades": "jack_of_all_trades",
    "remarkableAthlete": "remarkable_athlete",
    "observantFeat": "observant_feat",
    "initiativeAlert": "initiative_alert",
    "initiativeAdv": "initiative_adv",
    "powerfulBuild": "powerful_build",
    "halflingLucky": "halfling_lucky",
    "reliableTalent": "reliable_talent",
    "weaponCriticalThreshold": "weapon_critical_threshold",
    "powerCriticalThreshold": "power_critical_threshold",
}

_NUMERIC_FLAGS = frozenset({"weapon_critical_threshold", "power_critical_threshold"})

# Host bonus path -> GlobalBonuses field
BONUS_FIELDS: dict[tuple[str, str], str] = {
    ("abilities", "check"): "ability_check",
    ("abilities", "save"): "ability_save",
    ("abilities", "skill"): "skill_check",
    ("power", "dc"): "power_dc",
    ("power", "forceLightDC"): "force_light_dc",
    ("power", "forceDarkDC"): "force_dark_dc",
    ("power", "forceUnivDC"): "force_univ_dc",
    ("power", "techDC"): "tech_dc",
    ("super", "dc"): "superiority_dc",
    ("super", "generalDC"): "superiority_general_dc",
    ("super", "physicalDC"): "superiority_physical_dc",
    ("super", "mentalDC"): "superiority_mental_dc",
}


class SnapshotResult(BaseModel):
    """Outcome of parsing raw actor data.

    Attributes:
        success: Whether a snapshot was produced.
        snapshot: The validated snapshot, when successful.
        errors: Problems that prevented building a snapshot.
        warnings: Values that were coerced or ignored.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    snapshot: ActorSnapshot | None = None
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_number(value: Any) -> float | None:
    """Parse a host number, returning None when it is not a finite number."""
    if isinstance(value, bool):
        return float(value)
    if not isinstance(value, int | float | str):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0", ""})


def _slug(value: str) -> str:
    return "-".join(value.lower().split())


class _Normalizer:
    """Collects warnings and errors while reshaping one actor's data."""

    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.errors: list[str] = []

    def warn(self, path: str, message: str) -> None:
        self.warnings.append(f"{path}: {message}")

    def mapping(self, value: Any, path: str) -> Mapping[str, Any]:
        """Read a section that must be a mapping when present."""
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            self.errors.append(f"{path}: expected a mapping, got {type(value).__name__}")
            return {}
        return value

    def integer(self, value: Any, path: str, default: int = 0) -> int:
        """Read an integer, truncating floats and defaulting blanks."""
        if _is_blank(value):
            return default
        number = _parse_number(value)
        if number is None:
            self.warn(path, f"non-numeric value {value!r} read as {default}")
            return default
        return int(number)

    def number(self, value: Any, path: str, default: float = 0.0) -> float:
        """Read a float, defaulting blanks."""
        if _is_blank(value):
            return default
        number = _parse_number(value)
        if number is None:
            self.warn(path, f"non-numeric value {value!r} read as {default}")
            return default
        return number

    def optional_integer(self, value: Any, path: str) -> int | None:
        """Read an optional integer such as an override; junk becomes None."""
        if _is_blank(value):
            return None
        number = _parse_number(value)
        if number is None:
            self.warn(path, f"non-numeric value {value!r} ignored")
            return None
        return int(number)

    def boolean(self, value: Any, path: str) -> bool:
        """Read a toggle stored as a bool, a number or a string."""
        if isinstance(value, bool) or value is None:
            return bool(value)
        if isinstance(value, str):
            text = value.strip().lower()
            if text in _TRUE_STRINGS:
                return True
            if text in _FALSE_STRINGS:
                return False
        number = _parse_number(value)
        if number is None:
            self.warn(path, f"non-boolean value {value!r} read as False")
            return False
        return number != 0

    def powercasting(self, value: Any, path: str) -> Powercasting:
        """Read an archetype tag; unknown tags contribute nothing."""
        if isinstance(value, Mapping):
            # Newer data stores one tag per cast type
            tags = [tag for tag in value.values() if not _is_blank(tag) and tag != Powercasting.NONE]
            value = tags[0] if tags else Powercasting.NONE
        if _is_blank(value):
            return Powercasting.NONE
        try:
            return Powercasting(str(value).strip().lower())
        except ValueError:
            self.warn(path, f"unknown powercasting archetype {value!r} treated as 'none'")
            return Powercasting.NONE

    def size(self, value: Any, path: str) -> Size:
        if _is_blank(value):
            return Size.MEDIUM
        try:
            return Size(str(value))
        except ValueError:
            self.warn(path, f"unknown size {value!r} treated as 'med'")
            return Size.MEDIUM

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def abilities(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, data in self.mapping(raw, "abilities").items():
            path = f"abilities.{key}"
            try:
                ability = Ability(key)
            except ValueError:
                self.warn(path, "unknown ability ignored")
                continue
            data = self.mapping(data, path)
            bonuses = self.mapping(data.get("bonuses"), f"{path}.bonuses")
            result[ability.value] = {
                "value": self.integer(data.get("value"), f"{path}.value", default=10),
                "proficient": 1 if self.number(data.get("proficient"), f"{path}.proficient") else 0,
                "check_bonus": self.integer(bonuses.get("check"), f"{path}.bonuses.check"),
                "save_bonus": self.integer(bonuses.get("save"), f"{path}.bonuses.save"),
            }
        return result

    def skills(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, data in self.mapping(raw, "skills").items():
            path = f"skills.{key}"
            try:
                skill = Skill(key)
            except ValueError:
                self.warn(path, "unknown skill ignored")
                continue
            data = self.mapping(data, path)
            bonuses = self.mapping(data.get("bonuses"), f"{path}.bonuses")
            ability = data.get("ability") or skill.ability.value
            if ability not in Ability.__members__.values():
                self.warn(f"{path}.ability", f"unknown ability {ability!r}, using {skill.ability.value!r}")
                ability = skill.ability.value
            result[skill.value] = {
                "value": self.number(data.get("value"), f"{path}.value"),
                "ability": ability,
                "bonus": self.integer(bonuses.get("check", data.get("bonus")), f"{path}.bonuses.check"),
                "passive_bonus": self.integer(bonuses.get("passive"), f"{path}.bonuses.passive"),
            }
        return result

    def flags(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        flags = self.mapping(raw, "flags")
        if "sw5e" in flags:
            flags = self.mapping(flags.get("sw5e"), "flags.sw5e")
        result: dict[str, Any] = {}
        for key, field in FLAG_FIELDS.items():
            if key not in flags:
                continue
            value = flags[key]
            if field in _NUMERIC_FLAGS:
                parsed = self.optional_integer(value, f"flags.{key}")
                if parsed is not None:
                    result[field] = parsed
            else:
                result[field] = self.boolean(value, f"flags.{key}")
        return result

    def bonuses(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        bonuses = self.mapping(raw, "bonuses")
        result: dict[str, Any] = {}
        for (section, key), field in BONUS_FIELDS.items():
            value = self.mapping(bonuses.get(section), f"bonuses.{section}").get(key)
            result[field] = self.integer(value, f"bonuses.{section}.{key}")
        return result

    def casting_pool(self, raw: Any, path: str) -> dict[str, Any]:
        data = self.mapping(raw, path)
        casting: dict[str, Any] = {
            "level": self.integer(data.get("level"), f"{path}.level"),
            "points": self.pool(data.get("points"), f"{path}.points"),
        }
        if "known" in data:
            casting["known"] = self.pool(data.get("known"), f"{path}.known")
        return casting

    def pool(self, raw: Any, path: str) -> dict[str, int]:
        data = self.mapping(raw, path)
        return {
            "value": self.integer(data.get("value"), f"{path}.value"),
            "max": self.integer(data.get("max"), f"{path}.max"),
        }

    def superiority(self, raw: Any, path: str) -> dict[str, Any]:
        data = self.mapping(raw, path)
        return {
            "level": self.integer(data.get("level"), f"{path}.level"),
            "known": self.pool(data.get("known"), f"{path}.known"),
            "dice": self.pool(data.get("dice"), f"{path}.dice"),
            "die": "" if _is_blank(data.get("die")) else str(data.get("die")),
        }

    def attributes(self, raw: Mapping[str, Any], traits: Mapping[str, Any]) -> dict[str, Any]:
        attributes = self.mapping(raw, "attributes")
        init = self.mapping(attributes.get("init"), "attributes.init")
        return {
            "prof": self.integer(attributes.get("prof"), "attributes.prof"),
            "size": self.size(traits.get("size"), "traits.size"),
            "init_value": self.integer(init.get("value"), "attributes.init.value"),
            "powercasting": self.powercasting(attributes.get("powercasting"), "attributes.powercasting"),
            "force": self.casting_pool(attributes.get("force"), "attributes.force"),
            "tech": self.casting_pool(attributes.get("tech"), "attributes.tech"),
            "superiority": self.superiority(attributes.get("super"), "attributes.super"),
        }

    def details(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        details = self.mapping(raw, "details")
        xp = details.get("xp")
        if isinstance(xp, Mapping):
            xp = xp.get("value")
        return {
            "xp": self.integer(xp, "details.xp"),
            "cr": max(self.number(details.get("cr"), "details.cr"), 0.0),
            "power_force_level": self.optional_integer(details.get("powerForceLevel"), "details.powerForceLevel"),
            "power_tech_level": self.optional_integer(details.get("powerTechLevel"), "details.powerTechLevel"),
        }

    def items(self, raw: Any) -> list[dict[str, Any]]:
        if raw is None:
            return []
        if not isinstance(raw, list | tuple):
            self.errors.append(f"items: expected a list, got {type(raw).__name__}")
            return []
        result = []
        for index, item in enumerate(raw):
            path = f"items[{index}]"
            item = self.mapping(item, path)
            data = {
                **item,
                **self.mapping(item.get("data"), f"{path}.data"),
                **self.mapping(item.get("system"), f"{path}.system"),
            }
            item_type = data.get("type")
            if _is_blank(item_type):
                self.warn(path, "item without a type ignored")
                continue
            name = str(data.get("name") or "")
            superiority = self.mapping(data.get("superiority"), f"{path}.superiority")
            result.append(
                {
                    "name": name,
                    "type": str(item_type),
                    "quantity": max(self.number(data.get("quantity"), f"{path}.quantity"), 0.0),
                    "weight": max(self.number(data.get("weight"), f"{path}.weight"), 0.0),
                    "levels": max(self.integer(data.get("levels"), f"{path}.levels", default=1), 0),
                    "hit_dice_used": max(self.integer(data.get("hitDiceUsed"), f"{path}.hitDiceUsed"), 0),
                    "identifier": str(data.get("identifier") or _slug(name)),
                    "class_identifier": str(data.get("classIdentifier") or ""),
                    "powercasting": self.powercasting(data.get("powercasting"), f"{path}.powercasting"),
                    "school": None if _is_blank(data.get("school")) else str(data.get("school")),
                    "superiority_progression": max(
                        self.number(superiority.get("progression"), f"{path}.superiority.progression"), 0.0
                    ),
                }
            )
        return result

    def power_slots(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, data in self.mapping(raw, "powers").items():
            path = f"powers.{key}"
            data = self.mapping(data, path)
            slot = {
                field: self.optional_integer(data.get(field), f"{path}.{field}")
                for field in ("fvalue", "fmax", "foverride", "tvalue", "tmax", "toverride")
            }
            slot["legacy_value"] = self.optional_integer(data.get("value"), f"{path}.value")
            result[key] = slot
        return result

    def currency(self, raw: Mapping[str, Any]) -> dict[str, int]:
        return {
            str(key): self.integer(value, f"currency.{key}")
            for key, value in self.mapping(raw, "currency").items()
        }

    def merged_saves(self, raw: Any) -> dict[str, int] | None:
        if raw is None:
            return None
        result = {}
        for key, value in self.mapping(raw, "mergedSaves").items():
            if isinstance(value, Mapping):
                value = value.get("save")
            if key in Ability.__members__.values():
                result[key] = self.integer(value, f"mergedSaves.{key}")
        return result

    def merged_skills(self, raw: Any) -> dict[str, float] | None:
        if raw is None:
            return None
        result = {}
        for key, value in self.mapping(raw, "mergedSkills").items():
            if isinstance(value, Mapping):
                value = value.get("value")
            if key in Skill.__members__.values():
                result[key] = self.number(value, f"mergedSkills.{key}")
        return result


def parse_actor_data(raw: Any) -> SnapshotResult:
    """Normalize and validate host actor data.

    Args:
        raw: Actor data as stored by the host; either the system data itself
            or a document with a nested 'data' or 'system' block.

    Returns:
        A SnapshotResult; check `success` before using `snapshot`.
    """
    if not isinstance(raw, Mapping):
        return SnapshotResult(
            success=False,
            errors=[f"actor: expected a mapping, got {type(raw).__name__}"],
        )

    normalizer = _Normalizer()
    document = raw

    system = document.get("system") or document.get("data") or document
    system = normalizer.mapping(system, "system")

    kind = document.get("type", system.get("type", ActorKind.CHARACTER.value))
    if kind not in ActorKind.__members__.values():
        normalizer.errors.append(f"type: unsupported actor type {kind!r}")

    payload = {
        "name": str(document.get("name") or ""),
        "kind": kind,
        "abilities": normalizer.abilities(system.get("abilities")),
        "skills": normalizer.skills(system.get("skills")),
        "flags": normalizer.flags(document.get("flags", system.get("flags"))),
        "bonuses": normalizer.bonuses(system.get("bonuses")),
        "attributes": normalizer.attributes(
            system.get("attributes"), normalizer.mapping(system.get("traits"), "traits")
        ),
        "details": normalizer.details(system.get("details")),
        "items": normalizer.items(document.get("items", system.get("items"))),
        "power_slots": normalizer.power_slots(system.get("powers")),
        "currency": normalizer.currency(system.get("currency")),
        "merged_saves": normalizer.merged_saves(document.get("mergedSaves")),
        "merged_skills": normalizer.merged_skills(document.get("mergedSkills")),
    }

    if normalizer.errors:
        logger.warning("Rejected actor data", actor=payload["name"], errors=normalizer.errors)
        return SnapshotResult(success=False, errors=normalizer.errors, warnings=normalizer.warnings)

    try:
        snapshot = ActorSnapshot.model_validate(payload)
    except PydanticValidationError as exc:
        errors = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        logger.warning("Rejected actor data", actor=payload["name"], errors=errors)
        return SnapshotResult(success=False, errors=errors, warnings=normalizer.warnings)

    if normalizer.warnings:
        logger.debug("Coerced actor data", actor=snapshot.name, warnings=len(normalizer.warnings))
    return SnapshotResult(success=True, snapshot=snapshot, warnings=normalizer.warnings)


def build_snapshot(raw: Any) -> ActorSnapshot:
    """Parse host actor data, raising when it cannot be used.

    Args:
        raw: Actor data as stored by the host.

    Returns:
        The validated ActorSnapshot.

    Raises:
        SnapshotValidationError: If the data is structurally invalid.
    """
    result = parse_actor_data(raw)
    if not result.success or result.snapshot is None:
        name = raw.get("name") if isinstance(raw, Mapping) else None
        raise SnapshotValidationError(
            "Actor data could not be parsed",
            actor_name=name,
            errors=result.errors,
        )
    return result.snapshot


__all__ = [
    "FLAG_FIELDS",
    "BONUS_FIELDS",
    "SnapshotResult",
    "parse_actor_data",
    "build_snapshot",
]
