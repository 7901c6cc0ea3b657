"""
Registration form rules derived from an event's ``form_fields_config``.

Admins pick which of a fixed set of sign-up fields are mandatory for an
event. ``build_rules`` turns that mapping into a ``RegistrationFormRules``
object that validates a submission and reports per-field messages. The
guardian phone is the one conditional field: when configured required it
is only enforced for registrants under 18.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from rcc_portal.core import config as settings

logger = logging.getLogger(__name__)

ADULT_AGE = 18
MAX_AGE = 150


class FieldKey(str, enum.Enum):
    NOME = "nome"
    TELEFONE = "telefone"
    IDADE = "idade"
    TELEFONE_RESPONSAVEL = "telefone_responsavel"
    CIDADE = "cidade"
    GRUPO_ORACAO = "grupo_oracao"
    PRECISA_POUSO = "precisa_pouso"


class FieldKind(str, enum.Enum):
    TEXT = "text"
    INTEGER = "integer"
    BOOLEAN = "boolean"


class GuardianPolicy(str, enum.Enum):
    # age unknown -> guardian phone not required
    PERMISSIVE = "permissive"
    # age unknown -> guardian phone required
    CONSERVATIVE = "conservative"


@dataclass(frozen=True)
class FieldSpec:
    key: FieldKey
    label: str
    kind: FieldKind
    required_message: str


FIELD_SPECS: tuple[FieldSpec, ...] = (
    FieldSpec(FieldKey.NOME, "Nome Completo", FieldKind.TEXT, "Nome é obrigatório."),
    FieldSpec(FieldKey.TELEFONE, "Telefone", FieldKind.TEXT, "Telefone é obrigatório."),
    FieldSpec(FieldKey.IDADE, "Idade", FieldKind.INTEGER, "Idade é obrigatória."),
    FieldSpec(
        FieldKey.TELEFONE_RESPONSAVEL,
        "Telefone do Responsável",
        FieldKind.TEXT,
        "Telefone do responsável é obrigatório para menores de 18 anos.",
    ),
    FieldSpec(FieldKey.CIDADE, "Cidade", FieldKind.TEXT, "Cidade é obrigatória."),
    FieldSpec(FieldKey.GRUPO_ORACAO, "Grupo de Oração", FieldKind.TEXT, "Grupo de Oração é obrigatório."),
    FieldSpec(FieldKey.PRECISA_POUSO, "Precisa de Pouso", FieldKind.BOOLEAN, "Informe se precisa de pouso."),
)

FIELD_KEYS = tuple(spec.key.value for spec in FIELD_SPECS)
FIELD_LABELS = {spec.key.value: spec.label for spec in FIELD_SPECS}

INVALID_AGE_MESSAGE = "Idade inválida."
INVALID_BOOLEAN_MESSAGE = "Valor inválido."

_TRUE_STRINGS = {"true", "1", "sim", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "nao", "não", "no", "off"}


@dataclass
class ValidationResult:
    valid: bool
    errors: dict[str, str] = field(default_factory=dict)
    cleaned: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FieldRule:
    spec: FieldSpec
    required: bool
    conditional: bool = False

    @property
    def key(self) -> str:
        return self.spec.key.value


def normalize_config(config: Optional[Mapping[str, Any]]) -> dict[str, dict[str, bool]]:
    """Full config over the known fields; unknown keys dropped, missing ones not required."""
    config = config if isinstance(config, Mapping) else {}
    normalized = {}
    for key in FIELD_KEYS:
        entry = config.get(key)
        required = bool(entry.get("required")) if isinstance(entry, Mapping) else False
        normalized[key] = {"required": required}
    return normalized


def default_guardian_policy() -> GuardianPolicy:
    try:
        return GuardianPolicy(settings.GUARDIAN_POLICY.strip().lower())
    except ValueError:
        logger.warning("Unknown RCC_GUARDIAN_POLICY %r, using permissive", settings.GUARDIAN_POLICY)
        return GuardianPolicy.PERMISSIVE


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_age(raw: Any) -> tuple[Optional[int], Optional[str]]:
    """Return (age, error). Empty input is absent, not zero; ages above MAX_AGE are invalid."""
    if _is_blank(raw):
        return None, None
    if isinstance(raw, bool):
        return None, INVALID_AGE_MESSAGE
    if isinstance(raw, int):
        number = raw
    elif isinstance(raw, (str, float)):
        try:
            value = float(raw.strip() if isinstance(raw, str) else raw)
        except ValueError:
            return None, INVALID_AGE_MESSAGE
        # nan and inf are not integral
        if not value.is_integer():
            return None, INVALID_AGE_MESSAGE
        number = int(value)
    else:
        return None, INVALID_AGE_MESSAGE

    if not 0 <= number <= MAX_AGE:
        return None, INVALID_AGE_MESSAGE
    return number, None


def coerce_boolean(raw: Any) -> tuple[Optional[bool], Optional[str]]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None, None
    if isinstance(raw, bool):
        return raw, None
    if isinstance(raw, str):
        lowered = raw.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True, None
        if lowered in _FALSE_STRINGS:
            return False, None
    return None, INVALID_BOOLEAN_MESSAGE


class RegistrationFormRules:
    """Validation rules for one event's sign-up form."""

    def __init__(self, rules: tuple[FieldRule, ...], policy: GuardianPolicy):
        self.rules = rules
        self.policy = policy
        self._by_key = {rule.key: rule for rule in rules}

    def rule(self, key: str) -> FieldRule:
        return self._by_key[key]

    def is_required(self, key: str) -> bool:
        return self._by_key[key].required

    def describe(self) -> list[dict[str, Any]]:
        return [
            {
                "key": rule.key,
                "label": rule.spec.label,
                "kind": rule.spec.kind.value,
                "required": rule.required,
                "conditional": rule.conditional,
            }
            for rule in self.rules
        ]

    def _guardian_needed(self, age: Optional[int], age_error: Optional[str]) -> bool:
        if age is not None:
            return age < ADULT_AGE
        if age_error is not None:
            return False
        return self.policy == GuardianPolicy.CONSERVATIVE

    def validate(self, submission: Optional[Mapping[str, Any]]) -> ValidationResult:
        data = submission if isinstance(submission, Mapping) else {}
        errors: dict[str, str] = {}
        cleaned: dict[str, Any] = {}

        age, age_error = coerce_age(data.get(FieldKey.IDADE.value))

        for rule in self.rules:
            key = rule.key
            raw = data.get(key)

            if rule.spec.kind == FieldKind.INTEGER:
                value, error = age, age_error
            elif rule.spec.kind == FieldKind.BOOLEAN:
                value, error = coerce_boolean(raw)
            else:
                value = None if _is_blank(raw) else str(raw).strip()
                error = None

            if error:
                errors[key] = error
                continue

            if value is None:
                if rule.conditional:
                    if rule.required and self._guardian_needed(age, age_error):
                        errors[key] = rule.spec.required_message
                elif rule.required:
                    errors[key] = rule.spec.required_message
                continue

            cleaned[key] = value

        return ValidationResult(valid=not errors, errors=errors, cleaned=cleaned)


def build_rules(
    config: Optional[Mapping[str, Any]],
    *,
    policy: Optional[GuardianPolicy] = None,
) -> RegistrationFormRules:
    normalized = normalize_config(config)
    rules = tuple(
        FieldRule(
            spec=spec,
            required=normalized[spec.key.value]["required"],
            conditional=spec.key == FieldKey.TELEFONE_RESPONSAVEL,
        )
        for spec in FIELD_SPECS
    )
    return RegistrationFormRules(rules, policy or default_guardian_policy())
