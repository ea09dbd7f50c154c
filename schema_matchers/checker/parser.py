"""Parser for expectation manifests.

A manifest is a YAML file naming contracts (JSON Schema files, or inline
schemas) and the expectations to check against them::

    contracts:
      user: schemas/user.schema.json
    expectations:
      - contract: user
        attribute: email
        acceptance: required
        filled: string
        value: [[max_size, 64]]
        macro_use: email_format
        severity: critical
        description: Email is mandatory

Contract paths are resolved relative to the manifest's directory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from schema_matchers.checker.models import ExpectationModel, ExpectationSeverity
from schema_matchers.contract.contract import Contract
from schema_matchers.matcher.value_rules import rule_pairs

logger = logging.getLogger(__name__)

# Valid severity and acceptance values
_VALID_SEVERITIES = {s.value for s in ExpectationSeverity}
_VALID_ACCEPTANCES = {"required", "optional"}


def derive_expectation_name(contract_name: str, attribute: str) -> str:
    """Derive an expectation name from its contract and attribute.

    Args:
        contract_name: Key of the contract in the manifest.
        attribute: Attribute under test.

    Returns:
        ``<contract>.<attribute>``.
    """
    return f"{contract_name}.{attribute}"


def load_contract(source: str | dict[str, Any], base_dir: Path, name: str) -> type[Contract]:
    """Build a contract class from a schema file path or an inline schema.

    Args:
        source: Path to a JSON Schema file, or the schema itself.
        base_dir: Directory relative paths are resolved against.
        name: Contract key, used as the class name.

    Returns:
        A Contract subclass.

    Raises:
        ValueError: If the file is missing or is not a JSON object.
    """
    if isinstance(source, dict):
        return Contract.from_json_schema(source, name=name)

    schema_path = Path(source)
    if not schema_path.is_absolute():
        schema_path = base_dir / schema_path
    if not schema_path.exists():
        msg = f"Contract '{name}' schema not found: {schema_path}"
        raise ValueError(msg)

    try:
        schema = json.loads(schema_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"Contract '{name}' schema is not valid JSON: {exc}"
        raise ValueError(msg) from exc
    if not isinstance(schema, dict):
        msg = f"Contract '{name}' schema must be a JSON object: {schema_path}"
        raise ValueError(msg)

    logger.debug("Loaded contract '%s' from %s", name, schema_path)
    return Contract.from_json_schema(schema, name=name)


def parse_expectation(
    entry: Any,
    contracts: dict[str, type[Contract]],
    index: int,
) -> ExpectationModel:
    """Parse one manifest expectation entry.

    Args:
        entry: The raw YAML mapping.
        contracts: Loaded contracts by manifest key.
        index: Position in the manifest, used in error messages.

    Returns:
        The parsed ExpectationModel.

    Raises:
        ValueError: If a required field is missing or invalid.
    """
    if not isinstance(entry, dict):
        msg = f"Expectation #{index} must be a mapping"
        raise ValueError(msg)

    contract_name = entry.get("contract")
    if contract_name not in contracts:
        msg = f"Expectation #{index} references unknown contract {contract_name!r}"
        raise ValueError(msg)

    attribute = entry.get("attribute")
    if not isinstance(attribute, str) or not attribute:
        msg = f"Expectation #{index} has no attribute"
        raise ValueError(msg)

    acceptance = str(entry.get("acceptance", "required")).lower()
    if acceptance not in _VALID_ACCEPTANCES:
        msg = f"Expectation #{index} has invalid acceptance {acceptance!r}"
        raise ValueError(msg)

    severity = ExpectationSeverity.CRITICAL
    raw_severity = entry.get("severity")
    if raw_severity is not None:
        raw = str(raw_severity).lower()
        if raw in _VALID_SEVERITIES:
            severity = ExpectationSeverity(raw)
        else:
            logger.warning(
                "Invalid severity '%s' in expectation #%d, defaulting to critical",
                raw,
                index,
            )

    filled = entry.get("filled")
    if filled is True:
        filled = "string"

    return ExpectationModel(
        name=entry.get("name") or derive_expectation_name(contract_name, attribute),
        contract_name=contract_name,
        contract=contracts[contract_name],
        attribute=attribute,
        acceptance=acceptance,
        filled=filled if filled else None,
        value_rules=rule_pairs(entry.get("value")),
        macro_use=entry.get("macro_use"),
        severity=severity,
        description=str(entry.get("description", "")),
    )


def parse_manifest(manifest_path: Path) -> list[ExpectationModel]:
    """Parse a manifest file into expectation models.

    Args:
        manifest_path: Path to the YAML manifest.

    Returns:
        Expectations in manifest order.

    Raises:
        FileNotFoundError: If the manifest does not exist.
        ValueError: If the manifest or any entry is malformed.
    """
    if not manifest_path.exists():
        msg = f"Manifest not found: {manifest_path}"
        raise FileNotFoundError(msg)

    with open(manifest_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        msg = f"Manifest root must be a mapping: {manifest_path}"
        raise ValueError(msg)

    base_dir = manifest_path.parent
    contracts = {
        str(name): load_contract(source, base_dir, str(name))
        for name, source in (data.get("contracts") or {}).items()
    }

    entries = data.get("expectations") or []
    if not isinstance(entries, list):
        msg = "expectations must be a list"
        raise ValueError(msg)

    expectations = [
        parse_expectation(entry, contracts, index)
        for index, entry in enumerate(entries, start=1)
    ]
    logger.info(
        "Parsed %d expectation(s) over %d contract(s) from %s",
        len(expectations),
        len(contracts),
        manifest_path,
    )
    return expectations
