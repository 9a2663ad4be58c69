"""Type-specific format validation of node attributes.

Each node type with a well-known identifier format (emails, IPs, hashes,
...) has one or more rules. A rule names the attribute keys it inspects;
the first key holding a non-blank string is checked against the rule's
pattern.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

NO_VALIDATORS_SCORE = 0.7
NOTHING_CHECKED_SCORE = 0.5


@dataclass(frozen=True)
class FormatRule:
    """A named pattern check against one attribute."""

    name: str
    fields: tuple[str, ...]
    pattern: re.Pattern[str]

    def find_value(self, attributes: Mapping[str, Any]) -> tuple[str, str] | None:
        """Return ``(field, value)`` for the first populated string field."""
        for key in self.fields:
            value = attributes.get(key)
            if isinstance(value, str) and value.strip():
                return key, value.strip()
        return None

    def matches(self, value: str) -> bool:
        return self.pattern.fullmatch(value) is not None


_IPV4 = r"(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)"
_IPV6 = r"(?:[0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}"

FORMAT_RULES: dict[str, tuple[FormatRule, ...]] = {
    "EMAIL": (
        FormatRule("email", ("email", "email_address", "address", "邮箱地址"),
                   re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")),
    ),
    "IP_ADDRESS": (
        FormatRule("ip", ("ip", "ip_address", "address", "IP地址"),
                   re.compile(rf"{_IPV4}|{_IPV6}")),
    ),
    "PHONE_NUMBER": (
        FormatRule("phone", ("phone", "phone_number", "number", "电话号码"),
                   re.compile(r"[\d\s\-+()]{6,20}")),
    ),
    "DOMAIN": (
        FormatRule("domain", ("domain", "hostname", "域名"),
                   re.compile(r"[a-zA-Z0-9][-a-zA-Z0-9]*(?:\.[a-zA-Z0-9][-a-zA-Z0-9]*)+")),
    ),
    "CRYPTO_WALLET": (
        FormatRule("wallet", ("wallet", "wallet_address", "address", "钱包地址"),
                   re.compile(
                       r"(?:0x)?[0-9a-fA-F]{40,64}"
                       r"|[13][a-km-zA-HJ-NP-Z1-9]{25,34}"
                       r"|bc1[a-z0-9]{39,59}"
                   )),
    ),
    "FILE_HASH": (
        FormatRule("md5", ("md5", "MD5"), re.compile(r"[a-fA-F0-9]{32}")),
        FormatRule("sha1", ("sha1", "SHA1"), re.compile(r"[a-fA-F0-9]{40}")),
        FormatRule("sha256", ("sha256", "SHA256"), re.compile(r"[a-fA-F0-9]{64}")),
    ),
}


@dataclass(frozen=True)
class FormatCheck:
    """Outcome of validating one node's attributes."""

    score: float
    checked: int = 0
    failed_fields: tuple[str, ...] = ()


def rules_for(node_type: str) -> tuple[FormatRule, ...]:
    return FORMAT_RULES.get((node_type or "").upper(), ())


def validate_format(node_type: str, attributes: Mapping[str, Any]) -> FormatCheck:
    """Score the format validity of a node's attributes.

    No rules for the type → 0.7; rules but nothing populated → 0.5;
    otherwise the fraction of checked fields that pass.
    """
    rules = rules_for(node_type)
    if not rules:
        return FormatCheck(score=NO_VALIDATORS_SCORE)

    checked = 0
    passed = 0
    failed: list[str] = []
    for rule in rules:
        found = rule.find_value(attributes)
        if found is None:
            continue
        key, value = found
        checked += 1
        if rule.matches(value):
            passed += 1
        else:
            failed.append(key)

    if checked == 0:
        return FormatCheck(score=NOTHING_CHECKED_SCORE)
    return FormatCheck(score=passed / checked, checked=checked, failed_fields=tuple(failed))
