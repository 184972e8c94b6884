"""Set algebra between extracted keys and the catalog index."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from i18n_audit.constants import KEY_SEPARATOR
from i18n_audit.models.call_site import Issue, Location
from i18n_audit.models.enums import IssueType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsageDiff:
    """Outcome of comparing code usage with the catalogs."""

    missing_keys: list[str]
    unused_keys: list[str]
    misuse_keys: list[str]
    fallback_matches: dict[str, str] = field(default_factory=dict)
    errors: list[Issue] = field(default_factory=list)
    warnings: list[Issue] = field(default_factory=list)


def suffix_index(leaf_keys: Iterable[str]) -> dict[str, list[str]]:
    """Map every proper dotted suffix to the leaf keys ending with it.

    ``"Header.nav.home"`` is indexed under ``"nav.home"`` and ``"home"``.
    """
    index: dict[str, list[str]] = {}
    for key in sorted(leaf_keys):
        parts = key.split(KEY_SEPARATOR)
        for start in range(1, len(parts)):
            index.setdefault(KEY_SEPARATOR.join(parts[start:]), []).append(key)
    return index


class UsageDiffEngine:
    """Computes missing, unused and misused keys.

    Pure: identical inputs always produce identical (sorted) outputs.
    """

    def __init__(self, allow_multi_namespace_keys: Iterable[str] = ()) -> None:
        """Initialize the engine.

        Args:
            allow_multi_namespace_keys: Short keys accepted despite ambiguous fallback matches

        """
        self.allow_multi_namespace_keys = frozenset(allow_multi_namespace_keys)

    def diff(
        self,
        extracted_keys: Iterable[str],
        leaf_keys: frozenset[str],
        object_paths: frozenset[str],
        key_usages: Mapping[str, list[Location]] | None = None,
    ) -> UsageDiff:
        """Compare extracted keys against the catalog index.

        Args:
            extracted_keys: Resolved keys found in code
            leaf_keys: Union of catalog leaf keys across locales
            object_paths: Union of catalog object paths across locales
            key_usages: Usage locations per key, for misuse entries

        Returns:
            The diff, with misuse errors and fallback warnings

        """
        extracted = frozenset(extracted_keys)
        usages = key_usages or {}
        suffixes = suffix_index(leaf_keys)

        missing: list[str] = []
        fallback_matches: dict[str, str] = {}
        warnings: list[Issue] = []
        for key in sorted(extracted):
            if key in leaf_keys or key in object_paths:
                continue
            matches = suffixes.get(key, [])
            if len(matches) == 1:
                fallback_matches[key] = matches[0]
            elif len(matches) > 1 and key in self.allow_multi_namespace_keys:
                warnings.append(
                    Issue(
                        type=IssueType.AMBIGUOUS_FALLBACK,
                        message=f'"{key}" matches {len(matches)} catalog keys ({", ".join(matches)}); allowed',
                        key=key,
                    )
                )
            else:
                missing.append(key)

        unused = sorted(leaf_keys - extracted)
        misuse = sorted(extracted & object_paths)
        errors = [issue for key in misuse for issue in self._misuse_issues(key, usages.get(key, []))]

        logger.debug(
            "Diff: %d missing, %d unused, %d misused, %d fallback matches",
            len(missing),
            len(unused),
            len(misuse),
            len(fallback_matches),
        )
        return UsageDiff(
            missing_keys=missing,
            unused_keys=unused,
            misuse_keys=misuse,
            fallback_matches=fallback_matches,
            errors=errors,
            warnings=warnings,
        )

    @staticmethod
    def _misuse_issues(key: str, locations: list[Location]) -> list[Issue]:
        message = f'"{key}" is a namespace object, not a translatable leaf key'
        if not locations:
            return [Issue(type=IssueType.OBJECT_KEY_MISUSE, message=message, key=key)]
        return [
            Issue(
                type=IssueType.OBJECT_KEY_MISUSE,
                message=message,
                file=location.file,
                key=key,
                line=location.line,
                column=location.column,
            )
            for location in locations
        ]
