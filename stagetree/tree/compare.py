"""
StageTree Tree: Structural comparison.

Two trees are compared as multisets, never positionally: each side's children
are sorted by a stable key (folder name, or item base name plus extension)
and then compared pairwise. compare_sorted_collections is the boolean
primitive; compare_folders walks both sides in merge order to report every
missing, unexpected or differing node by path.

Two siblings sharing a key on one side (possible only if a caller bypassed
add_item/add_sub_folder) is a caller contract violation; results are then
unspecified.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterator, List, Optional, Sequence, Tuple

from stagetree.tree.item import VirtualItem

if TYPE_CHECKING:
    from stagetree.tree.folder import VirtualFolder


class DifferenceKind(Enum):
    """Kinds of structural divergence."""

    NAME_MISMATCH = "name_mismatch"
    COUNT_MISMATCH = "count_mismatch"
    MISSING = "missing"  # In expected, not in actual
    UNEXPECTED = "unexpected"  # In actual, not in expected
    CONTENT_MISMATCH = "content_mismatch"


@dataclass(frozen=True)
class Difference:
    """One divergence between an expected and an actual tree."""

    path: str
    kind: DifferenceKind
    detail: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.path} ({self.detail})"


@dataclass
class ComparisonResult:
    """Outcome of a tree comparison: a verdict plus diagnostics."""

    match: bool
    differences: List[Difference] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.match

    def of_kind(self, kind: DifferenceKind) -> List[Difference]:
        return [d for d in self.differences if d.kind == kind]

    def summary(self) -> str:
        if self.match:
            return "Trees match"
        lines = [f"Trees differ ({len(self.differences)} difference(s))"]
        lines.extend(f"  {d}" for d in self.differences)
        return "\n".join(lines)


def compare_sorted_collections(
    left: Sequence[Any],
    right: Sequence[Any],
    key: Callable[[Any], Any],
    equals: Callable[[Any, Any], bool],
) -> bool:
    """Compare two collections as multisets.

    Short circuits on a count mismatch, otherwise sorts both sides by ``key``
    and applies ``equals`` pairwise.
    """
    if len(left) != len(right):
        return False
    for a, b in zip(sorted(left, key=key), sorted(right, key=key)):
        if not equals(a, b):
            return False
    return True


def _item_key(item: VirtualItem) -> Tuple[str, str]:
    return item.sort_key


def _folder_key(folder: "VirtualFolder") -> str:
    return folder.name


def items_equal(
    left: Sequence[VirtualItem], right: Sequence[VirtualItem], compare_contents: bool = True
) -> bool:
    """Boolean multiset comparison of two item collections."""
    return compare_sorted_collections(
        left,
        right,
        key=_item_key,
        equals=lambda a, b: a.equals(b, compare_contents=compare_contents),
    )


def folders_equal(
    left: "VirtualFolder", right: "VirtualFolder", compare_contents: bool = True
) -> bool:
    """Boolean deep comparison of two folders, recursing through sub folders."""
    if left.name != right.name:
        return False
    if not items_equal(left.items, right.items, compare_contents):
        return False
    return compare_sorted_collections(
        left.folders,
        right.folders,
        key=_folder_key,
        equals=lambda a, b: folders_equal(a, b, compare_contents),
    )


def _join(path: str, name: str) -> str:
    return f"{path}/{name}" if path else name


def _merge_sorted(
    left: Sequence[Any], right: Sequence[Any], key: Callable[[Any], Any]
) -> Iterator[Tuple[Optional[Any], Optional[Any]]]:
    """Yield (left, right) pairs by key; an unmatched side is None."""
    left = sorted(left, key=key)
    right = sorted(right, key=key)
    i = j = 0
    while i < len(left) and j < len(right):
        lk, rk = key(left[i]), key(right[j])
        if lk == rk:
            yield left[i], right[j]
            i += 1
            j += 1
        elif lk < rk:
            yield left[i], None
            i += 1
        else:
            yield None, right[j]
            j += 1
    for remaining in left[i:]:
        yield remaining, None
    for remaining in right[j:]:
        yield None, remaining


def _diff_items(
    expected: Sequence[VirtualItem],
    actual: Sequence[VirtualItem],
    compare_contents: bool,
    path: str,
    differences: List[Difference],
) -> None:
    if len(expected) != len(actual):
        differences.append(
            Difference(
                path,
                DifferenceKind.COUNT_MISMATCH,
                f"expected {len(expected)} item(s), found {len(actual)}",
            )
        )

    for exp, act in _merge_sorted(expected, actual, _item_key):
        if act is None:
            differences.append(
                Difference(_join(path, exp.name), DifferenceKind.MISSING, "item not found")
            )
        elif exp is None:
            differences.append(
                Difference(_join(path, act.name), DifferenceKind.UNEXPECTED, "item not expected")
            )
        elif compare_contents:
            exp_bytes, act_bytes = exp.get_contents(), act.get_contents()
            if exp_bytes != act_bytes:
                differences.append(
                    Difference(
                        _join(path, exp.name),
                        DifferenceKind.CONTENT_MISMATCH,
                        f"expected {len(exp_bytes)} byte(s), found {len(act_bytes)}",
                    )
                )


def _diff_folders(
    expected: "VirtualFolder",
    actual: "VirtualFolder",
    compare_contents: bool,
    path: str,
    differences: List[Difference],
) -> None:
    if expected.name != actual.name:
        differences.append(
            Difference(
                path,
                DifferenceKind.NAME_MISMATCH,
                f"expected folder '{expected.name}', found '{actual.name}'",
            )
        )
        return

    _diff_items(expected.items, actual.items, compare_contents, path, differences)

    if len(expected.folders) != len(actual.folders):
        differences.append(
            Difference(
                path,
                DifferenceKind.COUNT_MISMATCH,
                f"expected {len(expected.folders)} folder(s), found {len(actual.folders)}",
            )
        )

    for exp, act in _merge_sorted(expected.folders, actual.folders, _folder_key):
        if act is None:
            differences.append(
                Difference(_join(path, exp.name), DifferenceKind.MISSING, "folder not found")
            )
        elif exp is None:
            differences.append(
                Difference(_join(path, act.name), DifferenceKind.UNEXPECTED, "folder not expected")
            )
        else:
            _diff_folders(exp, act, compare_contents, _join(path, exp.name), differences)


def compare_items(
    expected: Sequence[VirtualItem],
    actual: Sequence[VirtualItem],
    compare_contents: bool = True,
    path: str = "",
) -> ComparisonResult:
    """Compare two item collections and report differences by name."""
    differences: List[Difference] = []
    _diff_items(expected, actual, compare_contents, path, differences)
    return ComparisonResult(match=not differences, differences=differences)


def compare_folders(
    expected: "VirtualFolder", actual: "VirtualFolder", compare_contents: bool = True
) -> ComparisonResult:
    """Deep, order-insensitive comparison of two folders with diagnostics."""
    differences: List[Difference] = []
    _diff_folders(expected, actual, compare_contents, expected.name, differences)
    return ComparisonResult(match=not differences, differences=differences)
