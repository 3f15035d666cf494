"""Line diff using Myers' O(ND) algorithm, rendered in unified format."""

from typing import NamedTuple

CONTEXT_LINES = 3


class Edit(NamedTuple):
    """One step of an edit script.

    ``a_pos``/``b_pos`` count the lines of each side consumed before this step.
    """

    op: str  # " ", "-" or "+"
    a_pos: int
    b_pos: int
    text: str


def _split_lines(text: str) -> list[str]:
    if not text:
        return []
    return text.split("\n")


def _shortest_edit_trace(a: list[str], b: list[str]) -> list[list[int]]:
    n, m = len(a), len(b)
    offset = n + m
    v = [0] * (2 * offset + 2)
    trace: list[list[int]] = []

    for d in range(offset + 1):
        trace.append(v[:])
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[offset + k - 1] < v[offset + k + 1]):
                x = v[offset + k + 1]
            else:
                x = v[offset + k - 1] + 1
            y = x - k
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            v[offset + k] = x
            if x >= n and y >= m:
                return trace
    return trace


def edit_script(a: list[str], b: list[str]) -> list[Edit]:
    """Shortest edit script turning ``a`` into ``b``, in forward order."""
    trace = _shortest_edit_trace(a, b)
    offset = len(a) + len(b)
    x, y = len(a), len(b)
    steps: list[tuple[str, int, int]] = []

    for d in range(len(trace) - 1, -1, -1):
        v = trace[d]
        k = x - y
        if k == -d or (k != d and v[offset + k - 1] < v[offset + k + 1]):
            prev_k = k + 1
        else:
            prev_k = k - 1
        prev_x = v[offset + prev_k]
        prev_y = prev_x - prev_k

        while x > prev_x and y > prev_y:
            steps.append((" ", x - 1, y - 1))
            x -= 1
            y -= 1
        if d > 0:
            if x == prev_x:
                steps.append(("+", x, y - 1))
            else:
                steps.append(("-", x - 1, y))
        x, y = prev_x, prev_y

    edits = []
    for op, i, j in reversed(steps):
        text = b[j] if op == "+" else a[i]
        edits.append(Edit(op, i, j, text))
    return edits


def _hunk_range(start: int, count: int) -> str:
    if count == 0:
        return f"{start},0"
    if count == 1:
        return f"{start + 1}"
    return f"{start + 1},{count}"


def unified_diff(
    a: str,
    b: str,
    from_label: str = "a",
    to_label: str = "b",
    context: int = CONTEXT_LINES,
) -> str:
    """Unified diff of two texts, compared line by line.

    Args:
        a: Old text
        b: New text
        from_label: Name printed on the ``---`` line
        to_label: Name printed on the ``+++`` line
        context: Unchanged lines kept around each change

    Returns:
        The diff, or an empty string if the texts have the same lines
    """
    edits = edit_script(_split_lines(a), _split_lines(b))
    changes = [i for i, e in enumerate(edits) if e.op != " "]
    if not changes:
        return ""

    groups: list[tuple[int, int]] = []
    start = end = changes[0]
    for i in changes[1:]:
        if i - end - 1 > 2 * context:
            groups.append((start, end))
            start = i
        end = i
    groups.append((start, end))

    lines = [f"--- {from_label}", f"+++ {to_label}"]
    for first, last in groups:
        hunk = edits[max(0, first - context):min(len(edits), last + context + 1)]
        a_count = sum(1 for e in hunk if e.op != "+")
        b_count = sum(1 for e in hunk if e.op != "-")
        lines.append(
            f"@@ -{_hunk_range(hunk[0].a_pos, a_count)} +{_hunk_range(hunk[0].b_pos, b_count)} @@"
        )
        lines.extend(e.op + e.text for e in hunk)
    return "\n".join(lines) + "\n"
