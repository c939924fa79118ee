import random
from dataclasses import dataclass

# ============================================================
# ========================= STEP RECORDS =====================
# ============================================================


@dataclass(frozen=True)
class Step:
    """
    One unit of algorithmic progress.

    Attributes
    ----------
    array           : tuple  : full snapshot of the array at this instant
    compare_indexes : tuple  : positions compared this step (0, 1 or 2 entries)
    swapped_indexes : tuple  : positions mutated / placed this step
    comparisons     : int    : running comparison count for this driver call
    swaps           : int    : running swap count for this driver call
    """
    array: tuple
    compare_indexes: tuple = ()
    swapped_indexes: tuple = ()
    comparisons: int = 0
    swaps: int = 0


@dataclass
class SortStats:
    """Counter pair owned by exactly one driver call; passed explicitly to every helper."""
    comparisons: int = 0
    swaps: int = 0

    def step(self, arr, compare=(), swapped=()) -> Step:
        return Step(tuple(arr), tuple(compare), tuple(swapped), self.comparisons, self.swaps)


# ============================================================
# ==================== SHUFFLE / ACCENT ======================
# ============================================================

def shuffle(arr, yield_compare=True, rng=None):
    """Fisher-Yates from the end. Exchanges are reported as compare highlights."""
    rng = rng or random
    stats = SortStats()
    for i in range(len(arr) - 1, 0, -1):
        j = rng.randint(0, i)
        arr[i], arr[j] = arr[j], arr[i]; stats.swaps += 1
        yield stats.step(arr, compare=(i, j))


def accent(arr, yield_compare=True):
    """Sweep-highlight an already sorted array left to right."""
    for i in range(len(arr)):
        yield Step(tuple(arr), swapped_indexes=(i,))
    yield Step(tuple(arr))

# ============================================================
# ===================== SORTING ALGORITHMS ===================
# ============================================================

def _merge(arr, left, mid, right, stats, yield_compare):
    before = arr[left:right + 1]
    merged = []; i, j = left, mid + 1
    while i <= mid and j <= right:
        stats.comparisons += 1
        if yield_compare: yield stats.step(arr, compare=(i, j))
        if arr[i] <= arr[j]: merged.append(arr[i]); i += 1
        else:                merged.append(arr[j]); j += 1
    merged.extend(arr[i:mid + 1]); merged.extend(arr[j:right + 1])
    arr[left:right + 1] = merged

    # positions whose value differs from the pre-merge snapshot, not element moves
    changed = [k for k in range(left, right + 1) if arr[k] != before[k - left]]
    if changed:
        stats.swaps += len(changed)
        yield stats.step(arr, swapped=changed)


def _merge_sort(arr, left, right, stats, yield_compare):
    if left < right:
        mid = (left + right) // 2
        yield from _merge_sort(arr, left, mid, stats, yield_compare)
        yield from _merge_sort(arr, mid + 1, right, stats, yield_compare)
        yield from _merge(arr, left, mid, right, stats, yield_compare)


def merge_sort(arr, yield_compare=True):
    stats = SortStats()
    yield from _merge_sort(arr, 0, len(arr) - 1, stats, yield_compare)
    yield stats.step(arr)


def selection_sort(arr, yield_compare=True):
    """
    Scans carry the previous exchange as a swap highlight, so the strip shows
    what just moved next to what is being scanned.
    """
    stats = SortStats(); n = len(arr); previous = ()
    for i in range(n - 1):
        mi = i
        for j in range(i + 1, n):
            stats.comparisons += 1
            if yield_compare: yield stats.step(arr, compare=(i, j), swapped=previous)
            if arr[j] < arr[mi]: mi = j
        if mi != i:
            arr[i], arr[mi] = arr[mi], arr[i]; stats.swaps += 1
            previous = (i, mi)
            yield stats.step(arr, swapped=previous)
    yield stats.step(arr)


def insertion_sort(arr, yield_compare=True):
    stats = SortStats(); previous = ()
    for i in range(1, len(arr)):
        key = arr[i]; j = i - 1
        while j >= 0:
            stats.comparisons += 1
            if yield_compare: yield stats.step(arr, compare=(j, j + 1), swapped=previous)
            if arr[j] <= key: break
            arr[j + 1] = arr[j]; j -= 1; stats.swaps += 1
            previous = (j + 1, j + 2)
        arr[j + 1] = key
        yield stats.step(arr, swapped=previous)
    yield stats.step(arr)


def binary_insertion_sort(arr, yield_compare=True):
    stats = SortStats(); previous = ()
    for i in range(1, len(arr)):
        key = arr[i]; lo, hi = 0, i - 1; insert_at = i
        while lo <= hi:
            mid = (lo + hi) // 2; stats.comparisons += 1
            # probe highlighted against the element being placed
            if yield_compare: yield stats.step(arr, compare=(mid, i), swapped=previous)
            if arr[mid] > key: hi = mid - 1; insert_at = mid
            else:              lo = mid + 1
        for k in range(i - 1, insert_at - 1, -1):
            arr[k + 1] = arr[k]; stats.swaps += 1
            previous = (k, k + 1)
        arr[insert_at] = key
        yield stats.step(arr, swapped=previous)
    yield stats.step(arr)


def _partition(arr, low, high, stats, yield_compare):
    pivot = arr[high]; i = low - 1
    for j in range(low, high):
        stats.comparisons += 1
        if yield_compare: yield stats.step(arr, compare=(j, high))
        if arr[j] <= pivot:
            i += 1; arr[i], arr[j] = arr[j], arr[i]; stats.swaps += 1
            yield stats.step(arr, swapped=(i, j))
    arr[i + 1], arr[high] = arr[high], arr[i + 1]; stats.swaps += 1
    yield stats.step(arr, swapped=(i + 1, high))
    return i + 1


def _quick_sort(arr, low, high, stats, yield_compare):
    if low < high:
        p = yield from _partition(arr, low, high, stats, yield_compare)
        yield from _quick_sort(arr, low, p - 1, stats, yield_compare)
        yield from _quick_sort(arr, p + 1, high, stats, yield_compare)
    # heartbeat: marks the end of this recursion frame in the playback queue
    yield stats.step(arr)


def quick_sort(arr, yield_compare=True):
    stats = SortStats()
    yield from _quick_sort(arr, 0, len(arr) - 1, stats, yield_compare)


def bubble_sort(arr, yield_compare=True):
    stats = SortStats(); n = len(arr)
    for i in range(n - 1):
        swapped = False
        for j in range(n - 1 - i):
            stats.comparisons += 1
            if yield_compare: yield stats.step(arr, compare=(j, j + 1))
            if arr[j] > arr[j + 1]:
                arr[j], arr[j + 1] = arr[j + 1], arr[j]; stats.swaps += 1; swapped = True
                yield stats.step(arr, swapped=(j, j + 1))
        if not swapped: break
    yield stats.step(arr)


def cocktail_sort(arr, yield_compare=True):
    stats = SortStats(); start, end = 0, len(arr) - 1
    while start < end:
        swapped = False
        for i in range(start, end):
            stats.comparisons += 1
            if yield_compare: yield stats.step(arr, compare=(i, i + 1))
            if arr[i] > arr[i + 1]:
                arr[i], arr[i + 1] = arr[i + 1], arr[i]; stats.swaps += 1; swapped = True
                yield stats.step(arr, swapped=(i, i + 1))
        if not swapped: break
        end -= 1

        swapped = False
        for i in range(end, start, -1):
            stats.comparisons += 1
            if yield_compare: yield stats.step(arr, compare=(i - 1, i))
            if arr[i - 1] > arr[i]:
                arr[i - 1], arr[i] = arr[i], arr[i - 1]; stats.swaps += 1; swapped = True
                yield stats.step(arr, swapped=(i - 1, i))
        if not swapped: break
        start += 1
    yield stats.step(arr)


def gnome_sort(arr, yield_compare=True):
    stats = SortStats(); index = 0
    while index < len(arr):
        if index == 0: index += 1; continue
        stats.comparisons += 1
        if yield_compare: yield stats.step(arr, compare=(index - 1, index))
        if arr[index] >= arr[index - 1]:
            index += 1
        else:
            arr[index], arr[index - 1] = arr[index - 1], arr[index]; stats.swaps += 1
            yield stats.step(arr, swapped=(index - 1, index))
            index -= 1
    yield stats.step(arr)


def comb_sort(arr, yield_compare=True, shrink=1.3):
    stats = SortStats(); n = len(arr); gap = n; done = False
    while not done:
        gap = int(gap / shrink)
        if gap <= 1: gap = 1; done = True
        for i in range(n - gap):
            stats.comparisons += 1
            if yield_compare: yield stats.step(arr, compare=(i, i + gap))
            if arr[i] > arr[i + gap]:
                arr[i], arr[i + gap] = arr[i + gap], arr[i]; stats.swaps += 1; done = False
                yield stats.step(arr, swapped=(i, i + gap))
    yield stats.step(arr)


def shell_sort(arr, yield_compare=True):
    stats = SortStats(); n = len(arr); gap = n // 2
    while gap > 0:
        for i in range(gap, n):
            temp = arr[i]; j = i
            while j >= gap:
                stats.comparisons += 1
                if yield_compare: yield stats.step(arr, compare=(j, j - gap))
                if arr[j - gap] <= temp: break
                arr[j] = arr[j - gap]; stats.swaps += 1
                yield stats.step(arr, swapped=(j, j - gap))
                j -= gap
            arr[j] = temp
            if j != i: yield stats.step(arr, swapped=(j,))
        gap //= 2
    yield stats.step(arr)


def _heapify(arr, n, i, stats, yield_compare):
    largest = i
    for child in (2 * i + 1, 2 * i + 2):
        if child < n:
            stats.comparisons += 1
            if yield_compare: yield stats.step(arr, compare=(largest, child))
            if arr[child] > arr[largest]: largest = child
    if largest != i:
        arr[i], arr[largest] = arr[largest], arr[i]; stats.swaps += 1
        yield stats.step(arr, swapped=(i, largest))
        yield from _heapify(arr, n, largest, stats, yield_compare)


def heap_sort(arr, yield_compare=True):
    stats = SortStats(); n = len(arr)
    for i in range(n // 2 - 1, -1, -1):
        yield from _heapify(arr, n, i, stats, yield_compare)
    for i in range(n - 1, 0, -1):
        arr[0], arr[i] = arr[i], arr[0]; stats.swaps += 1
        yield stats.step(arr, swapped=(0, i))
        yield from _heapify(arr, i, 0, stats, yield_compare)
    yield stats.step(arr)


def _odd_even_phase(arr, first, stats, yield_compare):
    swapped = False
    for i in range(first, len(arr) - 1, 2):
        stats.comparisons += 1
        if yield_compare: yield stats.step(arr, compare=(i, i + 1))
        if arr[i] > arr[i + 1]:
            arr[i], arr[i + 1] = arr[i + 1], arr[i]; stats.swaps += 1; swapped = True
            yield stats.step(arr, swapped=(i, i + 1))
    return swapped


def odd_even_sort(arr, yield_compare=True):
    stats = SortStats(); s = False
    while not s:
        odd  = yield from _odd_even_phase(arr, 1, stats, yield_compare)
        even = yield from _odd_even_phase(arr, 0, stats, yield_compare)
        s = not (odd or even)
    yield stats.step(arr)


def _bitonic_merge(arr, low, cnt, ascending, stats, yield_compare):
    if cnt <= 1: return
    mid = cnt // 2
    for i in range(low, low + mid):
        stats.comparisons += 1
        if yield_compare: yield stats.step(arr, compare=(i, i + mid))
        if (arr[i] > arr[i + mid]) == ascending:
            arr[i], arr[i + mid] = arr[i + mid], arr[i]; stats.swaps += 1
            yield stats.step(arr, swapped=(i, i + mid))
    yield from _bitonic_merge(arr, low, mid, ascending, stats, yield_compare)
    yield from _bitonic_merge(arr, low + mid, mid, ascending, stats, yield_compare)


def _bitonic_sort(arr, low, cnt, ascending, stats, yield_compare):
    if cnt <= 1: return
    mid = cnt // 2
    yield from _bitonic_sort(arr, low, mid, True, stats, yield_compare)
    yield from _bitonic_sort(arr, low + mid, mid, False, stats, yield_compare)
    yield from _bitonic_merge(arr, low, cnt, ascending, stats, yield_compare)


def bitonic_sort(arr, yield_compare=True, ascending=True):
    """Power-of-two lengths only; other lengths are not checked and may stay unsorted."""
    stats = SortStats()
    yield from _bitonic_sort(arr, 0, len(arr), ascending, stats, yield_compare)
    yield stats.step(arr)


def _cycle_destination(arr, cs, item, stats, yield_compare):
    pos = cs
    for i in range(cs + 1, len(arr)):
        stats.comparisons += 1
        if arr[i] < item: pos += 1
        if yield_compare: yield stats.step(arr, compare=(i,))
    return pos


def cycle_sort(arr, yield_compare=True):
    stats = SortStats(); n = len(arr)
    for cs in range(n - 1):
        item = arr[cs]
        pos = yield from _cycle_destination(arr, cs, item, stats, yield_compare)
        if pos == cs: continue
        # skip every slot already holding an equal value
        while item == arr[pos]: pos += 1
        arr[pos], item = item, arr[pos]; stats.swaps += 1
        yield stats.step(arr, swapped=(pos,))
        while pos != cs:
            pos = yield from _cycle_destination(arr, cs, item, stats, yield_compare)
            while item == arr[pos]: pos += 1
            arr[pos], item = item, arr[pos]; stats.swaps += 1
            yield stats.step(arr, swapped=(pos,))
    yield stats.step(arr)


def lsd_radix_sort(arr, yield_compare=True, base=10):
    """Non-negative integer keys. Only the copy-back counts as a swap."""
    stats = SortStats(); n = len(arr)
    mv, exp = max(arr, default=0), 1
    while mv // exp > 0:
        out = [0] * n; cnt = [0] * base
        for i in range(n):
            cnt[(arr[i] // exp) % base] += 1
            if yield_compare: yield stats.step(arr, compare=(i,))
        for d in range(1, base):
            cnt[d] += cnt[d - 1]
            if yield_compare: yield stats.step(arr)
        for i in range(n - 1, -1, -1):
            d = (arr[i] // exp) % base; cnt[d] -= 1; out[cnt[d]] = arr[i]
            if yield_compare: yield stats.step(arr, compare=(i,))
        for i in range(n):
            arr[i] = out[i]; stats.swaps += 1
            yield stats.step(arr, swapped=(i,))
        exp *= base
    yield stats.step(arr)

# ============================================================
# ========================= REGISTRY =========================
# ============================================================

# (display name, key, efficient)
ALGORITHMS = [
    ("Merge Sort",            "merge",            True),
    ("Selection Sort",        "selection",        False),
    ("Insertion Sort",        "insertion",        False),
    ("Binary Insertion Sort", "binary_insertion", False),
    ("Quick Sort",            "quick",            True),
    ("Bubble Sort",           "bubble",           False),
    ("Cocktail Shaker",       "cocktail",         False),
    ("Gnome Sort",            "gnome",            False),
    ("Comb Sort",             "comb",             True),
    ("Shell Sort",            "shell",            True),
    ("Heap Sort",             "heap",             True),
    ("Odd-Even Sort",         "oddeven",          False),
    ("Bitonic Sort",          "bitonic",          True),
    ("Cycle Sort",            "cycle",            False),
    ("LSD Radix Sort",        "lsd_radix",        True),
]

DRIVERS = {
    "merge":            merge_sort,
    "selection":        selection_sort,
    "insertion":        insertion_sort,
    "binary_insertion": binary_insertion_sort,
    "quick":            quick_sort,
    "bubble":           bubble_sort,
    "cocktail":         cocktail_sort,
    "gnome":            gnome_sort,
    "comb":             comb_sort,
    "shell":            shell_sort,
    "heap":             heap_sort,
    "oddeven":          odd_even_sort,
    "bitonic":          bitonic_sort,
    "cycle":            cycle_sort,
    "lsd_radix":        lsd_radix_sort,
}


def algorithm_info(key):
    for name, k, efficient in ALGORITHMS:
        if k == key: return name, efficient
    raise KeyError(f"Unknown key: {key}")


def get_generator(key, arr, yield_compare=True, **options):
    if key in DRIVERS: return DRIVERS[key](arr, yield_compare, **options)
    raise KeyError(f"Unknown key: {key}")
