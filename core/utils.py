def clamp(value, low=0, high=100):
    return max(low, min(high, value))


def percentage(raw, maximum) -> int:
    """Share of the theoretical maximum as a whole-number percentage (0..100)."""
    if maximum <= 0:
        return 0
    # half up: 12.5 -> 13 (round() would give 12)
    return int(clamp(int(100 * raw / maximum + 0.5)))
