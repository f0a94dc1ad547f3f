def contains_point(obj, x, y):
    """Inclusive bounding-box test: [x, x+width] x [y, y+height]."""
    return (obj.x <= x <= obj.x + obj.width and
            obj.y <= y <= obj.y + obj.height)


def is_pickable(obj):
    """Hidden and locked objects still render but never take pointer input."""
    return obj.visible and not obj.locked


def objects_at(point, objects):
    """All pickable objects under `point`, topmost first."""
    x, y = point
    return [obj for obj in reversed(objects) if is_pickable(obj) and contains_point(obj, x, y)]


def object_at(point, objects):
    """
    Returns the topmost pickable object containing the world `point`.
    `objects` is in paint order (back to front), so the scan runs from the
    last element backward; the first match wins even when boxes overlap.
    """
    x, y = point
    for obj in reversed(objects):
        if not is_pickable(obj):
            continue
        if contains_point(obj, x, y):
            return obj
    return None
