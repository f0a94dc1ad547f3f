from state import MAX_ZOOM, MIN_ZOOM


def world_to_screen(point, zoom, pan):
    """
    Maps a world point onto the canvas surface.
    Mirrors the renderer: scale by `zoom`, then translate by `pan`,
    so a world point lands at (world + pan) * zoom.
    """
    return ((point[0] + pan[0]) * zoom, (point[1] + pan[1]) * zoom)


def screen_to_world(point, zoom, pan):
    """Inverse of world_to_screen: world = screen / zoom - pan, per axis."""
    return (point[0] / zoom - pan[0], point[1] / zoom - pan[1])


def snap(value, grid_size):
    """Rounds `value` to the nearest multiple of `grid_size`."""
    if grid_size <= 0:
        return value
    return round(value / grid_size) * grid_size


def snap_point(point, grid_size):
    return (snap(point[0], grid_size), snap(point[1], grid_size))


def clamp_zoom(zoom, min_zoom=MIN_ZOOM, max_zoom=MAX_ZOOM):
    return max(min_zoom, min(max_zoom, zoom))
