import pygame

LABEL_FONT_SIZE = 12  # world units; scaled by zoom when drawn

font_cache = {}  # pixel size -> pygame.font.Font

def get_label_font(pixel_size):
    """Get the default font at `pixel_size`, loading it once per size."""
    pixel_size = max(1, int(round(pixel_size)))
    font = font_cache.get(pixel_size)
    if font is None:
        if not pygame.font.get_init():
            pygame.font.init()
        font = pygame.font.Font(None, pixel_size)
        font_cache[pixel_size] = font
    return font

def clear_font_cache():
    """Clear the font cache, e.g. after pygame.quit() invalidated the fonts."""
    font_cache.clear()
